"""Payload validation and partial-update merging.

Validators turn a raw JSON payload (optionally merged over a stored
row) into a complete record or raise a `DevTrackerError`. They do not
touch the database themselves; the one referential check (a project's
developer) is performed through a lookup callable supplied by the
caller.
"""

from typing import Any, Callable, Dict, List, Mapping, Optional, Type, TypeVar

import pydantic

from . import models, schemas
from .errors import ImmutabilityError, ReferentialError, UnsupportedTechnologyError, ValidationError

RecordT = TypeVar("RecordT", bound=pydantic.BaseModel)


def wire_names(model_cls: Type[pydantic.BaseModel]) -> List[str]:
    """Return the JSON names of `model_cls` fields in declaration order."""
    return [f.alias or name for name, f in model_cls.model_fields.items()]


def _describe(exc: pydantic.ValidationError) -> List[Dict[str, str]]:
    return [
        {"field": ".".join(str(part) for part in err["loc"]), "detail": err["msg"]}
        for err in exc.errors()
    ]


def _parse(patch_cls: Type[pydantic.BaseModel], payload: Any) -> pydantic.BaseModel:
    if not isinstance(payload, Mapping):
        raise ValidationError("Payload must be a JSON object.")
    try:
        return patch_cls.model_validate(dict(payload))
    except pydantic.ValidationError as exc:
        raise ValidationError("Invalid field values.", errors=_describe(exc)) from exc


def _stored_values(stored: Any, record_cls: Type[pydantic.BaseModel]) -> Dict[str, Any]:
    if isinstance(stored, Mapping):
        return {name: stored[name] for name in record_cls.model_fields if name in stored}
    return {name: getattr(stored, name) for name in record_cls.model_fields if hasattr(stored, name)}


def merge_and_validate(
    payload: Any,
    patch_cls: Type[pydantic.BaseModel],
    record_cls: Type[RecordT],
    stored: Any = None,
    defaults: Optional[Mapping[str, Any]] = None,
) -> RecordT:
    """Merge `payload` over `stored` and check every record field is present.

    Only keys the caller actually sent overwrite stored values, so a
    partial payload keeps everything else untouched. `defaults` fill in
    keys still absent after the merge. Presence is what counts: an
    explicit null is present, and is then rejected by the record's type
    if the field is not nullable.
    """
    patch = _parse(patch_cls, payload)
    data: Dict[str, Any] = {}
    if stored is not None:
        data.update(_stored_values(stored, record_cls))
    data.update(patch.model_dump(include=patch.model_fields_set))
    for key, value in (defaults or {}).items():
        data.setdefault(key, value)

    missing = [name for name in record_cls.model_fields if name not in data]
    if missing:
        required = wire_names(record_cls)
        raise ValidationError(f"Required keys are: {', '.join(required)}", keys=required)
    try:
        return record_cls.model_validate(data)
    except pydantic.ValidationError as exc:
        raise ValidationError("Invalid field values.", errors=_describe(exc)) from exc


def ensure_updatable(payload: Any, patch_cls: Type[pydantic.BaseModel]) -> None:
    """Reject update payloads that touch `id` or carry no updatable field."""
    if not isinstance(payload, Mapping):
        raise ValidationError("Payload must be a JSON object.")
    if "id" in payload:
        raise ImmutabilityError("Id is not editable.")
    keys = wire_names(patch_cls)
    if not any(key in payload for key in keys):
        raise ValidationError("At least one of those keys must be sent.", keys=keys)


def validate_developer(payload: Any, stored: Any = None) -> schemas.DeveloperRecord:
    return merge_and_validate(payload, schemas.DeveloperPatch, schemas.DeveloperRecord, stored)


def validate_developer_update(payload: Any, stored: Any) -> schemas.DeveloperRecord:
    ensure_updatable(payload, schemas.DeveloperPatch)
    return validate_developer(payload, stored)


def validate_developer_info(payload: Any, stored: Any = None) -> schemas.DeveloperInfoRecord:
    return merge_and_validate(payload, schemas.DeveloperInfoPatch, schemas.DeveloperInfoRecord, stored)


def validate_developer_info_update(payload: Any, stored: Any) -> schemas.DeveloperInfoRecord:
    ensure_updatable(payload, schemas.DeveloperInfoPatch)
    return validate_developer_info(payload, stored)


def validate_project(
    payload: Any,
    developer_exists: Callable[[int], bool],
    stored: Any = None,
) -> schemas.ProjectRecord:
    """Validate a project payload and confirm its developer exists.

    A missing or empty `endDate` is stored as null, which makes it
    optional even though it belongs to the required set.
    """
    if isinstance(payload, Mapping) and "endDate" in payload and not payload["endDate"]:
        payload = {**payload, "endDate": None}
    record = merge_and_validate(
        payload, schemas.ProjectPatch, schemas.ProjectRecord, stored, defaults={"end_date": None}
    )
    if not developer_exists(record.developer_id):
        raise ReferentialError("Developer not found.")
    return record


def validate_project_update(
    payload: Any,
    developer_exists: Callable[[int], bool],
    stored: Any,
) -> schemas.ProjectRecord:
    ensure_updatable(payload, schemas.ProjectPatch)
    return validate_project(payload, developer_exists, stored)


def ensure_supported_technology(name: Any) -> str:
    """Return `name` if it belongs to the catalog, else raise."""
    if name not in models.TECHNOLOGY_CATALOG:
        raise UnsupportedTechnologyError("Technology not supported.", options=list(models.TECHNOLOGY_CATALOG))
    return name


def validate_technology_name(payload: Any) -> str:
    """Extract the technology name from a link payload and check the catalog."""
    if not isinstance(payload, Mapping):
        raise ValidationError("Payload must be a JSON object.")
    if not payload.get("name"):
        raise ValidationError("Required keys are: name", keys=["name"])
    return ensure_supported_technology(payload["name"])
