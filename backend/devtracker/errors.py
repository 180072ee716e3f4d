"""Domain error taxonomy.

Every failure the service reports to a client is one of the kinds in
`ErrorKind`. Each exception carries a message plus optional context
(`keys`, `options`, `errors`) that is merged into the response body so
callers can correct their request.
"""

from enum import Enum
from typing import Any, Dict


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    IMMUTABLE = "immutable"
    UNSUPPORTED = "unsupported"
    NOT_LINKED = "not_linked"
    REFERENTIAL = "referential"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"


STATUS_CODES: Dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.IMMUTABLE: 400,
    ErrorKind.UNSUPPORTED: 400,
    ErrorKind.NOT_LINKED: 400,
    ErrorKind.REFERENTIAL: 404,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
}


class DevTrackerError(Exception):
    """Base class for errors translated into client responses."""
    kind: ErrorKind

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.message = message
        self.context = context

    @property
    def status_code(self) -> int:
        return STATUS_CODES[self.kind]

    def to_body(self) -> Dict[str, Any]:
        return {"message": self.message, **self.context}


class ValidationError(DevTrackerError):
    """Required fields missing or field values of the wrong type."""
    kind = ErrorKind.VALIDATION


class ImmutabilityError(DevTrackerError):
    """Attempt to change an identifier."""
    kind = ErrorKind.IMMUTABLE


class UnsupportedValueError(DevTrackerError):
    """Technology name outside the catalog."""
    kind = ErrorKind.UNSUPPORTED


class UnsupportedTechnologyError(UnsupportedValueError):
    pass


class NotLinkedError(DevTrackerError):
    """Technology is not linked to the project it is removed from."""
    kind = ErrorKind.NOT_LINKED


class ReferentialError(DevTrackerError):
    """A referenced parent entity does not exist."""
    kind = ErrorKind.REFERENTIAL


class NotFoundError(DevTrackerError):
    kind = ErrorKind.NOT_FOUND


class ConflictError(DevTrackerError):
    kind = ErrorKind.CONFLICT
