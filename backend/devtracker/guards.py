"""Existence checks run before a handler touches a developer or project.

`load_developer` and `load_project` resolve a path identifier to the
stored row or raise `NotFoundError`; the `existing_*` wrappers expose
them as FastAPI dependencies so handlers receive the loaded entity as a
parameter. `ensure_email_available` gates developer creation.
"""

from typing import Any, Mapping

from fastapi import Depends
from sqlmodel import Session

from . import models, repositories
from .database import get_session
from .errors import ConflictError, NotFoundError, ValidationError


def load_developer(session: Session, developer_id: int) -> models.Developer:
    developer = repositories.DeveloperRepository(session).get(developer_id)
    if developer is None:
        raise NotFoundError("Developer not found.")
    return developer


def load_project(session: Session, project_id: int) -> models.Project:
    project = repositories.ProjectRepository(session).get(project_id)
    if project is None:
        raise NotFoundError("Project not found.")
    return project


def ensure_email_available(session: Session, payload: Any) -> None:
    """Reject a developer payload without an email or with a taken one.

    This is a check-then-act gate; the unique index on
    `developers.email` catches a concurrent duplicate at commit time.
    """
    email = payload.get("email") if isinstance(payload, Mapping) else None
    if not email:
        raise ValidationError("Email is required.")
    if not isinstance(email, str):
        raise ValidationError("Invalid field values.", errors=[{"field": "email", "detail": "Input should be a valid string"}])
    if repositories.DeveloperRepository(session).get_by_email(email) is not None:
        raise ConflictError("Email already exists.")


def existing_developer(developer_id: int, session: Session = Depends(get_session)) -> models.Developer:
    """FastAPI dependency returning the developer named in the path."""
    return load_developer(session, developer_id)


def existing_project(project_id: int, session: Session = Depends(get_session)) -> models.Project:
    """FastAPI dependency returning the project named in the path."""
    return load_project(session, project_id)
