"""SQLModel data models.

This module defines the application's database tables using SQLModel.
Table names follow the public schema (`developers`, `developer_infos`,
`projects`, `technologies`, `projects_technologies`); columns are
snake_case and the API exposes them under camelCase aliases (see
`schemas`).
"""

from datetime import date, datetime, timezone
from enum import Enum
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field


class TechnologyName(str, Enum):
    """The closed catalog of technologies a project may be linked to."""
    JAVASCRIPT = "JavaScript"
    PYTHON = "Python"
    REACT = "React"
    EXPRESS = "Express.js"
    HTML = "HTML"
    CSS = "CSS"
    DJANGO = "Django"
    POSTGRESQL = "PostgreSQL"
    MONGODB = "MongoDB"


TECHNOLOGY_CATALOG = tuple(t.value for t in TechnologyName)


class DeveloperInfo(SQLModel, table=True):
    """Profile details linked from exactly one `Developer`."""
    __tablename__ = "developer_infos"

    id: Optional[int] = Field(default=None, primary_key=True)
    developer_since: date
    preferred_os: str


class Developer(SQLModel, table=True):
    """A developer.

    Fields:
    - `email`: unique across all developers
    - `developer_infos_id`: optional link to the `DeveloperInfo` row,
      set once the info sub-resource is created
    """
    __tablename__ = "developers"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    email: str = Field(index=True, unique=True)
    developer_infos_id: Optional[int] = Field(
        default=None, foreign_key="developer_infos.id", ondelete="SET NULL"
    )


class Project(SQLModel, table=True):
    """A project owned by a developer. `end_date` stays null while ongoing."""
    __tablename__ = "projects"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    description: str
    estimated_time: str
    repository: str
    start_date: date
    end_date: Optional[date] = None
    developer_id: int = Field(foreign_key="developers.id", ondelete="CASCADE", index=True)


class Technology(SQLModel, table=True):
    """A catalog technology. Rows are seeded at startup and never edited."""
    __tablename__ = "technologies"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(unique=True)


class ProjectTechnology(SQLModel, table=True):
    """Join row between `Project` and `Technology`."""
    __tablename__ = "projects_technologies"
    __table_args__ = (UniqueConstraint("project_id", "technology_id"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    added_in: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    project_id: int = Field(foreign_key="projects.id", ondelete="CASCADE", index=True)
    technology_id: int = Field(foreign_key="technologies.id")
