"""Repository classes encapsulating database operations.

Each repository is small and focused on a single aggregate (developers,
developer infos, projects, technologies and their links). Writes run
the statements built in `queries` inside one transaction: a write that
spans several statements is committed once and rolled back as a whole
on failure. Repositories return SQLModel objects for lookups and plain
dicts (column -> value) for written or joined rows.
"""

from contextlib import contextmanager
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from . import models, queries, schemas
from .errors import ConflictError

# SQLite stores integer keys as signed 64-bit values.
MAX_ID = 2 ** 63 - 1


class _Repository:
    def __init__(self, session: Session):
        self.session = session

    @contextmanager
    def _transaction(self, conflict_message: str = "Conflicting record."):
        """Commit everything executed in the block, or roll it all back.

        A storage integrity violation (unique index, foreign key) is
        reported as a `ConflictError` carrying `conflict_message`.
        """
        try:
            yield
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            raise ConflictError(conflict_message) from exc
        except Exception:
            self.session.rollback()
            raise

    def _get(self, model, key: int):
        """Load `model` by primary key; a key no row could hold is a miss."""
        if not -MAX_ID <= key <= MAX_ID:
            return None
        return self.session.get(model, key)

    def _returning(self, statement) -> Dict[str, Any]:
        return dict(self.session.exec(statement).mappings().one())

    def _rows(self, statement) -> List[Dict[str, Any]]:
        return [dict(row) for row in self.session.exec(statement).mappings().all()]


class DeveloperRepository(_Repository):
    """CRUD operations for `Developer` rows."""

    def get(self, developer_id: int) -> Optional[models.Developer]:
        """Get a `Developer` by primary key."""
        return self._get(models.Developer, developer_id)

    def get_by_email(self, email: str) -> Optional[models.Developer]:
        """Return a `Developer` by email or `None` if not found."""
        return self.session.exec(queries.developer_by_email(email)).first()

    def exists(self, developer_id: int) -> bool:
        return self.get(developer_id) is not None

    def create(self, record: schemas.DeveloperRecord) -> Dict[str, Any]:
        with self._transaction("Email already exists."):
            return self._returning(queries.insert_row(models.Developer, record.model_dump()))

    def update(self, developer_id: int, record: schemas.DeveloperRecord) -> Dict[str, Any]:
        with self._transaction("Email already exists."):
            return self._returning(queries.update_row(models.Developer, developer_id, record.model_dump()))

    def delete(self, developer: models.Developer) -> None:
        """Delete the developer's info row, then the developer itself.

        Projects owned by the developer go with it through the
        `ON DELETE CASCADE` foreign key.
        """
        info_id = developer.developer_infos_id
        with self._transaction():
            if info_id is not None:
                self.session.exec(queries.delete_row(models.DeveloperInfo, info_id))
            self.session.exec(queries.delete_row(models.Developer, developer.id))

    def list_joined(self) -> List[Dict[str, Any]]:
        return self._rows(queries.select_developers())

    def get_joined(self, developer_id: int) -> Optional[Dict[str, Any]]:
        rows = self._rows(queries.select_developer(developer_id))
        return rows[0] if rows else None

    def get_with_projects(self, developer_id: int) -> Optional[Dict[str, Any]]:
        """Return the developer's joined row with a nested `projects` list.

        Each entry of `projects` holds the project and technology columns
        of one joined row; a developer without projects gets an empty list.
        """
        rows = self._rows(queries.select_developer_with_projects(developer_id))
        if not rows:
            return None
        developer_keys = queries.labels(queries.developer_columns())
        project_keys = queries.labels(queries.project_columns())
        result = {key: rows[0][key] for key in developer_keys}
        result["projects"] = [
            {key: row[key] for key in project_keys} for row in rows if row["projectID"] is not None
        ]
        return result


class DeveloperInfoRepository(_Repository):
    """Create and update `DeveloperInfo` rows."""

    def get(self, info_id: int) -> Optional[models.DeveloperInfo]:
        return self._get(models.DeveloperInfo, info_id)

    def create_for(self, developer_id: int, record: schemas.DeveloperInfoRecord) -> Dict[str, Any]:
        """Insert an info row and back-link it from the developer.

        Both statements share one transaction, so a failed link leaves
        no orphan info row behind.
        """
        with self._transaction():
            info = self._returning(queries.insert_row(models.DeveloperInfo, record.model_dump()))
            self._returning(queries.link_developer_info(developer_id, info["id"]))
        return info

    def update(self, info_id: int, record: schemas.DeveloperInfoRecord) -> Dict[str, Any]:
        with self._transaction():
            return self._returning(queries.update_row(models.DeveloperInfo, info_id, record.model_dump()))


class ProjectRepository(_Repository):
    """CRUD operations for `Project` rows."""

    def get(self, project_id: int) -> Optional[models.Project]:
        return self._get(models.Project, project_id)

    def create(self, record: schemas.ProjectRecord) -> Dict[str, Any]:
        with self._transaction("Project references a missing developer."):
            return self._returning(queries.insert_row(models.Project, record.model_dump()))

    def update(self, project_id: int, record: schemas.ProjectRecord) -> Dict[str, Any]:
        with self._transaction("Project references a missing developer."):
            return self._returning(queries.update_row(models.Project, project_id, record.model_dump()))

    def delete(self, project_id: int) -> None:
        """Delete the project's technology links, then the project."""
        with self._transaction():
            self.session.exec(queries.delete_project_links(project_id))
            self.session.exec(queries.delete_row(models.Project, project_id))

    def list_joined(self) -> List[Dict[str, Any]]:
        return self._rows(queries.select_projects())

    def list_joined_for(self, project_id: int) -> List[Dict[str, Any]]:
        return self._rows(queries.select_project(project_id))


class TechnologyRepository(_Repository):
    """Read-only access to the seeded technology catalog."""

    def get_by_name(self, name: str) -> Optional[models.Technology]:
        return self.session.exec(queries.technology_by_name(name)).first()


class ProjectTechnologyRepository(_Repository):
    """Links between projects and catalog technologies."""

    def is_linked(self, project_id: int, technology_id: int) -> bool:
        stmt = queries.project_link_by_technology_id(project_id, technology_id)
        return self.session.exec(stmt).first() is not None

    def find_link_id(self, project_id: int, technology_name: str) -> Optional[int]:
        row = self.session.exec(queries.project_link_by_technology_name(project_id, technology_name)).first()
        return row[0] if row else None

    def create(self, record: schemas.ProjectTechnologyRecord) -> Dict[str, Any]:
        with self._transaction("Technology already added to this Project."):
            return self._returning(queries.insert_row(models.ProjectTechnology, record.model_dump()))

    def delete(self, link_id: int) -> None:
        with self._transaction():
            self.session.exec(queries.delete_row(models.ProjectTechnology, link_id))
