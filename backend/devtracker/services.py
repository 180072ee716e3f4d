"""Business logic services used by HTTP controllers.

This module holds small service classes that coordinate validators,
statement construction and repositories. Services receive raw payloads
plus any entity already loaded by the existence guards, validate and
merge them, then persist through repositories. They raise
`DevTrackerError` subclasses; translating those into responses is the
controllers' job.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlmodel import Session

from . import guards, models, repositories, schemas, validators
from .errors import ConflictError, NotFoundError, NotLinkedError

logger = logging.getLogger("devtracker.services")


class DeveloperService:
    """Create, read, update and delete developers."""
    def __init__(self, session: Session):
        self.session = session
        self.repo = repositories.DeveloperRepository(session)

    def create(self, payload: Any) -> schemas.DeveloperRead:
        """Create a developer after the email gate and required-field checks."""
        guards.ensure_email_available(self.session, payload)
        record = validators.validate_developer(payload)
        row = self.repo.create(record)
        logger.info("developer_created id=%s", row["id"])
        return schemas.DeveloperRead.model_validate(row)

    def list(self) -> List[Dict[str, Any]]:
        return self.repo.list_joined()

    def get(self, developer: models.Developer) -> Optional[Dict[str, Any]]:
        return self.repo.get_joined(developer.id)

    def get_with_projects(self, developer: models.Developer) -> Optional[Dict[str, Any]]:
        return self.repo.get_with_projects(developer.id)

    def update(self, developer: models.Developer, payload: Any) -> schemas.DeveloperRead:
        """Apply a partial update on top of the stored developer."""
        record = validators.validate_developer_update(payload, developer)
        row = self.repo.update(developer.id, record)
        logger.info("developer_updated id=%s", row["id"])
        return schemas.DeveloperRead.model_validate(row)

    def delete(self, developer: models.Developer) -> None:
        developer_id = developer.id
        self.repo.delete(developer)
        logger.info("developer_deleted id=%s", developer_id)


class DeveloperInfoService:
    """Manage the info sub-resource of a developer."""
    def __init__(self, session: Session):
        self.session = session
        self.repo = repositories.DeveloperInfoRepository(session)

    def create(self, developer: models.Developer, payload: Any) -> schemas.DeveloperInfoRead:
        """Create the info row and link it from `developer`.

        A developer has at most one info row; a second create is a
        conflict rather than silently orphaning the first row.
        """
        if developer.developer_infos_id is not None:
            raise ConflictError("Developer info already exists.")
        record = validators.validate_developer_info(payload)
        row = self.repo.create_for(developer.id, record)
        logger.info("developer_info_created id=%s developer_id=%s", row["id"], developer.id)
        return schemas.DeveloperInfoRead.model_validate(row)

    def update(self, developer: models.Developer, payload: Any) -> schemas.DeveloperInfoRead:
        info = self.repo.get(developer.developer_infos_id) if developer.developer_infos_id is not None else None
        if info is None:
            raise NotFoundError("Developer info not found.")
        record = validators.validate_developer_info_update(payload, info)
        row = self.repo.update(info.id, record)
        logger.info("developer_info_updated id=%s", row["id"])
        return schemas.DeveloperInfoRead.model_validate(row)


class ProjectService:
    """Create, read, update and delete projects."""
    def __init__(self, session: Session):
        self.session = session
        self.repo = repositories.ProjectRepository(session)
        self.developers = repositories.DeveloperRepository(session)

    def create(self, payload: Any) -> schemas.ProjectRead:
        record = validators.validate_project(payload, self.developers.exists)
        row = self.repo.create(record)
        logger.info("project_created id=%s developer_id=%s", row["id"], row["developer_id"])
        return schemas.ProjectRead.model_validate(row)

    def list(self) -> List[Dict[str, Any]]:
        return self.repo.list_joined()

    def get(self, project: models.Project) -> List[Dict[str, Any]]:
        return self.repo.list_joined_for(project.id)

    def update(self, project: models.Project, payload: Any) -> schemas.ProjectRead:
        """Apply a partial update; a changed `developerId` is re-checked."""
        record = validators.validate_project_update(payload, self.developers.exists, project)
        row = self.repo.update(project.id, record)
        logger.info("project_updated id=%s", row["id"])
        return schemas.ProjectRead.model_validate(row)

    def delete(self, project: models.Project) -> None:
        project_id = project.id
        self.repo.delete(project_id)
        logger.info("project_deleted id=%s", project_id)


class ProjectTechnologyService:
    """Link and unlink catalog technologies on a project.

    The catalog check runs before the project lookup, so an unsupported
    name is rejected whether or not the project exists.
    """
    def __init__(self, session: Session):
        self.session = session
        self.repo = repositories.ProjectTechnologyRepository(session)
        self.technologies = repositories.TechnologyRepository(session)

    def _technology(self, name: str) -> models.Technology:
        technology = self.technologies.get_by_name(name)
        if technology is None:
            raise NotFoundError("Technology not found.")
        return technology

    def add(self, project_id: int, payload: Any) -> None:
        name = validators.validate_technology_name(payload)
        project = guards.load_project(self.session, project_id)
        technology = self._technology(name)
        if self.repo.is_linked(project.id, technology.id):
            raise ConflictError("Technology already added to this Project.")
        record = schemas.ProjectTechnologyRecord(
            added_in=datetime.now(timezone.utc),
            project_id=project.id,
            technology_id=technology.id,
        )
        row = self.repo.create(record)
        logger.info("project_technology_added id=%s project_id=%s technology=%s", row["id"], project.id, name)

    def remove(self, project_id: int, name: str) -> None:
        validators.ensure_supported_technology(name)
        project = guards.load_project(self.session, project_id)
        link_id = self.repo.find_link_id(project.id, name)
        if link_id is None:
            raise NotLinkedError(f"Technology '{name}' not found on this Project.")
        self.repo.delete(link_id)
        logger.info("project_technology_removed project_id=%s technology=%s", project.id, name)
