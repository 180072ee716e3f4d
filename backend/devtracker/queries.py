"""SQL statement construction.

Write statements are built from validated records with SQLAlchemy Core,
so every value (including the row filter) is a bound parameter. Column
lists are restricted to the target table's own columns. Reads are fixed
LEFT JOIN selects whose labels form the public shape of the joined
responses.
"""

from typing import Any, Mapping, Type

from sqlalchemy import Table, and_, delete, insert, select, update
from sqlmodel import SQLModel, select as select_model

from . import models

developers: Table = models.Developer.__table__
developer_infos: Table = models.DeveloperInfo.__table__
projects: Table = models.Project.__table__
technologies: Table = models.Technology.__table__
projects_technologies: Table = models.ProjectTechnology.__table__


def _table(model: Type[SQLModel]) -> Table:
    return model.__table__


def _checked_values(table: Table, values: Mapping[str, Any]) -> dict:
    unknown = [key for key in values if key not in table.c]
    if unknown:
        raise ValueError(f"unknown columns for {table.name}: {', '.join(unknown)}")
    if not values:
        raise ValueError(f"no columns given for {table.name}")
    return dict(values)


def insert_row(model: Type[SQLModel], values: Mapping[str, Any]):
    """INSERT `values` (column -> value) into the model's table, returning the row."""
    table = _table(model)
    return insert(table).values(**_checked_values(table, values)).returning(*table.c)


def update_row(model: Type[SQLModel], row_id: int, values: Mapping[str, Any]):
    """UPDATE the row with primary key `row_id`, returning the updated row."""
    table = _table(model)
    return (
        update(table)
        .where(table.c.id == row_id)
        .values(**_checked_values(table, values))
        .returning(*table.c)
    )


def delete_row(model: Type[SQLModel], row_id: int):
    table = _table(model)
    return delete(table).where(table.c.id == row_id)


def link_developer_info(developer_id: int, info_id: int):
    """Point a developer at its freshly created info row."""
    return update_row(models.Developer, developer_id, {"developer_infos_id": info_id})


def delete_project_links(project_id: int):
    return delete(projects_technologies).where(projects_technologies.c.project_id == project_id)


# --- fixed reads -------------------------------------------------------------

def labels(columns) -> tuple:
    return tuple(column.name for column in columns)


def developer_columns():
    return (
        developers.c.id.label("developerID"),
        developers.c.name.label("developerName"),
        developers.c.email.label("developerEmail"),
        developer_infos.c.id.label("developerInfoID"),
        developer_infos.c.developer_since.label("developerInfoDeveloperSince"),
        developer_infos.c.preferred_os.label("developerInfoPreferredOS"),
    )


def project_columns():
    return (
        projects.c.id.label("projectID"),
        projects.c.name.label("projectName"),
        projects.c.description.label("projectDescription"),
        projects.c.estimated_time.label("projectEstimatedTime"),
        projects.c.repository.label("projectRepository"),
        projects.c.start_date.label("projectStartDate"),
        projects.c.end_date.label("projectEndDate"),
        projects.c.developer_id.label("projectDeveloperID"),
        technologies.c.id.label("technologyID"),
        technologies.c.name.label("technologyName"),
    )


def _developer_join():
    return developers.outerjoin(developer_infos, developer_infos.c.id == developers.c.developer_infos_id)


def _project_technology_join(base):
    return base.outerjoin(
        projects_technologies, projects_technologies.c.project_id == projects.c.id
    ).outerjoin(technologies, technologies.c.id == projects_technologies.c.technology_id)


def select_developers():
    """Every developer with its info columns (null-filled when absent)."""
    return select(*developer_columns()).select_from(_developer_join()).order_by(developers.c.id)


def select_developer(developer_id: int):
    return select_developers().where(developers.c.id == developer_id)


def select_developer_with_projects(developer_id: int):
    """One row per (project, technology) pair of the developer.

    A developer without projects, or a project without technologies,
    still yields a row with the joined columns set to null.
    """
    joined = _project_technology_join(
        _developer_join().outerjoin(projects, projects.c.developer_id == developers.c.id)
    )
    return (
        select(*developer_columns(), *project_columns())
        .select_from(joined)
        .where(developers.c.id == developer_id)
        .order_by(projects.c.id, technologies.c.id)
    )


def select_projects():
    """Every project joined with its technologies."""
    return (
        select(*project_columns())
        .select_from(_project_technology_join(projects))
        .order_by(projects.c.id, technologies.c.id)
    )


def select_project(project_id: int):
    return select_projects().where(projects.c.id == project_id)


# --- lookups -----------------------------------------------------------------

def developer_by_email(email: str):
    return select_model(models.Developer).where(models.Developer.email == email)


def technology_by_name(name: str):
    return select_model(models.Technology).where(models.Technology.name == name)


def project_link_by_technology_id(project_id: int, technology_id: int):
    return select(projects_technologies.c.id).where(
        and_(
            projects_technologies.c.project_id == project_id,
            projects_technologies.c.technology_id == technology_id,
        )
    )


def project_link_by_technology_name(project_id: int, name: str):
    """Id of the link between `project_id` and the technology called `name`."""
    return (
        select(projects_technologies.c.id)
        .select_from(
            projects_technologies.join(technologies, technologies.c.id == projects_technologies.c.technology_id)
        )
        .where(and_(projects_technologies.c.project_id == project_id, technologies.c.name == name))
    )
