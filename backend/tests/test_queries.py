from datetime import date

import pytest
from sqlalchemy.dialects import sqlite

from devtracker import models, queries


def _sql(stmt) -> str:
    return str(stmt.compile(dialect=sqlite.dialect()))


def test_insert_uses_record_columns_and_returns_row():
    stmt = queries.insert_row(models.Developer, {"name": "Ana", "email": "ana@x.com"})
    sql = _sql(stmt)
    assert sql.startswith("INSERT INTO developers (name, email)")
    assert "RETURNING" in sql
    assert "ana@x.com" not in sql
    assert stmt.compile(dialect=sqlite.dialect()).params == {"name": "Ana", "email": "ana@x.com"}


def test_update_filters_on_bound_id():
    stmt = queries.update_row(models.Project, 5, {"name": "New", "end_date": date(2024, 1, 1)})
    compiled = stmt.compile(dialect=sqlite.dialect())
    sql = str(compiled)
    assert sql.startswith("UPDATE projects SET")
    assert "WHERE projects.id = ?" in sql
    assert "RETURNING" in sql
    assert 5 in compiled.params.values()


def test_unknown_column_is_rejected():
    with pytest.raises(ValueError):
        queries.insert_row(models.Developer, {"name": "Ana", "nickname": "an"})


def test_empty_values_are_rejected():
    with pytest.raises(ValueError):
        queries.update_row(models.Developer, 1, {})


def test_developer_read_left_joins_info():
    sql = _sql(queries.select_developers())
    assert "LEFT OUTER JOIN developer_infos" in sql
    for label in ("developerID", "developerName", "developerEmail", "developerInfoID",
                  "developerInfoDeveloperSince", "developerInfoPreferredOS"):
        assert f'"{label}"' in sql or f" {label}" in sql


def test_developer_with_projects_joins_whole_chain():
    sql = _sql(queries.select_developer_with_projects(1))
    assert sql.count("LEFT OUTER JOIN") == 4
    assert "LEFT OUTER JOIN projects_technologies" in sql
    assert "LEFT OUTER JOIN technologies" in sql
    assert "WHERE developers.id = ?" in sql


def test_project_read_left_joins_technologies():
    sql = _sql(queries.select_project(2))
    assert sql.count("LEFT OUTER JOIN") == 2
    assert "WHERE projects.id = ?" in sql


def test_link_lookup_is_scoped_to_project():
    sql = _sql(queries.project_link_by_technology_name(3, "Python"))
    assert "projects_technologies.project_id = ?" in sql
    assert "technologies.name = ?" in sql
