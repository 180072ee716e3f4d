"""Database engine and helpers.

This module configures the SQLModel/SQLAlchemy engine from
`settings.DATABASE_URL` (a local SQLite file by default) and provides
the helpers used by the application and tests: table creation, the
technology catalog seed and a per-request session dependency.
"""

from sqlalchemy import event
from sqlmodel import SQLModel, Session, create_engine, select

from .config import settings
from . import models

connect_args = {}
if settings.DATABASE_URL.startswith("sqlite"):
    connect_args = {"check_same_thread": False}

engine = create_engine(settings.DATABASE_URL, echo=settings.SQL_ECHO, connect_args=connect_args)

if engine.dialect.name == "sqlite":
    @event.listens_for(engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_connection, _record):
        # SQLite ignores ON DELETE clauses unless this is switched on per connection
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_db_and_tables():
    """Create database tables using SQLModel metadata and seed the catalog.

    This function is intended for local development and lightweight
    deployments; it never alters existing tables.
    """
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        seed_technologies(session)


def seed_technologies(session: Session) -> int:
    """Insert any catalog technology missing from the `technologies` table.

    Returns the number of rows inserted. Running it twice is a no-op.
    """
    existing = set(session.exec(select(models.Technology.name)).all())
    missing = [name for name in models.TECHNOLOGY_CATALOG if name not in existing]
    for name in missing:
        session.add(models.Technology(name=name))
    if missing:
        session.commit()
    return len(missing)


def get_session():
    """Yield a database `Session` for FastAPI dependency injection.

    The generator yields a session and ensures it is closed when the
    request scope finishes.
    """
    with Session(engine) as session:
        yield session
