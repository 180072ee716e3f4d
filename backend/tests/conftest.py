import os
import tempfile
from pathlib import Path

# Must run before `devtracker` is imported anywhere: settings and the
# engine are built at import time.
_TMP_DIR = Path(tempfile.mkdtemp(prefix="devtracker-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP_DIR / 'test.db'}"
os.environ["ENV"] = "dev"

import pytest  # noqa: E402
from sqlmodel import Session, SQLModel  # noqa: E402

from devtracker.database import create_db_and_tables, engine  # noqa: E402


@pytest.fixture(autouse=True)
def reset_db():
    """Give every test an empty schema with the technology catalog seeded."""
    SQLModel.metadata.drop_all(engine)
    create_db_and_tables()
    yield


@pytest.fixture
def session():
    with Session(engine) as s:
        yield s
