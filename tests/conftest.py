import os
import sys

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Ensure project root is on sys.path for 'infuser' imports
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from infuser import models  # noqa: F401 - ensure record types are registered
from infuser.db.tables import create_tables
from infuser.models.registry import registry
from tests.mocks.recording_store import RecordingRowStore


@pytest.fixture(autouse=True)
def _unbind_default_store():
    registry.bind_store(None)
    yield
    registry.bind_store(None)


@pytest.fixture
def store():
    return RecordingRowStore()


@pytest.fixture
def db_session():
    engine = create_engine("sqlite://")
    create_tables(engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    with TestingSessionLocal() as db:
        yield db
    engine.dispose()
