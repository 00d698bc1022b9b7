# transformation/tests/conftest.py
import os

import pytest
from fastapi.testclient import TestClient

# transformation.main builds a module-level app on import; keep it off disk
os.environ["STORAGE_BACKEND"] = "memory"

from transformation.config import Config, StorageConfig  # noqa: E402
from transformation.main import create_app  # noqa: E402
from transformation.storage import MemoryRecordStore, SQLiteRecordStore  # noqa: E402


@pytest.fixture
def app():
    """Application backed by a fresh in-memory store."""
    return create_app(Config(storage=StorageConfig(backend="memory")))


@pytest.fixture
def client(app):
    """FastAPI test client fixture."""
    return TestClient(app)


@pytest.fixture
def store(app):
    """The record store behind the ``client`` fixture."""
    return app.state.store


@pytest.fixture(params=["memory", "sqlite"])
def record_store(request, tmp_path):
    """Each record store backend, for contract tests."""
    if request.param == "memory":
        store = MemoryRecordStore()
    else:
        store = SQLiteRecordStore(tmp_path / "transformation.db")
    yield store
    store.close()


@pytest.fixture
def task_payload():
    return {"title": "Write my novel chapter", "weekStart": "2026-10-12"}


@pytest.fixture
def daily_payload():
    return {
        "date": "2026-10-14",
        "morningIntention": "Show up for ten minutes",
        "energyLevel": 6,
    }


@pytest.fixture
def reflection_payload():
    return {
        "promptId": "resistance",
        "promptText": "What resistance did you notice in yourself today?",
        "response": "Avoided the hard email",
        "date": "2026-10-14",
    }


@pytest.fixture
def review_payload():
    return {
        "weekStart": "2026-10-12",
        "weekEnd": "2026-10-18",
        "proudActions": "Wrote every morning",
        "growthLevel": 4,
        "promisesKept": 4,
        "totalPromises": 5,
    }
