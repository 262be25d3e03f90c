"""Shared pytest fixtures for all tests."""

import os
from datetime import datetime, timezone

# Keep tests off any real Redis and let them drive the clock
os.environ.setdefault("USE_IN_MEMORY", "1")
os.environ.setdefault("TEST_MODE", "1")

import pytest
from fastapi.testclient import TestClient

from app.config import Settings, get_settings
from app.database import InMemoryBackend
from app.dependencies import get_store
from app.main import app
from app.paste import to_epoch_ms
from app.store import PasteStore


@pytest.fixture
def t0():
    """
    Fixed creation instant.

    Returns:
        Aware UTC datetime with whole-millisecond precision
    """
    return datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def backend():
    """Fresh in-memory backend."""
    return InMemoryBackend()


@pytest.fixture
def store(backend):
    """Paste store on the in-memory backend."""
    return PasteStore(backend)


@pytest.fixture
def test_settings(monkeypatch):
    """
    Settings with TEST_MODE on and a fixed APP_DOMAIN.

    Args:
        monkeypatch: pytest monkeypatch fixture

    Returns:
        Settings instance
    """
    monkeypatch.setenv("TEST_MODE", "1")
    monkeypatch.setenv("APP_DOMAIN", "https://paste.example.com/")
    return Settings()


@pytest.fixture
def client(store, test_settings):
    """Create FastAPI test client wired to the test store."""
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_settings] = lambda: test_settings
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def at():
    """Build the x-test-now-ms header for an instant."""

    def _headers(moment):
        return {"x-test-now-ms": str(to_epoch_ms(moment))}

    return _headers
