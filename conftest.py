"""Shared pytest fixtures for TaskHub tests."""

import pytest
from httpx import ASGITransport, AsyncClient

from app.core.config import get_settings
from app.main import app
from app.shared.documents import MemoryDocumentStore, get_document_store


@pytest.fixture
def api_settings(monkeypatch, tmp_path):
    """Testing environment with snapshots under a temporary directory."""
    monkeypatch.setenv("APP_ENV", "testing")
    monkeypatch.setenv("SEEDER_BACKUP_DIR", str(tmp_path / "backups"))
    monkeypatch.setenv("SEEDER_PASSWORD_ROUNDS", "4")
    monkeypatch.setenv("SEEDER_ENABLE_PROGRESS", "false")
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()


@pytest.fixture
def api_store(api_settings):
    """In-memory document store injected into every route."""
    store = MemoryDocumentStore("api-test")

    async def override():
        yield store

    app.dependency_overrides[get_document_store] = override
    yield store
    app.dependency_overrides.pop(get_document_store, None)


@pytest.fixture
async def client(api_store):
    """Create async HTTP client for testing FastAPI endpoints."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
