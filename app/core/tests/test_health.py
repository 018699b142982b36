"""Tests for health check endpoints."""

import pytest

from app.main import app
from app.shared.documents import get_document_store


@pytest.mark.asyncio
async def test_health_check_returns_ok(client):
    """Health endpoint should return status ok."""
    response = await client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"


@pytest.mark.asyncio
async def test_readiness_reports_collections(client, api_store):
    """Readiness should report a connected store and its collections."""
    await api_store.collection("users").create({"_id": "u1"})

    response = await client.get("/health/ready")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "database": "connected", "collections": 1}


@pytest.mark.asyncio
async def test_readiness_reports_unreachable_store(client):
    """Readiness should degrade instead of failing when the store errors."""

    class BrokenStore:
        async def list_collections(self):
            raise OSError("connection refused")

    async def broken():
        yield BrokenStore()

    app.dependency_overrides[get_document_store] = broken

    response = await client.get("/health/ready")

    assert response.status_code == 200
    assert response.json()["status"] == "unhealthy"
    assert response.json()["database"] == "disconnected"
