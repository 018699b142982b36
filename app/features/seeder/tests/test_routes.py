"""Route tests for the seeder API over an in-memory document store."""

import pytest
from fastapi import status

from app.core.config import get_settings


class TestGetStatus:
    """Tests for GET /seeder/status endpoint."""

    @pytest.mark.asyncio
    async def test_returns_counts(self, client, api_store):
        """Test status reports stored collections."""
        await api_store.collection("tasks").insert_many([{"_id": "t1"}, {"_id": "t2"}])

        response = await client.get("/seeder/status")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["collections"] == {"tasks": 2}
        assert data["total_documents"] == 2
        assert data["profile"] == "test"
        assert data["backups"] == 0


class TestListProfiles:
    """Tests for GET /seeder/profiles endpoint."""

    @pytest.mark.asyncio
    async def test_returns_profiles(self, client):
        response = await client.get("/seeder/profiles")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert [profile["name"] for profile in data] == ["development", "test", "production"]
        test_profile = data[1]
        assert test_profile["counts"]["users"] == 10
        assert test_profile["test_users"] == ["admin@test.com", "user@test.com"]


class TestRun:
    """Tests for POST /seeder/run endpoint."""

    @pytest.mark.asyncio
    async def test_run_users_only(self, client, api_store):
        """Test a filtered run creates users and their companion documents."""
        response = await client.post(
            "/seeder/run",
            json={"modules": ["users"], "skip_backup": True, "seed": 5},
        )

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["success"] is True
        assert data["seed"] == 5
        assert [step["key"] for step in data["steps"]] == ["users"]
        assert data["records_created"]["users"] == 10
        assert data["backup_id"] is None
        assert (await api_store.counts())["users"] == 10

    @pytest.mark.asyncio
    async def test_invalid_params_return_problem_details(self, client):
        """Test request validation errors use RFC 7807 bodies."""
        response = await client.post("/seeder/run", json={"seed": -1, "profile": "staging"})

        assert response.status_code == 422
        assert response.headers["content-type"] == "application/problem+json"
        data = response.json()
        assert data["code"] == "VALIDATION_ERROR"
        assert {error["field"] for error in data["errors"]} == {"seed", "profile"}

    @pytest.mark.asyncio
    async def test_duplicate_run_reports_run_id(self, client):
        """Test a store failure surfaces as a problem carrying the run id."""
        params = {"modules": ["users"], "skip_backup": True, "seed": 5}
        await client.post("/seeder/run", json=params)

        response = await client.post("/seeder/run", json=params)

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        data = response.json()
        assert data["code"] == "PERSISTENCE_ERROR"
        assert data["run_id"]

    @pytest.mark.asyncio
    async def test_blocked_in_production(self, client, api_store, monkeypatch):
        monkeypatch.setenv("APP_ENV", "production")
        get_settings.cache_clear()

        response = await client.post("/seeder/run", json={})

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["code"] == "SEEDER_DISABLED"
        assert await api_store.counts() == {}


class TestBackups:
    """Tests for snapshot endpoints."""

    @pytest.mark.asyncio
    async def test_run_backup_and_rollback(self, client, api_store):
        """Test the pre-run snapshot is listed and restores the old content."""
        await api_store.collection("users").create({"_id": "old", "email": "old@x.com"})
        run = (await client.post("/seeder/run", json={"modules": ["clear", "users"]})).json()

        backups = (await client.get("/seeder/backups")).json()
        stats = (await client.get("/seeder/backups/stats")).json()
        response = await client.post("/seeder/rollback", json={})

        assert [backup["id"] for backup in backups] == [run["backup_id"]]
        assert stats["total_backups"] == 1
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["restored"] == {"users": 1}
        assert await api_store.counts() == {"users": 1}

    @pytest.mark.asyncio
    async def test_rollback_unknown_backup(self, client):
        response = await client.post("/seeder/rollback", json={"backup_id": "backup-missing"})

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["code"] == "NOT_FOUND"

    @pytest.mark.asyncio
    async def test_rollback_without_backups(self, client):
        response = await client.post("/seeder/rollback", json={})

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json()["code"] == "BACKUP_ERROR"

    @pytest.mark.asyncio
    async def test_cleanup(self, client):
        """Test DELETE /seeder/backups prunes by age."""
        await client.post("/seeder/run", json={"modules": ["clear"]})

        kept = await client.delete("/seeder/backups")
        pruned = await client.delete("/seeder/backups", params={"max_age_days": 0})

        assert kept.json()["deleted"] == 0
        assert pruned.json() == {"deleted": 1, "max_age_days": 0, "remaining": 0}

    @pytest.mark.asyncio
    async def test_cleanup_rejects_negative_age(self, client):
        response = await client.delete("/seeder/backups", params={"max_age_days": -1})

        assert response.status_code == 422
