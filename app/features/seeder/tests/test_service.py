"""Unit tests for seeder service layer."""

import pytest

from app.core.config import get_settings
from app.core.exceptions import BackupError, NotFoundError, SeederDisabledError
from app.features.seeder import schemas, service
from app.shared.documents import MemoryDocumentStore


@pytest.fixture
def svc_store(api_settings):
    return MemoryDocumentStore("svc")


@pytest.fixture
def production_env(api_settings, monkeypatch):
    """Production environment without the seeding opt-in."""
    monkeypatch.setenv("APP_ENV", "production")
    get_settings.cache_clear()
    return get_settings()


class TestEnsureSeedingAllowed:
    """Tests for the production guard."""

    def test_allowed_outside_production(self, api_settings):
        service.ensure_seeding_allowed()

    def test_blocked_in_production(self, production_env):
        with pytest.raises(SeederDisabledError) as exc_info:
            service.ensure_seeding_allowed()

        assert exc_info.value.status_code == 403

    def test_production_opt_in(self, production_env, monkeypatch):
        """Test SEEDER_ALLOW_PRODUCTION lifts the guard."""
        monkeypatch.setenv("SEEDER_ALLOW_PRODUCTION", "true")
        get_settings.cache_clear()

        service.ensure_seeding_allowed()


class TestListProfiles:
    """Tests for list_profiles function."""

    def test_returns_all_profiles(self):
        profiles = service.list_profiles()

        assert [p.name for p in profiles] == ["development", "test", "production"]

    def test_production_runs_nothing(self):
        """Test the production profile selects no steps."""
        production = next(p for p in service.list_profiles() if p.name == "production")

        assert production.steps == []
        assert production.test_users == []

    def test_development_steps_bracketed_by_bookends(self):
        development = next(p for p in service.list_profiles() if p.name == "development")

        assert development.steps[0] == "clear"
        assert development.steps[-1] == "statistics"
        assert len(development.steps) == 15
        assert "superadmin.test@gmail.com" in development.test_users


class TestGetStatus:
    """Tests for get_status function."""

    @pytest.mark.asyncio
    async def test_empty_store(self, svc_store):
        status = await service.get_status(svc_store)

        assert status.database == "svc"
        assert status.profile == "test"
        assert status.collections == {}
        assert status.total_documents == 0
        assert status.backups == 0
        assert status.latest_backup is None

    @pytest.mark.asyncio
    async def test_counts_documents(self, svc_store):
        """Test counts reflect stored collections."""
        await svc_store.collection("users").insert_many([{"_id": "a"}, {"_id": "b"}])

        status = await service.get_status(svc_store)

        assert status.collections == {"users": 2}
        assert status.total_documents == 2


class TestRunSeeder:
    """Tests for run_seeder function."""

    @pytest.mark.asyncio
    async def test_full_test_profile_run(self, svc_store):
        """Test a default run seeds the test profile and snapshots first."""
        result = await service.run_seeder(svc_store, schemas.RunParams(seed=42))

        assert result.success is True
        assert result.profile == "test"
        assert result.seed == 42
        assert result.records_created["users"] == 10
        assert result.total_created == sum(result.records_created.values())
        assert [step.key for step in result.steps][0] == "clear"
        assert result.backup_id is not None
        assert result.run_id

    @pytest.mark.asyncio
    async def test_module_filter(self, svc_store):
        result = await service.run_seeder(
            svc_store,
            schemas.RunParams(modules=["users"], skip_backup=True),
        )

        assert [step.key for step in result.steps] == ["users"]
        assert result.backup_id is None
        assert (await svc_store.counts())["users"] == 10

    @pytest.mark.asyncio
    async def test_production_profile_seeds_nothing(self, svc_store):
        result = await service.run_seeder(svc_store, schemas.RunParams(profile="production"))

        assert result.steps == []
        assert result.total_created == 0
        assert result.message == "Nothing to seed for profile 'production'"

    @pytest.mark.asyncio
    async def test_blocked_in_production(self, svc_store, production_env):
        with pytest.raises(SeederDisabledError):
            await service.run_seeder(svc_store, schemas.RunParams())

        assert await svc_store.counts() == {}


class TestBackups:
    """Tests for snapshot operations."""

    @pytest.mark.asyncio
    async def test_list_and_stats_after_run(self, svc_store):
        """Test the pre-run snapshot is listed."""
        await svc_store.collection("users").create({"_id": "old"})
        result = await service.run_seeder(svc_store, schemas.RunParams(modules=["clear"]))

        backups = service.list_backups(svc_store)
        stats = service.get_backup_stats(svc_store)

        assert [backup.id for backup in backups] == [result.backup_id]
        assert backups[0].counts == {"users": 1}
        assert stats.total_backups == 1
        assert stats.total_documents == 1

    @pytest.mark.asyncio
    async def test_rollback_restores_previous_content(self, svc_store):
        await svc_store.collection("users").create({"_id": "old"})
        run = await service.run_seeder(svc_store, schemas.RunParams(modules=["clear", "users"]))

        result = await service.rollback(svc_store, schemas.RollbackParams())

        assert result.backup_id == run.backup_id
        assert result.restored == {"users": 1}
        assert result.total_documents == 1
        assert await svc_store.counts() == {"users": 1}

    @pytest.mark.asyncio
    async def test_rollback_without_backups(self, svc_store):
        with pytest.raises(BackupError):
            await service.rollback(svc_store, schemas.RollbackParams())

    @pytest.mark.asyncio
    async def test_rollback_unknown_backup(self, svc_store):
        with pytest.raises(NotFoundError):
            await service.rollback(svc_store, schemas.RollbackParams(backup_id="backup-missing"))

    @pytest.mark.asyncio
    async def test_cleanup_uses_configured_age(self, svc_store):
        """Test the default threshold keeps a fresh snapshot."""
        await service.run_seeder(svc_store, schemas.RunParams(modules=["clear"]))

        result = service.cleanup_backups(svc_store)

        assert result.max_age_days == get_settings().seeder_backup_max_age_days
        assert result.deleted == 0
        assert result.remaining == 1

    @pytest.mark.asyncio
    async def test_cleanup_zero_days_removes_all(self, svc_store):
        await service.run_seeder(svc_store, schemas.RunParams(modules=["clear"]))

        result = service.cleanup_backups(svc_store, max_age_days=0)

        assert result.deleted == 1
        assert result.remaining == 0
