"""Tests for admin console account seeding."""

import bcrypt
import pytest

from app.core.exceptions import SeedValidationError
from app.shared.documents import MemoryDocumentStore
from app.shared.seeder.admins import (
    ADMINS_COLLECTION,
    DEFAULT_ADMINS,
    MAIN_ADMIN,
    AdminAccount,
    AdminSeeder,
)


@pytest.fixture
def admin_seeder(store, test_profile_config):
    return AdminSeeder(store, test_profile_config)


class TestSeedAdmins:
    """Tests for AdminSeeder.seed."""

    @pytest.mark.asyncio
    async def test_creates_main_and_default_accounts(self, store, admin_seeder):
        """Test the super admin and the three default accounts are stored."""
        result = await admin_seeder.seed()

        admins = await store.collection(ADMINS_COLLECTION).find()
        assert [admin["email"] for admin in result.created] == [
            MAIN_ADMIN.email,
            *(account.email for account in DEFAULT_ADMINS),
        ]
        assert sorted(admin["role"] for admin in admins) == ["admin", "moderator", "super_admin", "viewer"]
        assert result.existing == []

    @pytest.mark.asyncio
    async def test_passwords_are_hashed(self, store, admin_seeder):
        """Test only a bcrypt hash of each password is stored."""
        await admin_seeder.seed()

        main = await store.collection(ADMINS_COLLECTION).find_one({"email": MAIN_ADMIN.email})
        assert "password" not in main
        assert bcrypt.checkpw(MAIN_ADMIN.password.encode(), main["password_hash"].encode())

    @pytest.mark.asyncio
    async def test_permissions_follow_role(self, store, admin_seeder):
        await admin_seeder.seed()

        viewer = await store.collection(ADMINS_COLLECTION).find_one({"role": "viewer"})
        main = await store.collection(ADMINS_COLLECTION).find_one({"role": "super_admin"})
        assert [permission["name"] for permission in viewer["permissions"]] == ["audit_logs"]
        assert len(main["permissions"]) == 5
        assert all(permission["allowed"] for permission in main["permissions"])

    @pytest.mark.asyncio
    async def test_second_run_keeps_existing_accounts(self, store, admin_seeder):
        """Test seeding is idempotent per email."""
        first = await admin_seeder.seed()
        second = await admin_seeder.seed()

        assert second.created == []
        assert len(second.existing) == 4
        assert await store.collection(ADMINS_COLLECTION).count_documents() == 4
        stored = await store.collection(ADMINS_COLLECTION).find_one({"email": MAIN_ADMIN.email})
        assert stored["_id"] == first.created[0]["_id"]

    @pytest.mark.asyncio
    async def test_same_seed_same_ids(self, test_profile_config):
        """Test two stores seeded with one configuration get identical ids."""
        first = await AdminSeeder(MemoryDocumentStore("a"), test_profile_config).seed()
        second = await AdminSeeder(MemoryDocumentStore("b"), test_profile_config).seed()

        assert [admin["_id"] for admin in first.created] == [admin["_id"] for admin in second.created]


class TestCreateAdmins:
    """Tests for the single-purpose creation helpers."""

    @pytest.mark.asyncio
    async def test_create_main_admin_is_idempotent(self, store, admin_seeder):
        first = await admin_seeder.create_main_admin()
        second = await admin_seeder.create_main_admin()

        assert first["_id"] == second["_id"]
        assert first["role"] == "super_admin"
        assert await store.collection(ADMINS_COLLECTION).count_documents() == 1

    @pytest.mark.asyncio
    async def test_create_default_admins_only(self, store, admin_seeder):
        """Test the default accounts can be created without the main admin."""
        created = await admin_seeder.create_default_admins()

        assert [admin["role"] for admin in created] == ["admin", "moderator", "viewer"]
        assert await store.collection(ADMINS_COLLECTION).find_one({"email": MAIN_ADMIN.email}) is None

    @pytest.mark.asyncio
    async def test_invalid_account_is_rejected(self, store, admin_seeder):
        """Test an account with an unknown role raises and is not stored."""
        account = AdminAccount("owner", "owner@taskhub.com", "Owner123!", "O", "W", "owner", ("audit_logs",))

        with pytest.raises(SeedValidationError, match="Invalid admin role: owner"):
            await admin_seeder.create_admin(account)

        assert await store.collection(ADMINS_COLLECTION).count_documents() == 0


class TestAdminMaintenance:
    """Tests for stats and reset."""

    @pytest.mark.asyncio
    async def test_stats_by_role(self, admin_seeder):
        await admin_seeder.seed()

        stats = await admin_seeder.get_stats()

        assert stats == {
            "total": 4,
            "active": 4,
            "super_admins": 1,
            "admins": 1,
            "moderators": 1,
            "viewers": 1,
        }

    @pytest.mark.asyncio
    async def test_reset_removes_only_admins(self, store, admin_seeder):
        """Test reset empties the admins collection and nothing else."""
        await store.collection("users").create({"_id": "u1", "email": "u@x.com"})
        await admin_seeder.seed()

        removed = await admin_seeder.reset()

        assert removed == 4
        assert (await admin_seeder.get_stats())["total"] == 0
        assert await store.collection("users").count_documents() == 1
