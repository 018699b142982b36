"""Tests for standalone template seeding."""

import io
from unittest.mock import patch

import pytest

from app.shared.seeder.admins import ADMINS_COLLECTION, MAIN_ADMIN
from app.shared.seeder.config import BoardTemplateConfig, SeederConfig
from app.shared.seeder.generators.templates import CATALOG, GENERAL_TEMPLATES
from app.shared.seeder.templates import DEFAULT_SUPER_ADMIN, TEMPLATES_COLLECTION, seed_board_templates


@pytest.fixture
def template_config():
    config = SeederConfig.from_profile("production")
    config.password_rounds = 4
    config.enable_progress = False
    return config


class TestSeedBoardTemplates:
    """Tests for seed_board_templates."""

    @pytest.mark.asyncio
    async def test_creates_default_super_admin(self, store, template_config):
        """Test an empty store gets the default super admin as owner."""
        result = await seed_board_templates(store, template_config, stream=io.StringIO())

        admin = await store.collection("users").find_one({"email": DEFAULT_SUPER_ADMIN.email})
        assert result.created_owner is True
        assert admin["system_role"] == "super_admin"
        assert result.owner_id == admin["_id"]
        assert await store.collection("user_roles").count_documents({"user": admin["_id"]}) == 1

    @pytest.mark.asyncio
    async def test_zero_count_seeds_whole_catalog(self, store, template_config):
        """Test a zero template count falls back to the built-in catalog."""
        result = await seed_board_templates(store, template_config, stream=io.StringIO())

        templates = await store.collection("board_templates").find()
        assert result.templates.count == len(CATALOG)
        assert [template["name"] for template in templates] == [entry["name"] for entry in CATALOG]
        assert all(template["created_by"] == result.owner_id for template in templates)

    @pytest.mark.asyncio
    async def test_uses_existing_admin(self, store, template_config):
        """Test a stored admin owns the templates and no user is created."""
        await store.collection("users").create({"_id": "admin-1", "email": "a@x.com", "system_role": "admin"})
        template_config.board_templates = BoardTemplateConfig(count=2)

        result = await seed_board_templates(store, template_config, stream=io.StringIO())

        assert result.created_owner is False
        assert result.owner_id == "admin-1"
        assert result.templates.count == 2
        assert await store.collection("users").count_documents() == 1

    @pytest.mark.asyncio
    async def test_progress_written_to_stream(self, store, template_config):
        """Test progress output goes to the given stream when enabled."""
        template_config.enable_progress = True
        stream = io.StringIO()

        await seed_board_templates(store, template_config, stream=stream)

        assert "Create Board Templates" in stream.getvalue()


class TestGeneralTemplates:
    """Tests for the general template catalog written by the standalone run."""

    @pytest.mark.asyncio
    async def test_seeds_every_group(self, store, template_config):
        result = await seed_board_templates(store, template_config, stream=io.StringIO())

        templates = await store.collection(TEMPLATES_COLLECTION).find()
        expected = sum(len(entries) for entries in GENERAL_TEMPLATES.values())
        assert len(result.general) == expected == len(templates)
        assert {template["group"] for template in templates} == {"project", "task", "ai_prompt", "branding"}
        assert {template["type"] for template in templates} == {"board", "task", "workflow"}
        assert result.general_skipped == 0

    @pytest.mark.asyncio
    async def test_creates_main_admin_as_owner(self, store, template_config):
        """Test an empty admins collection gets the main admin account."""
        result = await seed_board_templates(store, template_config, stream=io.StringIO())

        admin = await store.collection(ADMINS_COLLECTION).find_one({"email": MAIN_ADMIN.email})
        assert result.created_admin is True
        assert admin["role"] == "super_admin"
        assert result.admin_id == admin["_id"]
        assert all(template["created_by"] == admin["_id"] for template in result.general)

    @pytest.mark.asyncio
    async def test_uses_existing_admin_account(self, store, template_config):
        await store.collection(ADMINS_COLLECTION).create({"_id": "adm-1", "email": "ops@x.com", "role": "admin"})

        result = await seed_board_templates(store, template_config, stream=io.StringIO())

        assert result.created_admin is False
        assert result.admin_id == "adm-1"
        assert await store.collection(ADMINS_COLLECTION).count_documents() == 1

    @pytest.mark.asyncio
    async def test_replaces_existing_templates(self, store, template_config):
        """Test stale general templates are removed before the catalog is written."""
        await store.collection(TEMPLATES_COLLECTION).create({"_id": "stale", "name": "Old"})

        result = await seed_board_templates(store, template_config, stream=io.StringIO())

        assert await store.collection(TEMPLATES_COLLECTION).find_one({"_id": "stale"}) is None
        assert await store.collection(TEMPLATES_COLLECTION).count_documents() == len(result.general)

    @pytest.mark.asyncio
    async def test_invalid_template_is_skipped(self, store, template_config):
        catalog = {"task": [{**GENERAL_TEMPLATES["task"][0], "type": "ai-prompt"}, GENERAL_TEMPLATES["task"][1]]}

        with patch("app.shared.seeder.generators.templates.GENERAL_TEMPLATES", catalog):
            result = await seed_board_templates(store, template_config, stream=io.StringIO())

        assert result.general_skipped == 1
        assert [template["name"] for template in result.general] == ["Bug Fix Task"]

    @pytest.mark.asyncio
    async def test_board_only(self, store, template_config):
        """Test general templates and admin accounts are left alone when excluded."""
        result = await seed_board_templates(
            store, template_config, stream=io.StringIO(), include_general=False
        )

        assert result.general == []
        assert result.admin_id is None
        assert await store.collection(TEMPLATES_COLLECTION).count_documents() == 0
        assert await store.collection(ADMINS_COLLECTION).count_documents() == 0

    @pytest.mark.asyncio
    async def test_general_step_in_progress(self, store, template_config):
        template_config.enable_progress = True
        stream = io.StringIO()

        await seed_board_templates(store, template_config, stream=stream)

        assert "Create Templates" in stream.getvalue()
