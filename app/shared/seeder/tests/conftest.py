"""Pytest fixtures for seeder tests."""

import io
from datetime import UTC, datetime

import pytest

from app.shared.documents import MemoryDocumentStore
from app.shared.seeder.backup import BackupManager
from app.shared.seeder.config import (
    BoardConfig,
    CountRange,
    EnvironmentProfile,
    SeederConfig,
    SpaceConfig,
    TaskConfig,
    TestUserConfig,
    UserConfig,
    WorkspaceConfig,
)
from app.shared.seeder.core import DatabaseSeeder
from app.shared.seeder.fixtures import FixtureGenerator
from app.shared.seeder.progress import MultiStepProgressTracker
from app.shared.seeder.stages import StageContext
from app.shared.seeder.validator import Validator

REFERENCE_TIME = datetime(2025, 6, 1, tzinfo=UTC)


@pytest.fixture
def fixtures():
    """Create a seeded fixture generator with a fixed reference time."""
    return FixtureGenerator(42, REFERENCE_TIME)


@pytest.fixture
def store():
    """Create an empty in-memory document store."""
    return MemoryDocumentStore("test")


@pytest.fixture
def scenario_config():
    """Five users (two fixed), one workspace, one space, one board, three tasks."""
    return SeederConfig(
        profile=EnvironmentProfile.TEST,
        seed=42,
        users=UserConfig(
            count=5,
            test_users=[
                TestUserConfig("Test Admin", "admin@test.com", system_role="admin"),
                TestUserConfig("Test User", "user@test.com", system_role="moderator"),
            ],
        ),
        workspaces=WorkspaceConfig(count=1, members_per_workspace=CountRange(1, 3)),
        spaces=SpaceConfig(per_workspace=CountRange(1, 1)),
        boards=BoardConfig(per_space=CountRange(1, 1)),
        tasks=TaskConfig(per_board=CountRange(3, 3)),
        reference_time=REFERENCE_TIME,
        password_rounds=4,
        backup_before_seed=False,
        enable_progress=False,
    )


@pytest.fixture
def test_profile_config():
    """The test profile with a fixed reference time and cheap hashing."""
    config = SeederConfig.from_profile(EnvironmentProfile.TEST, seed=42)
    config.reference_time = REFERENCE_TIME
    config.password_rounds = 4
    config.backup_before_seed = False
    config.enable_progress = False
    return config


@pytest.fixture
def backup_manager(store, tmp_path):
    """Create a backup manager writing under a temporary directory."""
    return BackupManager(store, tmp_path / "backups")


@pytest.fixture
def make_seeder(store, backup_manager):
    """Build a DatabaseSeeder on the shared store with captured output."""

    def _make(config, target_store=None):
        return DatabaseSeeder(
            target_store or store,
            config,
            backup_manager=backup_manager,
            stream=io.StringIO(),
        )

    return _make


@pytest.fixture
def make_context(store, fixtures):
    """Build a StageContext for running a single stage."""

    def _make(config, skip_validation=False):
        return StageContext(
            store=store,
            config=config,
            fixtures=fixtures,
            validator=Validator(),
            progress=MultiStepProgressTracker(["stage"], enabled=False),
            skip_validation=skip_validation,
        )

    return _make
