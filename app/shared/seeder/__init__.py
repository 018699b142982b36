"""Seeder module for populating the TaskHub document store.

Provides:
- Environment profiles (development, test, production) with per-entity counts
- A seeded fixture generator and per-entity generators
- An ordered stage pipeline with validation and progress telemetry
- File-system snapshots with rollback around destructive runs
- A standalone template runner (board and general templates)
- Admin console accounts and third-party integrations
"""

from app.shared.seeder.admins import AdminSeeder
from app.shared.seeder.backup import BackupManager
from app.shared.seeder.config import CountRange, EnvironmentProfile, SeederConfig, TestUserConfig
from app.shared.seeder.core import DatabaseSeeder, SeederResult, SeedOptions
from app.shared.seeder.fixtures import FixtureGenerator
from app.shared.seeder.integrations import IntegrationSeeder
from app.shared.seeder.templates import TemplateSeedResult, seed_board_templates

__all__ = [
    "AdminSeeder",
    "BackupManager",
    "CountRange",
    "DatabaseSeeder",
    "EnvironmentProfile",
    "FixtureGenerator",
    "IntegrationSeeder",
    "SeedOptions",
    "SeederConfig",
    "SeederResult",
    "TemplateSeedResult",
    "TestUserConfig",
    "seed_board_templates",
]
