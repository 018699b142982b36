"""Administrator accounts for the admin console.

Admins live in their own ``admins`` collection, apart from the pipeline's
users. Seeding is idempotent per email: an account that already exists is
left untouched.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from app.core.exceptions import SeedValidationError
from app.core.logging import get_logger
from app.shared.seeder.fixtures import FixtureGenerator
from app.shared.seeder.stages import hash_password
from app.shared.seeder.validator import Validator

if TYPE_CHECKING:
    from app.shared.documents import Collection, DocumentStore
    from app.shared.seeder.config import SeederConfig

logger = get_logger(__name__)

ADMINS_COLLECTION = "admins"

PERMISSIONS: dict[str, str] = {
    "admin_management": "Manage admin users and roles",
    "user_management": "Manage regular users",
    "system_settings": "Access system settings",
    "audit_logs": "View audit logs",
    "data_export": "Export system data",
}


@dataclass(frozen=True)
class AdminAccount:
    """A fixed admin account and its plain-text password."""

    user_name: str
    email: str
    password: str
    first_name: str
    last_name: str
    role: str
    permissions: tuple[str, ...]


MAIN_ADMIN = AdminAccount(
    user_name="system_admin",
    email="admin@admin.com",
    password="admin123!",
    first_name="System",
    last_name="Administrator",
    role="super_admin",
    permissions=tuple(PERMISSIONS),
)

DEFAULT_ADMINS: tuple[AdminAccount, ...] = (
    AdminAccount(
        "admin_user",
        "admin@taskhub.com",
        "Admin123!",
        "Admin",
        "User",
        "admin",
        ("admin_management", "user_management", "system_settings"),
    ),
    AdminAccount(
        "moderator_user",
        "moderator@taskhub.com",
        "Moderator123!",
        "Moderator",
        "User",
        "moderator",
        ("user_management", "audit_logs"),
    ),
    AdminAccount(
        "viewer_user",
        "viewer@taskhub.com",
        "Viewer123!",
        "Viewer",
        "User",
        "viewer",
        ("audit_logs",),
    ),
)


@dataclass
class AdminSeedResult:
    """Outcome of seeding admin accounts.

    Attributes:
        created: Admin documents written by this call.
        existing: Emails of accounts that were already present.
    """

    created: list[dict[str, Any]] = field(default_factory=list)
    existing: list[str] = field(default_factory=list)


class AdminSeeder:
    """Create, reset and count admin console accounts."""

    def __init__(self, store: DocumentStore, config: SeederConfig) -> None:
        self.store = store
        self.config = config
        self.fixtures = FixtureGenerator(config.seed, config.reference_time)
        self.fixtures.reseed(ADMINS_COLLECTION)
        self.validator = Validator()
        self.password_cache: dict[str, str] = {}

    @property
    def collection(self) -> Collection:
        return self.store.collection(ADMINS_COLLECTION)

    def build(self, account: AdminAccount) -> dict[str, Any]:
        return {
            "_id": self.fixtures.object_id(),
            "user_name": account.user_name,
            "email": account.email,
            "first_name": account.first_name,
            "last_name": account.last_name,
            "role": account.role,
            "is_active": True,
            "permissions": [
                {"name": name, "description": PERMISSIONS[name], "allowed": True}
                for name in account.permissions
            ],
            "notes": f"Default {account.role} account created by the seeder",
            "created_at": self.fixtures.reference_time,
        }

    async def create_admin(self, account: AdminAccount) -> tuple[dict[str, Any], bool]:
        """Create one account unless its email is already taken.

        Returns:
            The stored document and whether this call created it.

        Raises:
            SeedValidationError: If the account breaks the admin rules.
            PersistenceError: If the write fails.
        """
        candidate = self.build(account)
        existing = await self.collection.find_one({"email": account.email})
        if existing is not None:
            logger.info("seeder.admins.exists", email=account.email, role=account.role)
            return existing, False

        result = self.validator.validate("admin", candidate)
        if not result.is_valid:
            raise SeedValidationError("admin", result.errors, result.warnings)

        candidate["password_hash"] = await asyncio.to_thread(
            hash_password, account.password, self.config.password_rounds, self.password_cache
        )
        stored = await self.collection.create(candidate)
        logger.info("seeder.admins.created", email=account.email, role=account.role)
        return stored, True

    async def create_main_admin(self) -> dict[str, Any]:
        admin, _ = await self.create_admin(MAIN_ADMIN)
        return admin

    async def create_default_admins(self) -> list[dict[str, Any]]:
        """Create the admin, moderator and viewer accounts that are missing."""
        created = []
        for account in DEFAULT_ADMINS:
            admin, was_created = await self.create_admin(account)
            if was_created:
                created.append(admin)
        return created

    async def seed(self) -> AdminSeedResult:
        """Create the main super admin and the default accounts."""
        result = AdminSeedResult()
        logger.info("seeder.admins.started")
        for account in (MAIN_ADMIN, *DEFAULT_ADMINS):
            admin, was_created = await self.create_admin(account)
            if was_created:
                result.created.append(admin)
            else:
                result.existing.append(account.email)
        logger.info("seeder.admins.completed", created=len(result.created), existing=len(result.existing))
        return result

    async def reset(self) -> int:
        """Delete every admin account and return how many were removed."""
        removed = await self.collection.delete_many({})
        logger.info("seeder.admins.reset", removed=removed)
        return removed

    async def get_stats(self) -> dict[str, int]:
        collection = self.collection
        return {
            "total": await collection.count_documents(),
            "active": await collection.count_documents({"is_active": True}),
            "super_admins": await collection.count_documents({"role": "super_admin"}),
            "admins": await collection.count_documents({"role": "admin"}),
            "moderators": await collection.count_documents({"role": "moderator"}),
            "viewers": await collection.count_documents({"role": "viewer"}),
        }
