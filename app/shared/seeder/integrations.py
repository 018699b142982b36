"""Third-party integrations shown in the admin console.

``IntegrationSeeder.seed`` replaces the whole ``integrations`` collection
with the built-in catalog.
"""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING, Any

from app.core.exceptions import SeedValidationError
from app.core.logging import get_logger
from app.shared.seeder.fixtures import FixtureGenerator
from app.shared.seeder.generators import IntegrationGenerator
from app.shared.seeder.validator import Validator

if TYPE_CHECKING:
    from app.shared.documents import Collection, DocumentStore
    from app.shared.seeder.config import SeederConfig

logger = get_logger(__name__)

INTEGRATIONS_COLLECTION = "integrations"


class IntegrationSeeder:
    """Seed, clear and count integrations."""

    def __init__(self, store: DocumentStore, config: SeederConfig) -> None:
        self.store = store
        self.config = config

    @property
    def collection(self) -> Collection:
        return self.store.collection(INTEGRATIONS_COLLECTION)

    async def seed(self, skip_validation: bool = False) -> list[dict[str, Any]]:
        """Clear existing integrations and insert the catalog.

        Args:
            skip_validation: Persist the catalog without rule checks.

        Returns:
            The stored integration documents.

        Raises:
            SeedValidationError: If a catalog entry breaks the integration rules.
            PersistenceError: If the store cannot be written.
        """
        fixtures = FixtureGenerator(self.config.seed, self.config.reference_time)
        fixtures.reseed(INTEGRATIONS_COLLECTION)
        candidates = IntegrationGenerator(fixtures).generate()

        if not skip_validation:
            validator = Validator()
            for candidate in candidates:
                result = validator.validate("integration", candidate)
                if not result.is_valid:
                    raise SeedValidationError("integration", result.errors, result.warnings)

        logger.info("seeder.integrations.started", count=len(candidates))
        await self.clear()
        await self.collection.insert_many(candidates)
        for candidate in candidates:
            logger.debug("seeder.integrations.created", name=candidate["name"], category=candidate["category"])
        logger.info("seeder.integrations.completed", created=len(candidates))
        return await self.collection.find()

    async def clear(self) -> int:
        removed = await self.collection.delete_many({})
        logger.info("seeder.integrations.cleared", removed=removed)
        return removed

    async def get_stats(self) -> dict[str, Any]:
        """Totals plus a per-category breakdown."""
        integrations = await self.collection.find()
        return {
            "total": len(integrations),
            "active": sum(1 for item in integrations if item.get("status") == "active"),
            "enabled": sum(1 for item in integrations if item.get("is_enabled")),
            "by_category": dict(Counter(item.get("category") for item in integrations)),
        }
