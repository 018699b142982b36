"""User accounts and their companion documents."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import bcrypt

from app.shared.seeder.generators import UserGenerator
from app.shared.seeder.stages.base import Stage, StageOutput, StageResult

if TYPE_CHECKING:
    from app.shared.seeder.config import SeederConfig
    from app.shared.seeder.stages.base import StageContext


def hash_password(password: str, rounds: int, cache: dict[str, str] | None = None) -> str:
    """bcrypt-hash a password, reusing a cached hash for a repeated password.

    Args:
        password: Plain-text password.
        rounds: bcrypt cost factor.
        cache: Hashes already computed during this run.

    Returns:
        The hash as text.
    """
    if cache is not None and password in cache:
        return cache[password]
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds)).decode("utf-8")
    if cache is not None:
        cache[password] = hashed
    return hashed


class UserStage(Stage):
    """Fixed test users first, then random users.

    Each persisted user gets its preferences, sessions and roles documents,
    written concurrently once the user exists.
    """

    name = "Create Users"
    key = "users"
    collections = ("users", "user_preferences", "user_sessions", "user_roles")

    def enabled(self, config: SeederConfig) -> bool:
        return config.users.count > 0

    async def seed(self, ctx: StageContext) -> StageResult:
        out = StageOutput(self.key)
        generator = UserGenerator(ctx.fixtures, ctx.config.users)
        candidates = generator.generate()
        ctx.progress.set_step_total(len(candidates))

        for candidate in candidates:
            if self.accept(ctx, "user", candidate, out):
                password = candidate.pop("password")
                candidate["password_hash"] = await asyncio.to_thread(
                    hash_password, password, ctx.config.password_rounds, ctx.password_cache
                )
                companions = generator.companions(candidate)
                await self.persist(ctx, "users", candidate, out)
                await asyncio.gather(
                    *(ctx.store.collection(name).create(doc) for name, doc in companions.items())
                )
                for name, doc in companions.items():
                    out.add(name, doc)
            ctx.progress.update_step(message=candidate["email"])

        return self.finish(ctx, out)
