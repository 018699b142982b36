"""Async SQLAlchemy 2.0 database setup."""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.core.config import get_settings


class Base(DeclarativeBase):
    """SQLAlchemy declarative base for all models."""

    pass


def get_engine(database_url: str | None = None) -> AsyncEngine:
    """Create async engine from settings.

    Args:
        database_url: Override for ``settings.database_url``.
    """
    settings = get_settings()
    url = database_url or settings.database_url
    kwargs: dict[str, object] = {"echo": settings.debug}
    if not url.startswith("sqlite"):
        kwargs["pool_pre_ping"] = True
    engine: AsyncEngine = create_async_engine(url, **kwargs)
    return engine


def get_session_maker(engine: AsyncEngine | None = None) -> async_sessionmaker[AsyncSession]:
    """Create async session maker."""
    return async_sessionmaker(
        engine or get_engine(),
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def create_tables(engine: AsyncEngine) -> None:
    """Create all mapped tables that do not exist yet.

    Used by the CLI and tests when migrations have not been applied.
    """
    # Import models so they register on Base.metadata
    from app.shared.documents import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

