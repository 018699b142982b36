"""Core infrastructure: config, database, logging, exceptions."""

from app.core.config import Settings, get_settings
from app.core.database import Base, get_engine, get_session_maker
from app.core.logging import get_logger, run_id_ctx

__all__ = [
    "Base",
    "Settings",
    "get_engine",
    "get_logger",
    "get_session_maker",
    "get_settings",
    "run_id_ctx",
]
