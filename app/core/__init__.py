"""Core infrastructure: config, database, logging, middleware, exceptions."""

from app.core.config import Settings, get_settings
from app.core.database import Base, Database, get_database
from app.core.logging import get_logger, request_id_ctx

__all__ = [
    "Base",
    "Database",
    "Settings",
    "get_database",
    "get_logger",
    "get_settings",
    "request_id_ctx",
]
