"""Async SQLAlchemy 2.0 database setup.

The store handle is an explicit object: the application lifespan creates one
``Database`` at startup, keeps it on ``app.state.database`` and disposes it on
shutdown. Request handlers reach it through the ``get_database`` dependency.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.core.config import Settings, get_settings
from app.core.logging import get_logger

logger = get_logger(__name__)


class Base(DeclarativeBase):
    """SQLAlchemy declarative base for all models."""

    pass


class Database:
    """Connection pool plus session factory with an open/close lifecycle.

    Every ``session()`` checks out its own pooled connection, so independent
    read queries of one request can run concurrently.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self._engine: AsyncEngine | None = None
        self._session_maker: async_sessionmaker[AsyncSession] | None = None

    @property
    def engine(self) -> AsyncEngine:
        """Return the engine, creating it on first use."""
        if self._engine is None:
            self._engine = create_async_engine(
                self.settings.database_url,
                echo=self.settings.debug,
                pool_pre_ping=True,
                pool_size=self.settings.database_pool_size,
                max_overflow=self.settings.database_max_overflow,
            )
            self._session_maker = async_sessionmaker(
                self._engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )
            logger.info(
                "database.engine_created",
                pool_size=self.settings.database_pool_size,
                max_overflow=self.settings.database_max_overflow,
            )
        return self._engine

    @property
    def session_maker(self) -> async_sessionmaker[AsyncSession]:
        """Return the session factory bound to the engine."""
        if self._session_maker is None:
            _ = self.engine
        if self._session_maker is None:
            raise RuntimeError("Session factory was not initialised with the engine")
        return self._session_maker

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Check out a session that is always closed, even on error.

        Yields:
            AsyncSession bound to a pooled connection.
        """
        async with self.session_maker() as session:
            yield session

    async def ping(self) -> None:
        """Run ``SELECT 1`` to verify connectivity."""
        async with self.session() as session:
            await session.execute(text("SELECT 1"))

    async def dispose(self) -> None:
        """Drain and close all pooled connections."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_maker = None
            logger.info("database.engine_disposed")


def get_database(request: Request) -> Database:
    """Dependency returning the application's store handle.

    Args:
        request: Current request (gives access to ``app.state``).

    Returns:
        The ``Database`` created by the application lifespan.
    """
    database: Database = request.app.state.database
    return database

