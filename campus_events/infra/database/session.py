"""Async SQLAlchemy engine and session factory lifecycle.

The engine is built once by ``init_database`` during application startup and
disposed by ``close_database`` on shutdown. Route handlers get sessions
through ``campus_events.core.dependencies.database.get_db_session``; code that
runs outside a request (background notification dispatch) opens its own with
``get_async_session`` or the factory returned by ``get_session_factory``.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from campus_events.core.database.base import Base

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from campus_events.core.settings.database import DatabaseSettings

logger = logging.getLogger(__name__)

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create the session factory used by every request and background task."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def create_tables(engine: AsyncEngine) -> None:
    """Create all mapped tables that do not exist yet."""
    import campus_events.features.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def init_database(settings: DatabaseSettings) -> async_sessionmaker[AsyncSession]:
    """Create the engine, verify connectivity and optionally create tables.

    Args:
        settings: Database settings.

    Returns:
        The process-wide session factory.

    Raises:
        sqlalchemy.exc.SQLAlchemyError: If the database is unreachable.
    """
    global _engine, _session_factory

    if _session_factory is not None:
        return _session_factory

    engine = create_async_engine(settings.url, **settings.engine_kwargs())
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))

    if settings.create_tables:
        await create_tables(engine)

    _engine = engine
    _session_factory = build_session_factory(engine)
    logger.info(
        "Database connection established",
        extra={"driver": engine.dialect.driver, "create_tables": settings.create_tables},
    )
    return _session_factory


def get_engine() -> AsyncEngine:
    """Return the initialized engine.

    Raises:
        RuntimeError: If ``init_database`` has not run.
    """
    if _engine is None:
        raise RuntimeError("Database not initialized. Call init_database() first.")
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Return the initialized session factory.

    Raises:
        RuntimeError: If ``init_database`` has not run.
    """
    if _session_factory is None:
        raise RuntimeError("Database not initialized. Call init_database() first.")
    return _session_factory


@asynccontextmanager
async def get_async_session() -> AsyncGenerator[AsyncSession]:
    """Open a session outside of FastAPI dependency injection.

    Example:
        async with get_async_session() as session:
            result = await session.execute(select(Event))
    """
    async with get_session_factory()() as session:
        yield session


async def close_database() -> None:
    """Dispose the engine and forget the session factory."""
    global _engine, _session_factory

    if _engine is None:
        return

    logger.info("Closing database connection")
    await _engine.dispose()
    _engine = None
    _session_factory = None
    logger.info("Database connection closed")
