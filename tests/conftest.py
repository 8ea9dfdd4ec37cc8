"""Pytest configuration and shared fixtures.

Organization:
    - Database Fixtures: in-memory SQLite engine, session factory and session
    - Transport Fixtures: fake email client and connection manager
    - Notification Fixtures: settings and a dispatcher wired to the fakes
    - Application Fixtures: FastAPI app with dependency overrides and HTTP client

The API tests never run the lifespan: every process-wide service the routes
need is injected through ``app.dependency_overrides``.
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator
from typing import TYPE_CHECKING

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from tests.utils import FakeConnectionManager, FakeEmailClient

if TYPE_CHECKING:
    from pathlib import Path

    from fastapi import FastAPI
    from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker

    from campus_events.core.settings.notifications import NotificationSettings
    from campus_events.features.notifications.dispatcher import NotificationDispatcher

# Ensure tests run without external infrastructure
os.environ.setdefault("DB_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("EMAIL_BACKEND", "console")
os.environ.setdefault("WS_REDIS_URL", "")
os.environ.setdefault("LOG_JSON_LOGS", "false")


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine]:
    """In-memory SQLite engine with every table created.

    ``StaticPool`` keeps a single connection so every session sees the same
    in-memory database.
    """
    from campus_events.infra.database.session import create_tables

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_tables(engine)

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    from campus_events.infra.database.session import build_session_factory

    return build_session_factory(db_engine)


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession]:
    """Session for arranging and asserting database state directly."""
    async with session_factory() as session:
        yield session


# ============================================================================
# Transport Fixtures
# ============================================================================


@pytest.fixture
def email_client() -> FakeEmailClient:
    """Email client that records messages instead of sending them."""
    return FakeEmailClient()


@pytest.fixture
def connection_manager() -> FakeConnectionManager:
    """Connection manager that records broadcasts."""
    return FakeConnectionManager()


# ============================================================================
# Notification Fixtures
# ============================================================================


@pytest.fixture
def uploads_dir(tmp_path: Path) -> Path:
    path = tmp_path / "uploads"
    path.mkdir()
    return path


@pytest.fixture
def notification_settings(uploads_dir: Path) -> NotificationSettings:
    from campus_events.core.settings.notifications import NotificationSettings

    return NotificationSettings(uploads_dir=uploads_dir, recipient_timeout=2.0)


@pytest.fixture
def dispatcher(
    session_factory: async_sessionmaker[AsyncSession],
    email_client: FakeEmailClient,
    connection_manager: FakeConnectionManager,
    notification_settings: NotificationSettings,
) -> NotificationDispatcher:
    """Dispatcher wired exactly like the lifespan does, but to fake transports."""
    from campus_events.core.settings.websocket import WebSocketSettings
    from campus_events.features.notifications.dispatcher import build_notification_dispatcher

    return build_notification_dispatcher(
        session_factory,
        email_client,
        connection_manager,
        notification_settings=notification_settings,
        websocket_settings=WebSocketSettings(),
    )


# ============================================================================
# Application Fixtures
# ============================================================================


@pytest.fixture
def app(
    session_factory: async_sessionmaker[AsyncSession],
    dispatcher: NotificationDispatcher,
    notification_settings: NotificationSettings,
    connection_manager: FakeConnectionManager,
) -> FastAPI:
    """FastAPI application with database, dispatcher and settings overridden."""
    from campus_events.app.main import create_app
    from campus_events.core.dependencies.database import get_db_session
    from campus_events.core.dependencies.realtime import get_ws_connection_manager
    from campus_events.core.settings import get_notification_settings
    from campus_events.features.notifications.dependencies import (
        get_notification_dispatcher_dep,
    )

    async def _session_override() -> AsyncGenerator[AsyncSession]:
        async with session_factory() as session:
            yield session

    application = create_app()
    application.dependency_overrides[get_db_session] = _session_override
    application.dependency_overrides[get_notification_dispatcher_dep] = lambda: dispatcher
    application.dependency_overrides[get_notification_settings] = lambda: notification_settings
    application.dependency_overrides[get_ws_connection_manager] = lambda: connection_manager
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Async HTTP client bound to the app through ASGITransport."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
