"""Application lifespan management.

Startup Order:
1. Core (logging, metrics) - always runs first
2. Database - required; startup fails without it
3. Email client - console/file/SMTP backend from settings
4. WebSocket connection manager - optional, never blocks startup
5. Notification dispatcher - wired from the services above

Shutdown Order: Reverse of startup (what starts first, shuts down last)
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from campus_events.core.settings import (
    get_app_settings,
    get_db_settings,
    get_email_settings,
    get_logging_settings,
    get_notification_settings,
    get_websocket_settings,
)
from campus_events.infra.logging.config import setup_logging
from campus_events.infra.metrics.prometheus import application_info

# Lazy imports to avoid circular dependencies
# These are imported within functions when needed:
# - campus_events.infra.database.session
# - campus_events.infra.email
# - campus_events.infra.realtime
# - campus_events.features.notifications.dispatcher

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from fastapi import FastAPI
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from campus_events.infra.email import EmailClient
    from campus_events.infra.realtime import ConnectionManager

logger = logging.getLogger(__name__)

_websocket_enabled = False


def get_websocket_enabled() -> bool:
    """Check if the WebSocket manager was successfully started."""
    return _websocket_enabled


# =============================================================================
# Startup functions - organized by service
# =============================================================================


async def _startup_core() -> None:
    """Initialize logging and the application info metric."""
    app = get_app_settings()

    setup_logging(log_settings=get_logging_settings(), force=True)
    logger.info(
        "Application starting",
        extra={"service": app.service_name, "environment": app.environment},
    )

    application_info.info(
        {"version": app.version, "service": app.service_name, "environment": app.environment}
    )


async def _startup_database() -> async_sessionmaker[AsyncSession]:
    """Initialize the database engine and session factory."""
    from campus_events.infra.database.session import init_database

    db = get_db_settings()
    try:
        factory = await init_database(db)
    except Exception as e:
        logger.exception(
            "Database required but unavailable, failing startup",
            extra={"error": str(e)},
        )
        raise
    logger.info("Database connection initialized", extra={"sqlite": db.is_sqlite})
    return factory


async def _startup_email() -> EmailClient:
    """Initialize the outbound email client."""
    from campus_events.infra.email import start_email_client

    email = get_email_settings()
    client = await start_email_client(email)
    logger.info(
        "Email client initialized",
        extra={"backend": client.backend_name, "enabled": email.enabled},
    )
    return client


async def _startup_websocket() -> ConnectionManager | None:
    """Initialize the WebSocket connection manager."""
    global _websocket_enabled

    from campus_events.infra.realtime import start_connection_manager

    ws = get_websocket_settings()
    _websocket_enabled = False

    if not ws.enabled:
        return None

    try:
        manager = await start_connection_manager(ws)
    except Exception as e:
        logger.warning(
            "Failed to start WebSocket manager, realtime features disabled",
            extra={"error": str(e)},
        )
        return None

    _websocket_enabled = True
    logger.info("WebSocket connection manager initialized")
    return manager


def _startup_notifications(
    session_factory: async_sessionmaker[AsyncSession],
    email_client: EmailClient,
    manager: ConnectionManager | None,
) -> None:
    """Wire the notification dispatcher from the started services."""
    from campus_events.features.notifications.dispatcher import (
        build_notification_dispatcher,
        start_notification_dispatcher,
    )

    settings = get_notification_settings()
    start_notification_dispatcher(
        build_notification_dispatcher(
            session_factory,
            email_client,
            manager,
            notification_settings=settings,
            websocket_settings=get_websocket_settings(),
        )
    )
    logger.info(
        "Notification fan-out configured",
        extra={
            "email_policy": settings.email_policy,
            "dispatch_mode": settings.dispatch_mode,
            "realtime": manager is not None,
        },
    )


# =============================================================================
# Shutdown functions
# =============================================================================


async def _shutdown_notifications() -> None:
    from campus_events.features.notifications.dispatcher import stop_notification_dispatcher

    stop_notification_dispatcher()


async def _shutdown_websocket() -> None:
    global _websocket_enabled

    from campus_events.infra.realtime import stop_connection_manager

    if not _websocket_enabled:
        return

    await stop_connection_manager()
    _websocket_enabled = False
    logger.info("WebSocket connection manager stopped")


async def _shutdown_email() -> None:
    from campus_events.infra.email import stop_email_client

    await stop_email_client()
    logger.info("Email client closed")


async def _shutdown_database() -> None:
    from campus_events.infra.database.session import close_database

    await close_database()
    logger.info("Database connection closed")


async def _shutdown_core() -> None:
    from campus_events.infra.logging.config import shutdown

    shutdown()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Start services in dependency order and stop them in reverse."""
    app_settings = get_app_settings()

    # 1. Core
    await _startup_core()

    # 2. Database
    session_factory = await _startup_database()

    # 3. Email
    email_client = await _startup_email()

    # 4. WebSocket
    manager = await _startup_websocket()

    # 5. Notifications
    _startup_notifications(session_factory, email_client, manager)

    logger.info(
        "Application startup complete",
        extra={
            "service": app_settings.service_name,
            "port": app_settings.port,
            "websocket_enabled": _websocket_enabled,
        },
    )

    yield

    logger.info("Application shutting down", extra={"service": app_settings.service_name})

    await _shutdown_notifications()
    await _shutdown_websocket()
    await _shutdown_email()
    await _shutdown_database()
    await _shutdown_core()


__all__ = ["get_websocket_enabled", "lifespan"]
