"""Router registry and setup."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from campus_events.core.settings import get_app_settings, get_websocket_settings
from campus_events.features.events.router import router as events_router
from campus_events.features.health.router import router as health_router
from campus_events.features.metrics.router import router as metrics_router
from campus_events.features.notifications.router import router as notifications_router
from campus_events.features.registrations.router import router as registrations_router
from campus_events.features.users.router import router as users_router

if TYPE_CHECKING:
    from fastapi import FastAPI

    from campus_events.core.settings.app import AppSettings
    from campus_events.core.settings.websocket import WebSocketSettings

logger = logging.getLogger(__name__)


def setup_routers(
    app: FastAPI,
    app_settings: AppSettings | None = None,
    websocket_settings: WebSocketSettings | None = None,
) -> None:
    """Register all feature routers with the application.

    Args:
        app: FastAPI application instance.
        app_settings: Optional application settings override for the API prefix.
        websocket_settings: Optional override for realtime/WebSocket behavior.
    """
    app_settings = app_settings or get_app_settings()
    websocket_settings = websocket_settings or get_websocket_settings()

    api_prefix = app_settings.api_prefix

    # Metrics endpoint (no prefix - accessible at /metrics)
    app.include_router(metrics_router)

    app.include_router(events_router, prefix=api_prefix)
    app.include_router(registrations_router, prefix=api_prefix)
    app.include_router(users_router, prefix=api_prefix)
    app.include_router(notifications_router, prefix=api_prefix)
    app.include_router(health_router, prefix=api_prefix)

    if websocket_settings.enabled:
        from campus_events.features.realtime.router import router as realtime_router

        app.include_router(realtime_router, prefix=api_prefix)
        logger.info("WebSocket realtime router included - endpoints at %s/ws", api_prefix)

    logger.info(
        "Router setup complete",
        extra={"api_prefix": api_prefix, "websocket_enabled": websocket_settings.enabled},
    )
