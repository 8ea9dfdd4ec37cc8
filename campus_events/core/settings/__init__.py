"""Modular Pydantic Settings v2 configuration.

Settings are split by domain (app/db/email/logging/notifications/websocket),
loaded from environment variables or a .env file, validated once and cached.

Import settings via cached loaders:
    from campus_events.core.settings import get_notification_settings

Or use unified settings for convenient access to all domains:
    from campus_events.core.settings import get_settings
"""

from __future__ import annotations

from .loader import (
    clear_settings_cache,
    get_app_settings,
    get_db_settings,
    get_email_settings,
    get_logging_settings,
    get_notification_settings,
    get_websocket_settings,
)
from .unified import Settings, get_settings

__all__ = [
    "Settings",
    "clear_settings_cache",
    "get_app_settings",
    "get_db_settings",
    "get_email_settings",
    "get_logging_settings",
    "get_notification_settings",
    "get_settings",
    "get_websocket_settings",
]
