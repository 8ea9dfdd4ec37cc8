"""Tests for environment-driven settings."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from campus_events.core.settings import (
    clear_settings_cache,
    get_app_settings,
    get_db_settings,
    get_notification_settings,
)
from campus_events.core.settings.app import AppSettings
from campus_events.core.settings.database import DatabaseSettings
from campus_events.core.settings.logs import LoggingSettings
from campus_events.core.settings.notifications import NotificationSettings


@pytest.fixture(autouse=True)
def fresh_settings() -> Iterator[None]:
    clear_settings_cache()
    yield
    clear_settings_cache()


def test_notification_settings_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NOTIFY_EMAIL_POLICY", "batch")
    monkeypatch.setenv("NOTIFY_DISPATCH_MODE", "background")
    monkeypatch.setenv("NOTIFY_RECIPIENT_TIMEOUT", "2.5")

    settings = get_notification_settings()

    assert settings.email_policy == "batch"
    assert settings.dispatch_mode == "background"
    assert settings.recipient_timeout == 2.5
    assert get_notification_settings() is settings


def test_notification_defaults() -> None:
    settings = NotificationSettings()

    assert settings.email_policy == "per_recipient"
    assert settings.dispatch_mode == "inline"
    assert settings.realtime_event_name == "newEvent"


def test_unknown_email_policy_is_rejected() -> None:
    with pytest.raises(ValueError, match="email_policy"):
        NotificationSettings(email_policy="carrier-pigeon")


def test_postgres_url_uses_psycopg_driver() -> None:
    settings = DatabaseSettings(url="postgres://campus:secret@db:5432/campus")

    assert settings.url == "postgresql+psycopg://campus:secret@db:5432/campus"
    assert settings.is_sqlite is False
    assert settings.engine_kwargs()["pool_size"] == 10


def test_sqlite_engine_kwargs_skip_pool_options(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DB_URL", "sqlite+aiosqlite:///./test.db")

    kwargs = get_db_settings().engine_kwargs()

    assert "pool_size" not in kwargs


def test_debug_is_refused_in_production() -> None:
    with pytest.raises(ValueError, match="production"):
        AppSettings(environment="production", debug=True)


def test_docs_can_be_disabled(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APP_DISABLE_DOCS", "true")

    settings = get_app_settings()

    assert settings.get_docs_url() is None
    assert settings.get_openapi_url() is None


def test_log_level_is_normalized() -> None:
    assert LoggingSettings(level="debug").level == "DEBUG"
