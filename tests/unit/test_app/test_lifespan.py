"""Tests for FastAPI application lifespan management."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi import FastAPI

from campus_events.app import lifespan as lifespan_module
from campus_events.core.settings import clear_settings_cache
from campus_events.features.notifications.dispatcher import get_notification_dispatcher
from campus_events.infra.email import get_email_client
from campus_events.infra.realtime import get_connection_manager


@pytest.fixture
def lifespan_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    monkeypatch.setenv("DB_URL", f"sqlite+aiosqlite:///{tmp_path / 'lifespan.db'}")
    monkeypatch.setenv("EMAIL_BACKEND", "console")
    monkeypatch.setenv("WS_HEARTBEAT_INTERVAL", "0")
    monkeypatch.setattr(lifespan_module, "setup_logging", lambda **kwargs: None)
    monkeypatch.setattr("campus_events.infra.logging.config.shutdown", lambda: None)
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.mark.asyncio
@pytest.mark.usefixtures("lifespan_env")
async def test_lifespan_starts_and_stops_services() -> None:
    async with lifespan_module.lifespan(FastAPI()):
        assert get_email_client().backend_name == "console"
        assert get_connection_manager().uses_redis is False
        assert get_notification_dispatcher().enabled is True
        assert lifespan_module.get_websocket_enabled() is True

    with pytest.raises(RuntimeError):
        get_notification_dispatcher()
    with pytest.raises(RuntimeError):
        get_email_client()
    with pytest.raises(RuntimeError):
        get_connection_manager()
    assert lifespan_module.get_websocket_enabled() is False


@pytest.mark.asyncio
@pytest.mark.usefixtures("lifespan_env")
async def test_lifespan_runs_without_websocket(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WS_ENABLED", "false")
    clear_settings_cache()

    async with lifespan_module.lifespan(FastAPI()):
        assert lifespan_module.get_websocket_enabled() is False
        assert get_notification_dispatcher().enabled is True
