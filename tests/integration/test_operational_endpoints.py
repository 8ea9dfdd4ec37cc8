"""API tests for health, metrics and WebSocket endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from fastapi.testclient import TestClient

from campus_events.app.main import create_app
from campus_events.core.dependencies.realtime import get_ws_connection_manager
from campus_events.core.settings.websocket import WebSocketSettings
from campus_events.infra.realtime import ConnectionManager
from tests.utils import FakeEmailClient, add_users

if TYPE_CHECKING:
    from fastapi import FastAPI
    from httpx import AsyncClient
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker


@pytest.mark.asyncio
async def test_health_reports_each_dependency(
    client: AsyncClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr("campus_events.infra.email.get_email_client", FakeEmailClient)

    response = await client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["service"] == "campus-events"
    assert body["checks"] == {"database": True, "email": True, "websocket": True}


@pytest.mark.asyncio
async def test_health_is_degraded_without_optional_services(
    app: FastAPI, client: AsyncClient
) -> None:
    app.dependency_overrides[get_ws_connection_manager] = lambda: None

    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "degraded"
    assert response.json()["checks"]["websocket"] is False


@pytest.mark.asyncio
async def test_metrics_expose_notification_counters(
    client: AsyncClient,
    session_factory: async_sessionmaker[AsyncSession],
) -> None:
    await add_users(session_factory, "a@x.com")
    await client.post("/add-event", json={"title": "Hack Night"})

    response = await client.get("/metrics")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert 'notification_dispatched_total{kind="created",status="delivered"}' in response.text
    assert "notification_sends_total" in response.text


@pytest.mark.asyncio
async def test_ws_stats(app: FastAPI, client: AsyncClient) -> None:
    response = await client.get("/ws/stats")

    assert response.status_code == 200
    assert response.json() == {"total_connections": 0, "uses_redis": False}

    app.dependency_overrides[get_ws_connection_manager] = lambda: None
    assert (await client.get("/ws/stats")).status_code == 503


@pytest.fixture
def ws_manager() -> ConnectionManager:
    return ConnectionManager(WebSocketSettings(heartbeat_interval=0))


@pytest.fixture
def ws_client(ws_manager: ConnectionManager) -> TestClient:
    application = create_app()
    application.dependency_overrides[get_ws_connection_manager] = lambda: ws_manager
    return TestClient(application)


def test_websocket_protocol(ws_client: TestClient, ws_manager: ConnectionManager) -> None:
    with ws_client.websocket_connect("/ws") as websocket:
        connected = websocket.receive_json()
        assert connected["type"] == "connected"
        assert set(connected) == {"type", "connection_id"}
        assert ws_manager.connection_count == 1

        websocket.send_json({"type": "ping"})
        assert websocket.receive_json() == {"type": "pong"}

        websocket.send_json({"type": "unsubscribe", "channels": ["global"]})
        assert websocket.receive_json()["code"] == "unknown_type"

        websocket.send_text("not json")
        assert websocket.receive_json()["code"] == "invalid_json"

        websocket.send_json({"type": "dance"})
        assert websocket.receive_json()["code"] == "unknown_type"
