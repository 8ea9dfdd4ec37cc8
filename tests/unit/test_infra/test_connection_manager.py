"""Tests for the WebSocket connection manager in local-only mode."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest
from starlette.websockets import WebSocketDisconnect

from campus_events.core.settings.websocket import WebSocketSettings
from campus_events.infra.realtime import ConnectionManager


class FakeWebSocket:
    def __init__(self, *, broken: bool = False, stalled: bool = False) -> None:
        self.accepted = False
        self.closed = False
        self.sent: list[dict[str, Any]] = []
        self.broken = broken
        self.stalled = stalled

    async def accept(self) -> None:
        self.accepted = True

    async def send_json(self, data: dict[str, Any]) -> None:
        if self.broken:
            raise WebSocketDisconnect(code=1006)
        if self.stalled:
            await asyncio.Event().wait()
        self.sent.append(data)

    async def close(self, code: int = 1000, reason: str | None = None) -> None:
        self.closed = True


@pytest.fixture
def manager() -> ConnectionManager:
    return ConnectionManager(
        WebSocketSettings(heartbeat_interval=0, send_timeout=0.05, redis_url=None)
    )


ANNOUNCEMENT = {"event": "newEvent", "payload": "New event added: Hack Night"}


@pytest.mark.asyncio
async def test_connect_accepts_and_counts(manager: ConnectionManager) -> None:
    websocket = FakeWebSocket()

    connection_id = await manager.connect(websocket)

    assert websocket.accepted is True
    assert manager.get_connection(connection_id) is not None
    assert manager.connection_count == 1


@pytest.mark.asyncio
async def test_broadcast_reaches_every_client(manager: ConnectionManager) -> None:
    first, second = FakeWebSocket(), FakeWebSocket()
    await manager.connect(first)
    await manager.connect(second)

    sent = await manager.broadcast("global", ANNOUNCEMENT)

    assert sent == 2
    assert first.sent == [ANNOUNCEMENT]
    assert second.sent == [ANNOUNCEMENT]


@pytest.mark.asyncio
async def test_broadcast_ignores_topic_for_local_clients(manager: ConnectionManager) -> None:
    websocket = FakeWebSocket()
    await manager.connect(websocket)

    assert await manager.broadcast("campus", ANNOUNCEMENT) == 1
    assert websocket.sent == [ANNOUNCEMENT]


@pytest.mark.asyncio
async def test_dead_socket_is_dropped_on_broadcast(manager: ConnectionManager) -> None:
    healthy, broken = FakeWebSocket(), FakeWebSocket(broken=True)
    await manager.connect(healthy)
    await manager.connect(broken)

    sent = await manager.broadcast("global", ANNOUNCEMENT)

    assert sent == 1
    assert manager.connection_count == 1
    assert broken.closed is True


@pytest.mark.asyncio
async def test_stalled_client_does_not_hold_up_broadcast(manager: ConnectionManager) -> None:
    healthy, stalled = FakeWebSocket(), FakeWebSocket(stalled=True)
    await manager.connect(stalled)
    await manager.connect(healthy)

    sent = await asyncio.wait_for(manager.broadcast("global", ANNOUNCEMENT), timeout=2)

    assert sent == 1
    assert healthy.sent == [ANNOUNCEMENT]
    assert stalled.closed is True
    assert manager.connection_count == 1


@pytest.mark.asyncio
async def test_connection_limit_is_enforced() -> None:
    manager = ConnectionManager(WebSocketSettings(max_connections=1, heartbeat_interval=0))
    await manager.connect(FakeWebSocket())

    with pytest.raises(ConnectionRefusedError):
        await manager.connect(FakeWebSocket())


@pytest.mark.asyncio
async def test_stop_closes_connections(manager: ConnectionManager) -> None:
    websocket = FakeWebSocket()
    await manager.start()
    await manager.connect(websocket)

    await manager.stop()

    assert websocket.closed is True
    assert manager.connection_count == 0
