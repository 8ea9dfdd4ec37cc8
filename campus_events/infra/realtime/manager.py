"""WebSocket connection manager with optional Redis PubSub.

Tracks open WebSocket connections and fans broadcast messages out to all of
them. There is no per-client targeting: every connected client receives every
broadcast. Without Redis only clients connected to this instance receive a
broadcast; with ``WS_REDIS_URL`` set, broadcasts are published to Redis and
every instance relays them to its own clients.

Wire format of every broadcast frame::

    {"event": "newEvent", "payload": "New event added: Hack Night"}
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from redis.asyncio import Redis
from redis.exceptions import RedisError
from starlette.websockets import WebSocketDisconnect

from campus_events.infra.metrics.prometheus import (
    websocket_connections_active,
    websocket_connections_total,
)

if TYPE_CHECKING:
    from fastapi import WebSocket
    from redis.asyncio.client import PubSub

    from campus_events.core.settings.websocket import WebSocketSettings

logger = logging.getLogger(__name__)

# Errors that mean the socket is gone and should be dropped
_SEND_ERRORS = (WebSocketDisconnect, RuntimeError, OSError)


@dataclass
class ConnectionInfo:
    """Metadata about a WebSocket connection."""

    connection_id: str
    websocket: WebSocket
    connected_at: float = field(default_factory=time.time)
    last_seen: float = field(default_factory=time.time)


class ConnectionManager:
    """Manages WebSocket connections and broadcasts.

    Example:
        manager = ConnectionManager(settings)
        await manager.start()

        connection_id = await manager.connect(websocket)
        try:
            async for text in websocket.iter_text():
                manager.touch(connection_id)
        finally:
            await manager.disconnect(connection_id)

        await manager.broadcast("global", {"event": "newEvent", "payload": "..."})
    """

    def __init__(
        self,
        settings: WebSocketSettings,
        redis_client: Redis | None = None,
    ) -> None:
        """Initialize the connection manager.

        Args:
            settings: WebSocket settings (limits, heartbeat, send timeout).
            redis_client: Optional Redis client for PubSub. None runs the
                manager in local-only mode.
        """
        self._settings = settings
        self._redis = redis_client
        self._channel_prefix = settings.channel_prefix

        self._connections: dict[str, ConnectionInfo] = {}

        self._pubsub: PubSub | None = None
        self._listener_task: asyncio.Task[None] | None = None
        self._heartbeat_task: asyncio.Task[None] | None = None
        self._running = False

    @property
    def uses_redis(self) -> bool:
        return self._redis is not None

    async def start(self) -> None:
        """Start the PubSub listener (if Redis is configured) and the heartbeat."""
        if self._running:
            return
        self._running = True

        if self._redis is not None:
            self._pubsub = self._redis.pubsub()
            await self._pubsub.psubscribe(f"{self._channel_prefix}*")
            self._listener_task = asyncio.create_task(self._pubsub_listener())
            logger.info(
                "Connection manager started with Redis PubSub",
                extra={"channel_prefix": self._channel_prefix},
            )
        else:
            logger.info("Connection manager started in local-only mode")

        if self._settings.heartbeat_interval > 0:
            self._heartbeat_task = asyncio.create_task(self._heartbeat_loop())

    async def stop(self) -> None:
        """Stop background tasks and close every connection."""
        self._running = False

        for task in (self._heartbeat_task, self._listener_task):
            if task is not None:
                task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await task
        self._heartbeat_task = None
        self._listener_task = None

        if self._pubsub is not None:
            await self._pubsub.aclose()
            self._pubsub = None

        closed = len(self._connections)
        for conn_info in list(self._connections.values()):
            with contextlib.suppress(*_SEND_ERRORS):
                await conn_info.websocket.close(code=1001, reason="Server shutdown")

        self._connections.clear()
        websocket_connections_active.set(0)

        if self._redis is not None:
            await self._redis.aclose()

        logger.info("Connection manager stopped", extra={"connections_closed": closed})

    async def connect(self, websocket: WebSocket) -> str:
        """Accept a WebSocket and start delivering broadcasts to it.

        Returns:
            Unique connection ID

        Raises:
            ConnectionRefusedError: If the connection limit is reached.
        """
        if len(self._connections) >= self._settings.max_connections:
            websocket_connections_total.labels(status="rejected").inc()
            logger.warning(
                "Connection refused: max connections reached",
                extra={"max": self._settings.max_connections},
            )
            raise ConnectionRefusedError("Maximum connections reached")

        await websocket.accept()

        connection_id = str(uuid4())
        self._connections[connection_id] = ConnectionInfo(
            connection_id=connection_id,
            websocket=websocket,
        )

        websocket_connections_total.labels(status="accepted").inc()
        websocket_connections_active.set(len(self._connections))
        logger.info(
            "WebSocket connected",
            extra={
                "connection_id": connection_id,
                "total_connections": len(self._connections),
            },
        )
        return connection_id

    async def disconnect(self, connection_id: str) -> None:
        """Forget a connection and close its socket if still open."""
        conn_info = self._connections.pop(connection_id, None)
        if conn_info is None:
            return

        with contextlib.suppress(*_SEND_ERRORS):
            await conn_info.websocket.close()

        websocket_connections_active.set(len(self._connections))
        logger.info(
            "WebSocket disconnected",
            extra={
                "connection_id": connection_id,
                "duration_seconds": round(time.time() - conn_info.connected_at, 3),
                "total_connections": len(self._connections),
            },
        )

    def touch(self, connection_id: str) -> None:
        """Record client activity so the heartbeat does not time it out."""
        conn_info = self._connections.get(connection_id)
        if conn_info is not None:
            conn_info.last_seen = time.time()

    async def broadcast(self, channel: str, message: dict[str, Any]) -> int:
        """Send ``message`` to every connected client.

        ``channel`` names the Redis PubSub topic. With Redis the message is
        published and delivered to local clients by the PubSub listener, so
        the return value is 0.

        Returns:
            Number of local connections the message was written to.

        Raises:
            redis.exceptions.RedisError: If publishing to Redis fails.
        """
        if self._redis is not None:
            await self._redis.publish(f"{self._channel_prefix}{channel}", json.dumps(message))
            return 0
        return await self._send_to_all(message)

    async def send_to_connection(self, connection_id: str, message: dict[str, Any]) -> bool:
        """Write ``message`` to one connection.

        A connection whose socket is dead, or that does not accept the frame
        within ``send_timeout`` seconds, is dropped.
        """
        conn_info = self._connections.get(connection_id)
        if conn_info is None:
            return False

        try:
            await asyncio.wait_for(
                conn_info.websocket.send_json(message),
                timeout=self._settings.send_timeout,
            )
        except TimeoutError:
            logger.warning(
                "WebSocket send timed out, dropping slow client",
                extra={"connection_id": connection_id, "timeout": self._settings.send_timeout},
            )
            await self.disconnect(connection_id)
            return False
        except _SEND_ERRORS as e:
            logger.warning(
                "Failed to send message to connection",
                extra={"connection_id": connection_id, "error": str(e)},
            )
            await self.disconnect(connection_id)
            return False
        return True

    def get_connection(self, connection_id: str) -> ConnectionInfo | None:
        return self._connections.get(connection_id)

    @property
    def connection_count(self) -> int:
        """Total number of active connections."""
        return len(self._connections)

    async def _send_to_all(self, message: dict[str, Any]) -> int:
        connection_ids = list(self._connections)
        results = await asyncio.gather(
            *(self.send_to_connection(connection_id, message) for connection_id in connection_ids)
        )
        return sum(results)

    async def _pubsub_listener(self) -> None:
        """Relay Redis PubSub messages to local connections."""
        if self._pubsub is None:
            return

        try:
            async for message in self._pubsub.listen():
                if not self._running:
                    break
                if message["type"] not in ("message", "pmessage"):
                    continue

                data = message["data"]
                if isinstance(data, bytes):
                    data = data.decode()
                try:
                    payload = json.loads(data)
                except json.JSONDecodeError:
                    logger.error(
                        "Dropping malformed PubSub message",
                        extra={"channel": str(message["channel"])},
                    )
                    continue

                await self._send_to_all(payload)
        except RedisError as e:
            logger.error("PubSub listener stopped", extra={"error": str(e)})

    async def _heartbeat_loop(self) -> None:
        """Ping every connection and drop the ones that stopped answering."""
        interval = self._settings.heartbeat_interval
        timeout = self._settings.connection_timeout

        while self._running:
            await asyncio.sleep(interval)
            now = time.time()

            for connection_id in list(self._connections):
                conn_info = self._connections.get(connection_id)
                if conn_info is None:
                    continue
                if timeout > 0 and (now - conn_info.last_seen) > timeout:
                    logger.warning("Connection timed out", extra={"connection_id": connection_id})
                    await self.disconnect(connection_id)

            await self._send_to_all({"type": "ping"})


_manager: ConnectionManager | None = None


def get_connection_manager() -> ConnectionManager:
    """Get the global connection manager.

    Raises:
        RuntimeError: If the manager has not been started.
    """
    if _manager is None:
        raise RuntimeError(
            "Connection manager not initialized. Call start_connection_manager() first."
        )
    return _manager


async def start_connection_manager(settings: WebSocketSettings) -> ConnectionManager:
    """Create and start the global connection manager.

    Falls back to local-only mode when Redis is configured but unreachable.
    """
    global _manager

    if _manager is not None:
        return _manager

    redis_client: Redis | None = None
    if settings.redis_url:
        redis_client = Redis.from_url(settings.redis_url)
        try:
            await redis_client.ping()
        except (RedisError, OSError) as e:
            logger.warning(
                "Failed to connect to Redis for WebSocket PubSub, using local-only mode",
                extra={"error": str(e)},
            )
            await redis_client.aclose()
            redis_client = None
        else:
            logger.info("WebSocket manager using Redis PubSub")

    _manager = ConnectionManager(settings, redis_client=redis_client)
    await _manager.start()
    return _manager


async def stop_connection_manager() -> None:
    """Stop and forget the global connection manager."""
    global _manager

    if _manager is not None:
        await _manager.stop()
        _manager = None
