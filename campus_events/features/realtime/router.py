"""WebSocket router for realtime event announcements.

Endpoints:
- GET /ws: WebSocket connection endpoint
- GET /ws/stats: Connection statistics
"""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status
from fastapi.responses import JSONResponse

from campus_events.core.dependencies.realtime import OptionalConnectionManager
from campus_events.core.settings import get_websocket_settings
from campus_events.features.realtime.schemas import (
    ClientMessageType,
    ConnectedMessage,
    ConnectionStats,
    ErrorMessage,
    ServerPongMessage,
)
from campus_events.infra.realtime import ConnectionManager

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/ws", tags=["realtime"])


@router.websocket("")
async def websocket_endpoint(websocket: WebSocket, manager: OptionalConnectionManager) -> None:
    """WebSocket connection endpoint.

    Every connection receives every broadcast, e.g.
    ``{"event": "newEvent", "payload": "New event added: <title>"}`` whenever
    an event is created.

    Message Protocol:
        Client → Server:
        - {"type": "ping"}
        - {"type": "pong"}

        Server → Client:
        - {"type": "connected", "connection_id": "..."}
        - {"type": "ping"}
        - {"type": "pong"}
        - {"type": "error", "code": "...", "message": "..."}
        - {"event": "...", "payload": "..."}
    """
    if not get_websocket_settings().enabled or manager is None:
        await websocket.close(code=status.WS_1013_TRY_AGAIN_LATER, reason="WebSocket unavailable")
        return

    try:
        connection_id = await manager.connect(websocket)
    except ConnectionRefusedError as e:
        logger.warning("WebSocket connection refused", extra={"reason": str(e)})
        await websocket.close(code=status.WS_1013_TRY_AGAIN_LATER, reason=str(e))
        return

    try:
        await websocket.send_json(ConnectedMessage(connection_id=connection_id).model_dump())
        await _handle_messages(websocket, connection_id, manager)
    except WebSocketDisconnect:
        logger.debug("WebSocket client disconnected normally")
    finally:
        await manager.disconnect(connection_id)


async def _handle_messages(
    websocket: WebSocket,
    connection_id: str,
    manager: ConnectionManager,
) -> None:
    """Handle incoming WebSocket messages until the client goes away."""
    async for raw_message in websocket.iter_text():
        manager.touch(connection_id)
        try:
            message = json.loads(raw_message)
        except json.JSONDecodeError:
            error = ErrorMessage(code="invalid_json", message="Invalid JSON message")
            await websocket.send_json(error.model_dump())
            continue

        msg_type = message.get("type") if isinstance(message, dict) else None

        if msg_type == ClientMessageType.PING:
            await websocket.send_json(ServerPongMessage().model_dump())

        elif msg_type == ClientMessageType.PONG:
            continue

        else:
            error = ErrorMessage(code="unknown_type", message=f"Unknown message type: {msg_type}")
            await websocket.send_json(error.model_dump())


@router.get(
    "/stats",
    response_model=ConnectionStats,
    summary="Get WebSocket connection statistics",
    description="Returns the current connection count for this instance.",
)
async def get_stats(manager: OptionalConnectionManager) -> ConnectionStats | JSONResponse:
    if manager is None:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": "WebSocket manager not initialized"},
        )

    return ConnectionStats(
        total_connections=manager.connection_count,
        uses_redis=manager.uses_redis,
    )
