"""Pydantic schemas for realtime WebSocket messages.

Message Types:
- Client → Server: ping, pong
- Server → Client: connected, ping, pong, error, and event announcements
  ``{"event": "newEvent", "payload": "..."}``
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Literal

from pydantic import BaseModel, Field


class ClientMessageType(StrEnum):
    """Message types sent from client to server."""

    PING = "ping"
    PONG = "pong"


class ConnectedMessage(BaseModel):
    """Sent once after the connection is accepted."""

    type: Literal["connected"] = "connected"
    connection_id: str


class ServerPongMessage(BaseModel):
    type: Literal["pong"] = "pong"


class ErrorMessage(BaseModel):
    """Error reported back to the client; the connection stays open."""

    type: Literal["error"] = "error"
    code: str
    message: str
    details: dict[str, Any] | None = None


class ConnectionStats(BaseModel):
    """Connection statistics for this instance."""

    total_connections: int = Field(ge=0)
    uses_redis: bool = False
