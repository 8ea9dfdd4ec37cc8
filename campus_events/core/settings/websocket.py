"""WebSocket configuration settings."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class WebSocketSettings(BaseSettings):
    """Realtime broadcast settings.

    Environment variables use WS_ prefix.
    Example: WS_SEND_TIMEOUT=0.5
    """

    enabled: bool = Field(default=True, description="Expose /ws and broadcast announcements")
    max_connections: int = Field(default=10000, ge=1, le=100000)

    heartbeat_interval: float = Field(
        default=30.0,
        ge=0,
        le=300,
        description="Seconds between server pings (0 disables the heartbeat)",
    )
    connection_timeout: float = Field(
        default=0.0,
        ge=0,
        le=600,
        description="Drop clients silent for this many seconds (0 never drops)",
    )
    send_timeout: float = Field(
        default=1.0,
        gt=0,
        le=30,
        description="Seconds one client may take to accept a frame before it is dropped",
    )

    broadcast_channel: str = Field(default="global", min_length=1, max_length=100)
    channel_prefix: str = Field(default="ws:", max_length=50, description="Redis PubSub prefix")
    redis_url: str | None = Field(
        default=None,
        description="Redis URL for cross-instance PubSub (None runs local-only)",
    )

    model_config = SettingsConfigDict(
        env_prefix="WS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )
