"""Notification fan-out settings.

Environment variables use NOTIFY_ prefix.
Example: NOTIFY_EMAIL_POLICY=per_recipient, NOTIFY_RECIPIENT_TIMEOUT=10
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

EmailPolicy = Literal["per_recipient", "batch"]
DispatchMode = Literal["inline", "background"]


class NotificationSettings(BaseSettings):
    """How event mutations are fanned out to users."""

    enabled: bool = Field(
        default=True,
        description="Send notifications on event creation/update and registration",
    )

    email_policy: EmailPolicy = Field(
        default="per_recipient",
        description=(
            "per_recipient sends one message per address so a bad address only fails itself; "
            "batch sends a single message with every address in To"
        ),
    )
    recipient_timeout: float = Field(
        default=15.0,
        gt=0,
        le=300.0,
        description="Seconds allowed for a single email send before it counts as failed",
    )
    max_concurrency: int = Field(
        default=20,
        ge=1,
        le=500,
        description="Maximum email sends in flight for one dispatch",
    )

    dispatch_mode: DispatchMode = Field(
        default="inline",
        description=(
            "inline awaits dispatch after commit and reports an advisory status; "
            "background queues dispatch after the response is sent"
        ),
    )

    realtime_event_name: str = Field(
        default="newEvent",
        min_length=1,
        max_length=100,
        description="Event name used for realtime announcements",
    )

    uploads_dir: Path = Field(
        default=Path("uploads"),
        description="Directory local event images are resolved against for inline attachments",
    )
    signature: str = Field(
        default="CampusConnect Team",
        max_length=100,
        description="Sign-off line appended to notification emails",
    )

    model_config = SettingsConfigDict(
        env_prefix="NOTIFY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )
