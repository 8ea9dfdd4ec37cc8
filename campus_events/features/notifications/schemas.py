"""Pydantic schemas for notification summaries in API responses."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import Field

from campus_events.core.schemas import CustomBase
from campus_events.features.notifications.outcome import NotificationStatus

if TYPE_CHECKING:
    from campus_events.features.notifications.outcome import NotificationOutcome


class NotificationSummary(CustomBase):
    """Advisory notification status attached to mutation responses.

    It reports what happened to the fan-out; it never changes the HTTP status
    of the request it rides on.
    """

    status: NotificationStatus = Field(description="Aggregate delivery status")
    attempted: int = Field(default=0, ge=0, description="Recipients a send was attempted for")
    succeeded: int = Field(default=0, ge=0)
    failed: int = Field(default=0, ge=0)
    broadcast: bool = Field(default=False, description="Whether a realtime broadcast was issued")

    @classmethod
    def from_outcome(cls, outcome: NotificationOutcome) -> NotificationSummary:
        return cls(
            status=outcome.status,
            attempted=outcome.attempted,
            succeeded=outcome.succeeded,
            failed=outcome.failed,
            broadcast=outcome.broadcast_issued,
        )

    @classmethod
    def scheduled(cls) -> NotificationSummary:
        """Summary for a dispatch queued to run after the response is sent."""
        return cls(status=NotificationStatus.SCHEDULED)


class NotificationResponse(CustomBase):
    """Response of the manual ``/send-notification/{id}`` trigger."""

    message: str
    notification: NotificationSummary
