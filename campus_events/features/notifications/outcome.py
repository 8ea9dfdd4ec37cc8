"""Value types describing a notification fan-out and its result."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID


class MutationKind(StrEnum):
    """Event mutation that triggered a notification."""

    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
    REGISTERED = "registered"


class RecipientScope(StrEnum):
    """Which addresses a notification goes to."""

    ALL_USERS = "all_users"
    EVENT_REGISTRANTS = "event_registrants"


class NotificationStatus(StrEnum):
    """Aggregate status of one dispatch."""

    DELIVERED = "delivered"
    PARTIAL = "partial"
    FAILED = "failed"
    SKIPPED = "skipped"
    SCHEDULED = "scheduled"


class DeliveryError(Exception):
    """Delivery to a single recipient failed.

    Captured into a ``RecipientResult``; never propagated to the request.

    Attributes:
        recipient: Address the send was for.
        cause: Short description of what went wrong.
    """

    def __init__(self, recipient: str, cause: str) -> None:
        self.recipient = recipient
        self.cause = cause
        super().__init__(f"Delivery to {recipient} failed: {cause}")


@dataclass(frozen=True, slots=True)
class RecipientResult:
    """Outcome of one send attempt."""

    recipient: str
    channel: str
    success: bool
    error: DeliveryError | None = None
    message_id: str | None = None

    @classmethod
    def ok(cls, recipient: str, channel: str, message_id: str | None = None) -> RecipientResult:
        return cls(recipient=recipient, channel=channel, success=True, message_id=message_id)

    @classmethod
    def failed(cls, recipient: str, channel: str, cause: str) -> RecipientResult:
        return cls(
            recipient=recipient,
            channel=channel,
            success=False,
            error=DeliveryError(recipient, cause),
        )


@dataclass(slots=True)
class NotificationOutcome:
    """Aggregated result of dispatching one event mutation.

    Attributes:
        kind: Mutation that triggered the dispatch.
        event_id: Event the notification is about.
        recipients: Deduplicated addresses a send was attempted for.
        succeeded: Number of successful sends.
        failed: Number of failed sends.
        failures: Recipient address to failure reason.
        broadcast_issued: Whether a realtime broadcast was issued.
        error: Set when the dispatch itself could not run (e.g. the
            recipient lookup failed).
    """

    kind: MutationKind
    event_id: UUID | None
    recipients: tuple[str, ...] = ()
    succeeded: int = 0
    failed: int = 0
    failures: dict[str, str] = field(default_factory=dict)
    broadcast_issued: bool = False
    error: str | None = None

    @classmethod
    def skipped(cls, kind: MutationKind, event_id: UUID | None) -> NotificationOutcome:
        return cls(kind=kind, event_id=event_id)

    @classmethod
    def aborted(cls, kind: MutationKind, event_id: UUID | None, error: str) -> NotificationOutcome:
        """Outcome for a dispatch that failed before any send was attempted."""
        return cls(kind=kind, event_id=event_id, error=error)

    @classmethod
    def from_results(
        cls,
        kind: MutationKind,
        event_id: UUID | None,
        recipients: Iterable[str],
        results: Iterable[RecipientResult],
        *,
        broadcast_issued: bool = False,
    ) -> NotificationOutcome:
        outcome = cls(
            kind=kind,
            event_id=event_id,
            recipients=tuple(recipients),
            broadcast_issued=broadcast_issued,
        )
        for result in results:
            if result.success:
                outcome.succeeded += 1
            else:
                outcome.failed += 1
                if result.error is not None:
                    outcome.failures[result.recipient] = result.error.cause
        return outcome

    @property
    def attempted(self) -> int:
        return len(self.recipients)

    @property
    def status(self) -> NotificationStatus:
        if self.error is not None:
            return NotificationStatus.FAILED
        if self.attempted == 0:
            return NotificationStatus.DELIVERED if self.broadcast_issued else NotificationStatus.SKIPPED
        if self.failed == 0:
            return NotificationStatus.DELIVERED
        if self.succeeded == 0:
            return NotificationStatus.FAILED
        return NotificationStatus.PARTIAL
