"""Delivery channel protocol and the message passed to channels."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Collection

    from campus_events.features.notifications.outcome import RecipientResult
    from campus_events.infra.email.schemas import EmailAttachment


@dataclass(frozen=True, slots=True)
class NotificationMessage:
    """Rendered notification content.

    Attributes:
        subject: Email subject line.
        body_text: Plain-text email body.
        body_html: Optional HTML email body.
        attachments: Email attachments (inline images carry a content id).
        announcement: Short string for realtime broadcasts.
        tags: Labels forwarded to the email backend.
    """

    subject: str
    body_text: str
    body_html: str | None = None
    attachments: tuple[EmailAttachment, ...] = ()
    announcement: str | None = None
    tags: tuple[str, ...] = field(default_factory=tuple)


class DeliveryChannel(Protocol):
    """Protocol every delivery channel implements.

    ``deliver`` must not raise: failures are reported through the returned
    results (email) or logged and dropped (realtime).
    """

    @property
    def channel_name(self) -> str:
        """Channel identifier (``email``, ``realtime``)."""
        ...

    async def deliver(
        self,
        message: NotificationMessage,
        recipients: Collection[str],
    ) -> list[RecipientResult]:
        """Deliver ``message`` to ``recipients``.

        Args:
            message: Rendered notification.
            recipients: Deduplicated addresses. Broadcast channels ignore it.

        Returns:
            One result per recipient for targeted channels; an empty list for
            broadcast channels.
        """
        ...
