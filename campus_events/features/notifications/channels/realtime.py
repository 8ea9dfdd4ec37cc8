"""Realtime broadcast channel over the WebSocket connection manager."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from campus_events.features.notifications.metrics import notification_broadcasts_total

if TYPE_CHECKING:
    from collections.abc import Collection

    from campus_events.features.notifications.channels.base import NotificationMessage
    from campus_events.features.notifications.outcome import RecipientResult
    from campus_events.infra.realtime.manager import ConnectionManager

logger = logging.getLogger(__name__)


class RealtimeChannel:
    """Broadcasts a short announcement to every connected client.

    Fire-and-forget: no per-recipient targeting, no retry, and clients that
    connect later never see the message. Transport errors are logged and
    swallowed.
    """

    channel_name = "realtime"

    def __init__(
        self,
        manager: ConnectionManager,
        *,
        channel: str = "global",
        event_name: str = "newEvent",
    ) -> None:
        self._manager = manager
        self._channel = channel
        self._event_name = event_name

    def build_payload(self, message: NotificationMessage) -> dict[str, Any]:
        return {"event": self._event_name, "payload": message.announcement or message.subject}

    async def announce(self, message: NotificationMessage) -> bool:
        """Broadcast ``message`` and report whether the transport accepted it."""
        payload = self.build_payload(message)
        try:
            sent = await self._manager.broadcast(self._channel, payload)
        except Exception as exc:  # noqa: BLE001 - broadcasts are best-effort
            notification_broadcasts_total.labels(status="failed").inc()
            logger.warning(
                "Realtime broadcast failed",
                extra={"channel": self._channel, "event": self._event_name, "error": str(exc)},
            )
            return False

        notification_broadcasts_total.labels(status="issued").inc()
        logger.info(
            "Realtime broadcast issued",
            extra={"channel": self._channel, "event": self._event_name, "local_connections": sent},
        )
        return True

    async def deliver(
        self,
        message: NotificationMessage,
        recipients: Collection[str],
    ) -> list[RecipientResult]:
        await self.announce(message)
        return []
