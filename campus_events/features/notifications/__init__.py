"""Notification fan-out for event mutations.

An event mutation is committed first; the dispatcher then resolves the
affected recipients, renders the message and delivers it through the email
and realtime channels. The result is a ``NotificationOutcome`` that never
fails the originating request.
"""

from __future__ import annotations

from .outcome import (
    DeliveryError,
    MutationKind,
    NotificationOutcome,
    NotificationStatus,
    RecipientResult,
    RecipientScope,
)

__all__ = [
    "DeliveryError",
    "MutationKind",
    "NotificationOutcome",
    "NotificationStatus",
    "RecipientResult",
    "RecipientScope",
]
