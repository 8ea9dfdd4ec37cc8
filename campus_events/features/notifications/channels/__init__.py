"""Delivery channels for notifications."""

from __future__ import annotations

from .base import DeliveryChannel, NotificationMessage
from .email import EmailChannel
from .realtime import RealtimeChannel

__all__ = ["DeliveryChannel", "EmailChannel", "NotificationMessage", "RealtimeChannel"]
