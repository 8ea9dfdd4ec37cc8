"""Events feature: event CRUD and the mutations that trigger notifications."""

from __future__ import annotations

from .models import Event
from .repository import EventRepository, get_event_repository

__all__ = ["Event", "EventRepository", "get_event_repository"]
