"""Import every mapped model so ``Base.metadata`` knows all tables."""

from __future__ import annotations

from campus_events.features.events.models import Event
from campus_events.features.registrations.models import Registration
from campus_events.features.users.models import User

__all__ = ["Event", "Registration", "User"]
