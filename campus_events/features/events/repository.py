"""Repository for the events feature."""
from __future__ import annotations

from typing import TYPE_CHECKING

from campus_events.core.database import BaseRepository
from campus_events.features.events.models import Event

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.ext.asyncio import AsyncSession


class EventRepository(BaseRepository[Event]):
    """Event queries beyond basic CRUD."""

    async def list_all(self, session: AsyncSession, *, limit: int = 500) -> Sequence[Event]:
        """Return events in creation order."""
        return await self.list(session, limit=limit, order_by=Event.created_at.asc())


_event_repository: EventRepository | None = None


def get_event_repository() -> EventRepository:
    """Get the shared EventRepository instance."""
    global _event_repository
    if _event_repository is None:
        _event_repository = EventRepository(Event)
    return _event_repository
