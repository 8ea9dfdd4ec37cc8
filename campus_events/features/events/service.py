"""Service layer for the events feature."""

from __future__ import annotations

from typing import TYPE_CHECKING

from campus_events.core.database import NotFoundError
from campus_events.core.services import BaseService
from campus_events.features.events.models import Event
from campus_events.features.events.repository import EventRepository, get_event_repository
from campus_events.features.registrations.repository import (
    RegistrationRepository,
    get_registration_repository,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from sqlalchemy.ext.asyncio import AsyncSession

    from campus_events.features.events.schemas import EventCreate, EventUpdate
    from campus_events.features.registrations.models import Registration


class EventService(BaseService):
    """Event CRUD.

    Every mutation commits before returning, so notifications dispatched
    afterwards only ever describe persisted state.
    """

    def __init__(
        self,
        session: AsyncSession,
        repo: EventRepository | None = None,
        registrations: RegistrationRepository | None = None,
    ) -> None:
        super().__init__()
        self._session = session
        self._repo = repo or get_event_repository()
        self._registrations = registrations or get_registration_repository()

    async def list_events(self) -> Sequence[Event]:
        events = await self._repo.list_all(self._session)
        self._lazy.debug(lambda: f"service.list_events() -> {len(events)} events")
        return events

    async def get_event(self, event_id: UUID) -> Event:
        """Get an event by ID.

        Raises:
            NotFoundError: If the event does not exist.
        """
        event = await self._repo.get(self._session, event_id)
        if event is None:
            msg = "Event"
            raise NotFoundError(msg, {"id": str(event_id)})
        return event

    async def create_event(self, payload: EventCreate) -> Event:
        """Persist a new event and commit.

        Raises:
            StoreError: If the commit fails.
        """
        event = await self._repo.create(self._session, Event(**payload.model_dump()))
        await self._commit(self._session, "create_event")

        self.logger.info(
            "Event created",
            extra={"event_id": str(event.id), "title": event.title},
        )
        return event

    async def update_event(self, event_id: UUID, payload: EventUpdate) -> Event:
        """Apply the fields present in ``payload`` and commit.

        Raises:
            NotFoundError: If the event does not exist.
            StoreError: If the commit fails.
        """
        event = await self.get_event(event_id)
        changes = payload.model_dump(exclude_unset=True)
        event = await self._repo.update(self._session, event, changes)
        await self._commit(self._session, "update_event")

        self.logger.info(
            "Event updated",
            extra={"event_id": str(event.id), "fields": sorted(changes)},
        )
        return event

    async def delete_event(self, event_id: UUID) -> int:
        """Delete an event together with all of its registrations.

        Returns:
            Number of registrations removed.

        Raises:
            NotFoundError: If the event does not exist.
            StoreError: If the commit fails.
        """
        event = await self.get_event(event_id)
        removed = await self._registrations.delete_for_event(self._session, event.id)
        await self._repo.delete(self._session, event)
        await self._commit(self._session, "delete_event")

        self.logger.info(
            "Event deleted",
            extra={"event_id": str(event_id), "registrations_deleted": removed},
        )
        return removed

    async def list_registrations(self, event_id: UUID) -> Sequence[Registration]:
        """Registrations of an existing event.

        Raises:
            NotFoundError: If the event does not exist.
        """
        await self.get_event(event_id)
        return await self._registrations.list_for_event(self._session, event_id)
