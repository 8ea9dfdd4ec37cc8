"""Service layer for event registrations."""

from __future__ import annotations

from typing import TYPE_CHECKING

from campus_events.core.database import DuplicateRegistrationError, NotFoundError
from campus_events.core.services import BaseService
from campus_events.features.events.repository import EventRepository, get_event_repository
from campus_events.features.registrations.models import Registration
from campus_events.features.registrations.repository import (
    RegistrationRepository,
    get_registration_repository,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.ext.asyncio import AsyncSession

    from campus_events.features.registrations.schemas import RegistrationCreate


class RegistrationService(BaseService):
    """Registers users for events.

    A (event, email) pair moves from unregistered to registered exactly once;
    later attempts report ``created=False`` and write nothing.
    """

    def __init__(
        self,
        session: AsyncSession,
        repo: RegistrationRepository | None = None,
        events: EventRepository | None = None,
    ) -> None:
        super().__init__()
        self._session = session
        self._repo = repo or get_registration_repository()
        self._events = events or get_event_repository()

    async def register(self, payload: RegistrationCreate) -> tuple[Registration | None, bool]:
        """Register ``payload.user_email`` for ``payload.event_id``.

        Returns:
            Tuple of (registration, created). ``created`` is False when the
            pair was already registered, including when a concurrent insert
            won the race on the unique constraint.

        Raises:
            NotFoundError: If the event does not exist.
            StoreError: If the commit fails.
        """
        event = await self._events.get(self._session, payload.event_id)
        if event is None:
            msg = "Event"
            raise NotFoundError(msg, {"id": str(payload.event_id)})

        email = payload.user_email.strip().lower()
        existing = await self._repo.find(self._session, event.id, email)
        if existing is not None:
            self._lazy.debug(lambda: f"service.register({event.id}, {email}) -> already registered")
            return existing, False

        registration = Registration(
            event_id=event.id,
            event_title=event.title,
            user_email=email,
            user_name=payload.user_name,
        )
        try:
            registration = await self._repo.add(self._session, registration)
        except DuplicateRegistrationError:
            return await self._repo.find(self._session, payload.event_id, email), False

        await self._commit(self._session, "register")
        self.logger.info(
            "Registration created",
            extra={"event_id": str(event.id), "registration_id": str(registration.id)},
        )
        return registration, True

    async def list_for_email(self, email: str) -> Sequence[Registration]:
        """Registrations made with ``email``, oldest first."""
        return await self._repo.list_for_email(self._session, email.strip().lower())
