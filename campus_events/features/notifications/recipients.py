"""Recipient resolution for notification fan-out."""

from __future__ import annotations

from typing import TYPE_CHECKING

from campus_events.features.notifications.outcome import RecipientScope
from campus_events.features.registrations.repository import (
    RegistrationRepository,
    get_registration_repository,
)
from campus_events.features.users.repository import UserRepository, get_user_repository
from campus_events.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from collections.abc import Iterable
    from uuid import UUID

    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

lazy_logger = get_lazy_logger(__name__)


def normalize_addresses(addresses: Iterable[str | None]) -> frozenset[str]:
    """Lower-case and strip addresses, dropping blanks and duplicates."""
    return frozenset(
        normalized for address in addresses if address and (normalized := address.strip().lower())
    )


class RecipientResolver:
    """Computes the deduplicated set of addresses a notification goes to.

    Opens its own session from the injected factory, so it can run inside a
    request or from a background task after the request session is closed.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        user_repository: UserRepository | None = None,
        registration_repository: RegistrationRepository | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._users = user_repository or get_user_repository()
        self._registrations = registration_repository or get_registration_repository()

    async def resolve(self, scope: RecipientScope, event_id: UUID | None = None) -> frozenset[str]:
        """Return the recipient addresses for ``scope``.

        An empty set means there is nothing to send.

        Raises:
            ValueError: If ``EVENT_REGISTRANTS`` is requested without an event id.
            sqlalchemy.exc.SQLAlchemyError: If the lookup fails.
        """
        if scope is RecipientScope.EVENT_REGISTRANTS and event_id is None:
            raise ValueError("event_id is required for EVENT_REGISTRANTS")

        async with self._session_factory() as session:
            if scope is RecipientScope.ALL_USERS:
                raw = await self._users.list_emails(session)
            else:
                raw = await self._registrations.list_emails_for_event(session, event_id)

        recipients = normalize_addresses(raw)
        lazy_logger.debug(
            lambda: f"resolve({scope}, event_id={event_id}) -> {len(recipients)} of {len(raw)} rows"
        )
        return recipients
