"""Repository for event registrations."""
from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError

from campus_events.core.database import BaseRepository, DuplicateRegistrationError
from campus_events.features.registrations.models import Registration

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from sqlalchemy.ext.asyncio import AsyncSession


class RegistrationRepository(BaseRepository[Registration]):
    """Registration queries keyed by event id and user email."""

    async def find(
        self,
        session: AsyncSession,
        event_id: UUID,
        user_email: str,
    ) -> Registration | None:
        stmt = select(Registration).where(
            Registration.event_id == event_id,
            Registration.user_email == user_email,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def add(self, session: AsyncSession, registration: Registration) -> Registration:
        """Insert a registration.

        Raises:
            DuplicateRegistrationError: If the (event_id, user_email) unique
                constraint rejects the row. The session is rolled back.
        """
        try:
            return await self.create(session, registration)
        except IntegrityError as exc:
            await session.rollback()
            self._logger.info(
                "Concurrent duplicate registration rejected by constraint",
                extra={"event_id": str(registration.event_id), "operation": "db.add"},
            )
            raise DuplicateRegistrationError(
                registration.event_id, registration.user_email
            ) from exc

    async def list_for_event(self, session: AsyncSession, event_id: UUID) -> Sequence[Registration]:
        stmt = (
            select(Registration)
            .where(Registration.event_id == event_id)
            .order_by(Registration.created_at.asc())
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def list_emails_for_event(self, session: AsyncSession, event_id: UUID) -> Sequence[str]:
        result = await session.execute(
            select(Registration.user_email).where(Registration.event_id == event_id)
        )
        return result.scalars().all()

    async def list_for_email(self, session: AsyncSession, user_email: str) -> Sequence[Registration]:
        stmt = (
            select(Registration)
            .where(Registration.user_email == user_email)
            .order_by(Registration.created_at.asc())
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def delete_for_event(self, session: AsyncSession, event_id: UUID) -> int:
        """Delete every registration of an event with one statement.

        Returns:
            Number of rows deleted.
        """
        result = await session.execute(
            delete(Registration).where(Registration.event_id == event_id)
        )
        deleted = result.rowcount or 0
        self._lazy.debug(lambda: f"db.delete_for_event: Registration(event_id={event_id}) -> {deleted}")
        return deleted


_registration_repository: RegistrationRepository | None = None


def get_registration_repository() -> RegistrationRepository:
    """Get the shared RegistrationRepository instance."""
    global _registration_repository
    if _registration_repository is None:
        _registration_repository = RegistrationRepository(Registration)
    return _registration_repository
