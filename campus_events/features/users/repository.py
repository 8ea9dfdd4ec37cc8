"""Repository for user accounts."""
from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from campus_events.core.database import BaseRepository, DuplicateUserError
from campus_events.features.users.models import User

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.ext.asyncio import AsyncSession


class UserRepository(BaseRepository[User]):
    """User-specific queries beyond basic CRUD."""

    async def get_by_email(self, session: AsyncSession, email: str) -> User | None:
        return await self.get_by(session, User.email, email.strip().lower())

    async def add(self, session: AsyncSession, user: User) -> User:
        """Insert a user.

        Raises:
            DuplicateUserError: If the unique email constraint rejects the
                row. The session is rolled back.
        """
        try:
            return await self.create(session, user)
        except IntegrityError as exc:
            await session.rollback()
            self._logger.info(
                "Concurrent duplicate signup rejected by constraint",
                extra={"operation": "db.add"},
            )
            raise DuplicateUserError(user.email) from exc

    async def list_emails(self, session: AsyncSession) -> Sequence[str]:
        """Return the email address of every user."""
        result = await session.execute(select(User.email))
        emails = result.scalars().all()
        self._lazy.debug(lambda: f"db.list_emails: User -> {len(emails)} addresses")
        return emails


_user_repository: UserRepository | None = None


def get_user_repository() -> UserRepository:
    """Get the shared UserRepository instance."""
    global _user_repository
    if _user_repository is None:
        _user_repository = UserRepository(User)
    return _user_repository
