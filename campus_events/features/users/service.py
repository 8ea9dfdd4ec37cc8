"""Service layer for user accounts."""

from __future__ import annotations

from typing import TYPE_CHECKING

from campus_events.core.database import DuplicateUserError
from campus_events.core.exceptions import ConflictException, UnauthorizedException
from campus_events.core.services import BaseService
from campus_events.features.users.models import User
from campus_events.features.users.repository import UserRepository, get_user_repository
from campus_events.features.users.security import hash_password, verify_password

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from campus_events.features.users.schemas import UserCreate, UserCredentials


class UserService(BaseService):
    """Signup and signin.

    Users are never mutated after signup; they are read for signin and as
    the recipient list of "new event" notifications.
    """

    def __init__(self, session: AsyncSession, repo: UserRepository | None = None) -> None:
        super().__init__()
        self._session = session
        self._repo = repo or get_user_repository()

    async def signup(self, payload: UserCreate) -> User:
        """Create a user with a bcrypt password hash.

        Raises:
            ConflictException: If the email is already taken.
            StoreError: If the commit fails.
        """
        if await self._repo.get_by_email(self._session, payload.email) is not None:
            raise _user_exists(payload.email)

        try:
            user = await self._repo.add(
                self._session,
                User(
                    name=payload.name,
                    email=payload.email,
                    password_hash=hash_password(payload.password),
                ),
            )
        except DuplicateUserError as exc:
            raise _user_exists(payload.email) from exc
        await self._commit(self._session, "signup")

        self.logger.info("User signed up", extra={"user_id": str(user.id)})
        return user

    async def signin(self, credentials: UserCredentials) -> User:
        """Return the user whose email and password match.

        Raises:
            UnauthorizedException: If the email is unknown or the password is wrong.
        """
        user = await self._repo.get_by_email(self._session, credentials.email)
        if user is None or not verify_password(credentials.password, user.password_hash):
            self.logger.info("Signin rejected", extra={"reason": "invalid_credentials"})
            raise UnauthorizedException(detail="Invalid credentials", type="invalid-credentials")

        self._lazy.debug(lambda: f"service.signin({user.id}) -> ok")
        return user


def _user_exists(email: str) -> ConflictException:
    return ConflictException(detail="User already exists", type="user-exists", extra={"email": email})
