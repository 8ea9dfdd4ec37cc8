"""Test doubles and data helpers shared across the suite."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

from campus_events.features.events.models import Event
from campus_events.features.registrations.models import Registration
from campus_events.features.users.models import User
from campus_events.infra.email.schemas import EmailMessage, EmailResult

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker


class FakeEmailClient:
    """Records every message and fails on demand.

    Args:
        fail_for: Addresses the transport reports as failed.
        raise_for: Addresses whose send raises ``ConnectionError``.
        delay_for: Address to seconds the send hangs before returning.
    """

    backend_name = "fake"

    def __init__(
        self,
        fail_for: Iterable[str] = (),
        raise_for: Iterable[str] = (),
        delay_for: dict[str, float] | None = None,
    ) -> None:
        self.sent: list[EmailMessage] = []
        self.fail_for = set(fail_for)
        self.raise_for = set(raise_for)
        self.delay_for = delay_for or {}

    @property
    def recipients(self) -> list[str]:
        """Every address of every recorded message, in send order."""
        return [str(address) for message in self.sent for address in message.to]

    async def send(self, message: EmailMessage) -> EmailResult:
        self.sent.append(message)
        to = [str(address) for address in message.to]

        for address in to:
            if address in self.delay_for:
                await asyncio.sleep(self.delay_for[address])
            if address in self.raise_for:
                raise ConnectionError("connection reset by peer")

        failed = [address for address in to if address in self.fail_for]
        if failed:
            return EmailResult.failure_result(
                error=f"550 mailbox unavailable: {failed[0]}",
                error_code="SMTP_ERROR",
                backend=self.backend_name,
            )
        return EmailResult.success_result(
            message_id=f"<{len(self.sent)}@campus.test>",
            recipients=to,
            backend=self.backend_name,
        )

    async def health_check(self) -> bool:
        return True


class FakeConnectionManager:
    """Records broadcasts instead of writing to sockets."""

    uses_redis = False

    def __init__(self, *, fail: bool = False) -> None:
        self.broadcasts: list[tuple[str, dict[str, Any]]] = []
        self.fail = fail
        self.connection_count = 0

    async def broadcast(self, channel: str, message: dict[str, Any]) -> int:
        if self.fail:
            raise ConnectionError("redis publish failed")
        self.broadcasts.append((channel, message))
        return 1


async def add_users(
    session_factory: async_sessionmaker[AsyncSession],
    *emails: str,
) -> list[User]:
    """Insert users with the given addresses and a throwaway password hash."""
    async with session_factory() as session:
        users = [
            User(name=email.split("@")[0], email=email, password_hash="not-a-real-hash")
            for email in emails
        ]
        session.add_all(users)
        await session.commit()
        return users


async def add_event(
    session_factory: async_sessionmaker[AsyncSession],
    title: str = "Hack Night",
    **fields: Any,
) -> Event:
    async with session_factory() as session:
        event = Event(title=title, **fields)
        session.add(event)
        await session.commit()
        return event


async def add_registrations(
    session_factory: async_sessionmaker[AsyncSession],
    event: Event,
    *emails: str,
) -> list[Registration]:
    async with session_factory() as session:
        registrations = [
            Registration(
                event_id=event.id,
                event_title=event.title,
                user_email=email,
                user_name=email.split("@")[0],
            )
            for email in emails
        ]
        session.add_all(registrations)
        await session.commit()
        return registrations
