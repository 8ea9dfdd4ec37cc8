"""Tests for RegistrationService."""

from __future__ import annotations

from uuid import uuid4

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from campus_events.core.database import NotFoundError
from campus_events.features.registrations.models import Registration
from campus_events.features.registrations.repository import RegistrationRepository
from campus_events.features.registrations.schemas import RegistrationCreate
from campus_events.features.registrations.service import RegistrationService
from tests.utils import add_event, add_registrations


class LateRepository(RegistrationRepository):
    """Misses the first existence check, as a concurrent request would."""

    def __init__(self) -> None:
        super().__init__(Registration)
        self._misses = 1

    async def find(self, session, event_id, user_email):
        if self._misses:
            self._misses -= 1
            return None
        return await super().find(session, event_id, user_email)


async def _count(session: AsyncSession) -> int:
    return await session.scalar(select(func.count()).select_from(Registration))


@pytest.mark.asyncio
async def test_register_creates_once(
    session_factory: async_sessionmaker[AsyncSession], db_session: AsyncSession
) -> None:
    event = await add_event(session_factory, "Hack Night")
    service = RegistrationService(db_session)
    payload = RegistrationCreate(event_id=event.id, user_email="Ada@X.com", user_name="Ada")

    registration, created = await service.register(payload)
    again, created_again = await service.register(payload)

    assert created is True
    assert registration.user_email == "ada@x.com"
    assert registration.event_title == "Hack Night"
    assert created_again is False
    assert again.id == registration.id
    assert await _count(db_session) == 1


@pytest.mark.asyncio
async def test_register_unknown_event_raises(db_session: AsyncSession) -> None:
    payload = RegistrationCreate(event_id=uuid4(), user_email="a@x.com", user_name="Ada")

    with pytest.raises(NotFoundError):
        await RegistrationService(db_session).register(payload)


@pytest.mark.asyncio
async def test_concurrent_duplicate_is_caught_by_constraint(
    session_factory: async_sessionmaker[AsyncSession], db_session: AsyncSession
) -> None:
    event = await add_event(session_factory)
    [existing] = await add_registrations(session_factory, event, "a@x.com")
    service = RegistrationService(db_session, repo=LateRepository())

    registration, created = await service.register(
        RegistrationCreate(event_id=event.id, user_email="a@x.com", user_name="Ada")
    )

    assert created is False
    assert registration.id == existing.id
    assert await _count(db_session) == 1


@pytest.mark.asyncio
async def test_list_for_email_is_case_insensitive(
    session_factory: async_sessionmaker[AsyncSession], db_session: AsyncSession
) -> None:
    first = await add_event(session_factory, "Hack Night")
    second = await add_event(session_factory, "Career Fair")
    await add_registrations(session_factory, first, "a@x.com")
    await add_registrations(session_factory, second, "a@x.com", "b@x.com")

    registrations = await RegistrationService(db_session).list_for_email("A@x.com")

    assert {r.event_title for r in registrations} == {"Hack Night", "Career Fair"}
