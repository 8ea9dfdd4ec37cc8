"""Tests for NotificationDispatcher fan-out rules."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy.exc import OperationalError

from campus_events.features.notifications.channels import EmailChannel, RealtimeChannel
from campus_events.features.notifications.composer import NotificationComposer
from campus_events.features.notifications.dispatcher import (
    NotificationDispatcher,
    get_notification_dispatcher,
    start_notification_dispatcher,
    stop_notification_dispatcher,
)
from campus_events.features.notifications.outcome import MutationKind, NotificationStatus
from campus_events.infra.email.templates import get_template_renderer
from tests.utils import FakeConnectionManager, FakeEmailClient, add_event, add_registrations, add_users

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from campus_events.core.settings.notifications import NotificationSettings


class BrokenResolver:
    async def resolve(self, scope, event_id=None):
        raise OperationalError("SELECT email FROM users", {}, Exception("database is locked"))


@pytest.mark.asyncio
async def test_created_emails_every_user_and_broadcasts(
    session_factory: async_sessionmaker[AsyncSession],
    dispatcher: NotificationDispatcher,
    email_client: FakeEmailClient,
    connection_manager: FakeConnectionManager,
) -> None:
    await add_users(session_factory, "a@x.com", "b@x.com")
    event = await add_event(session_factory, "Hack Night")

    outcome = await dispatcher.dispatch(event, MutationKind.CREATED)

    assert outcome.status is NotificationStatus.DELIVERED
    assert outcome.recipients == ("a@x.com", "b@x.com")
    assert sorted(email_client.recipients) == ["a@x.com", "b@x.com"]
    assert {m.subject for m in email_client.sent} == {"New Event: Hack Night"}
    assert connection_manager.broadcasts == [
        ("global", {"event": "newEvent", "payload": "New event added: Hack Night"})
    ]
    assert outcome.broadcast_issued is True


@pytest.mark.asyncio
async def test_created_with_no_users_still_broadcasts(
    session_factory: async_sessionmaker[AsyncSession],
    dispatcher: NotificationDispatcher,
    email_client: FakeEmailClient,
    connection_manager: FakeConnectionManager,
) -> None:
    event = await add_event(session_factory, "Quiet Night")

    outcome = await dispatcher.dispatch(event, MutationKind.CREATED)

    assert email_client.sent == []
    assert len(connection_manager.broadcasts) == 1
    assert outcome.status is NotificationStatus.DELIVERED


@pytest.mark.asyncio
async def test_updated_emails_only_registrants_without_broadcast(
    session_factory: async_sessionmaker[AsyncSession],
    dispatcher: NotificationDispatcher,
    email_client: FakeEmailClient,
    connection_manager: FakeConnectionManager,
) -> None:
    await add_users(session_factory, "a@x.com", "b@x.com", "c@x.com")
    event = await add_event(session_factory, "Hack Night")
    await add_registrations(session_factory, event, "a@x.com", "c@x.com")

    outcome = await dispatcher.dispatch(event, MutationKind.UPDATED)

    assert sorted(email_client.recipients) == ["a@x.com", "c@x.com"]
    assert {m.subject for m in email_client.sent} == {"Event Updated: Hack Night"}
    assert connection_manager.broadcasts == []
    assert outcome.status is NotificationStatus.DELIVERED


@pytest.mark.asyncio
async def test_updated_without_registrants_is_skipped(
    session_factory: async_sessionmaker[AsyncSession],
    dispatcher: NotificationDispatcher,
    email_client: FakeEmailClient,
) -> None:
    await add_users(session_factory, "a@x.com")
    event = await add_event(session_factory)

    outcome = await dispatcher.dispatch(event, MutationKind.UPDATED)

    assert email_client.sent == []
    assert outcome.status is NotificationStatus.SKIPPED


@pytest.mark.asyncio
async def test_deleted_sends_nothing(
    session_factory: async_sessionmaker[AsyncSession],
    dispatcher: NotificationDispatcher,
    email_client: FakeEmailClient,
    connection_manager: FakeConnectionManager,
) -> None:
    await add_users(session_factory, "a@x.com")
    event = await add_event(session_factory)
    await add_registrations(session_factory, event, "a@x.com")

    outcome = await dispatcher.dispatch(event, MutationKind.DELETED)

    assert outcome.status is NotificationStatus.SKIPPED
    assert email_client.sent == []
    assert connection_manager.broadcasts == []


@pytest.mark.asyncio
async def test_partial_failure_is_reported_not_raised(
    session_factory: async_sessionmaker[AsyncSession],
    notification_settings: NotificationSettings,
) -> None:
    from campus_events.features.notifications.recipients import RecipientResolver

    await add_users(session_factory, "a@x.com", "b@x.com", "c@x.com", "d@x.com", "e@x.com")
    event = await add_event(session_factory)
    client = FakeEmailClient(fail_for={"b@x.com", "e@x.com"})
    dispatcher = NotificationDispatcher(
        RecipientResolver(session_factory),
        NotificationComposer(get_template_renderer(), notification_settings),
        EmailChannel(client),
    )

    outcome = await dispatcher.dispatch(event, MutationKind.CREATED)

    assert (outcome.attempted, outcome.succeeded, outcome.failed) == (5, 3, 2)
    assert outcome.status is NotificationStatus.PARTIAL
    assert set(outcome.failures) == {"b@x.com", "e@x.com"}


@pytest.mark.asyncio
async def test_resolver_failure_returns_failed_outcome(
    session_factory: async_sessionmaker[AsyncSession],
    notification_settings: NotificationSettings,
) -> None:
    event = await add_event(session_factory)
    client = FakeEmailClient()
    manager = FakeConnectionManager()
    dispatcher = NotificationDispatcher(
        BrokenResolver(),
        NotificationComposer(get_template_renderer(), notification_settings),
        EmailChannel(client),
        RealtimeChannel(manager),
    )

    outcome = await dispatcher.dispatch(event, MutationKind.CREATED)

    assert outcome.status is NotificationStatus.FAILED
    assert outcome.error is not None
    assert client.sent == []
    assert manager.broadcasts == []


@pytest.mark.asyncio
async def test_broadcast_failure_does_not_affect_email(
    session_factory: async_sessionmaker[AsyncSession],
    notification_settings: NotificationSettings,
) -> None:
    from campus_events.features.notifications.recipients import RecipientResolver

    await add_users(session_factory, "a@x.com")
    event = await add_event(session_factory)
    client = FakeEmailClient()
    dispatcher = NotificationDispatcher(
        RecipientResolver(session_factory),
        NotificationComposer(get_template_renderer(), notification_settings),
        EmailChannel(client),
        RealtimeChannel(FakeConnectionManager(fail=True)),
    )

    outcome = await dispatcher.dispatch(event, MutationKind.CREATED)

    assert client.recipients == ["a@x.com"]
    assert outcome.broadcast_issued is False
    assert outcome.status is NotificationStatus.DELIVERED


@pytest.mark.asyncio
async def test_notify_registration_confirms_to_registrant(
    session_factory: async_sessionmaker[AsyncSession],
    dispatcher: NotificationDispatcher,
    email_client: FakeEmailClient,
    connection_manager: FakeConnectionManager,
) -> None:
    event = await add_event(session_factory, "Hack Night")
    [registration] = await add_registrations(session_factory, event, "Ada@X.com")

    outcome = await dispatcher.notify_registration(registration)

    assert outcome.kind is MutationKind.REGISTERED
    assert outcome.status is NotificationStatus.DELIVERED
    assert email_client.recipients == ["ada@x.com"]
    assert email_client.sent[0].subject == "Registration Confirmed: Hack Night"
    assert connection_manager.broadcasts == []


@pytest.mark.asyncio
async def test_disabled_dispatcher_skips_everything(
    session_factory: async_sessionmaker[AsyncSession],
    notification_settings: NotificationSettings,
) -> None:
    from campus_events.features.notifications.recipients import RecipientResolver

    await add_users(session_factory, "a@x.com")
    event = await add_event(session_factory)
    [registration] = await add_registrations(session_factory, event, "a@x.com")
    client = FakeEmailClient()
    dispatcher = NotificationDispatcher(
        RecipientResolver(session_factory),
        NotificationComposer(get_template_renderer(), notification_settings),
        EmailChannel(client),
        enabled=False,
    )

    created = await dispatcher.dispatch(event, MutationKind.CREATED)
    confirmed = await dispatcher.notify_registration(registration)

    assert created.status is NotificationStatus.SKIPPED
    assert confirmed.status is NotificationStatus.SKIPPED
    assert client.sent == []


def test_global_dispatcher_lifecycle(dispatcher: NotificationDispatcher) -> None:
    stop_notification_dispatcher()
    with pytest.raises(RuntimeError, match="not initialized"):
        get_notification_dispatcher()

    start_notification_dispatcher(dispatcher)
    try:
        assert get_notification_dispatcher() is dispatcher
    finally:
        stop_notification_dispatcher()
