"""Notification dispatcher: fans an event mutation out to its recipients.

The dispatcher runs after the CRUD write has committed. Whatever happens while
resolving recipients or talking to the transports, ``dispatch`` returns a
``NotificationOutcome`` and never raises, so a broken mail server can not turn
a successful write into a failed request.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from campus_events.features.notifications.metrics import (
    notification_dispatch_duration_seconds,
    notification_dispatched_total,
    notification_errors_total,
    notification_sends_total,
)
from campus_events.features.notifications.outcome import (
    MutationKind,
    NotificationOutcome,
    NotificationStatus,
    RecipientScope,
)
from campus_events.features.notifications.recipients import normalize_addresses
from campus_events.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from collections.abc import Iterable
    from uuid import UUID

    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from campus_events.core.settings.notifications import NotificationSettings
    from campus_events.core.settings.websocket import WebSocketSettings
    from campus_events.features.events.models import Event
    from campus_events.features.notifications.channels import EmailChannel, RealtimeChannel
    from campus_events.features.notifications.channels.base import NotificationMessage
    from campus_events.features.notifications.composer import NotificationComposer
    from campus_events.features.notifications.outcome import RecipientResult
    from campus_events.features.notifications.recipients import RecipientResolver
    from campus_events.features.registrations.models import Registration
    from campus_events.infra.email.client import EmailClient
    from campus_events.infra.realtime.manager import ConnectionManager

logger = logging.getLogger(__name__)
lazy_logger = get_lazy_logger(__name__)


def _error_category(cause: str) -> str:
    if cause.startswith("timed out"):
        return "timeout"
    if "rejected" in cause.lower() or "refused" in cause.lower():
        return "rejected"
    return "transport"


class NotificationDispatcher:
    """Resolves recipients, renders the message and delivers it.

    Mutation rules:
        CREATED: every user gets the "new event" email and one realtime
            broadcast announces the title.
        UPDATED: only the event's registrants get the "event updated" email.
        DELETED: nothing is sent.

    Example:
        dispatcher = NotificationDispatcher(resolver, composer, email_channel, realtime_channel)
        outcome = await dispatcher.dispatch(event, MutationKind.CREATED)
        outcome.status  # NotificationStatus.DELIVERED
    """

    def __init__(
        self,
        resolver: RecipientResolver,
        composer: NotificationComposer,
        email_channel: EmailChannel,
        realtime_channel: RealtimeChannel | None = None,
        *,
        enabled: bool = True,
    ) -> None:
        self._resolver = resolver
        self._composer = composer
        self._email = email_channel
        self._realtime = realtime_channel
        self._enabled = enabled

    @property
    def enabled(self) -> bool:
        return self._enabled

    async def dispatch(self, event: Event, kind: MutationKind) -> NotificationOutcome:
        """Notify the users affected by ``kind`` happening to ``event``.

        Never raises; failures are reported in the returned outcome.
        """
        event_id = event.id
        if not self._enabled or kind is MutationKind.DELETED:
            outcome = NotificationOutcome.skipped(kind, event_id)
            self._record(outcome)
            return outcome

        started = time.perf_counter()
        try:
            if kind is MutationKind.CREATED:
                outcome = await self._fan_out(
                    kind,
                    event_id,
                    RecipientScope.ALL_USERS,
                    self._composer.event_created(event),
                    broadcast=True,
                )
            elif kind is MutationKind.UPDATED:
                outcome = await self._fan_out(
                    kind,
                    event_id,
                    RecipientScope.EVENT_REGISTRANTS,
                    self._composer.event_updated(event),
                )
            else:
                raise ValueError(f"Unsupported mutation kind for dispatch: {kind}")
        except Exception as exc:  # noqa: BLE001 - dispatch must never fail the request
            logger.exception(
                "Notification dispatch aborted",
                extra={"kind": str(kind), "event_id": str(event_id)},
            )
            outcome = NotificationOutcome.aborted(kind, event_id, str(exc) or type(exc).__name__)
        finally:
            notification_dispatch_duration_seconds.labels(kind=str(kind)).observe(
                time.perf_counter() - started
            )

        self._record(outcome)
        return outcome

    async def notify_registration(self, registration: Registration) -> NotificationOutcome:
        """Send the registration confirmation email to the new registrant.

        Best-effort, same guarantee as ``dispatch``: never raises.
        """
        kind = MutationKind.REGISTERED
        event_id = registration.event_id
        if not self._enabled:
            outcome = NotificationOutcome.skipped(kind, event_id)
            self._record(outcome)
            return outcome

        started = time.perf_counter()
        try:
            recipients = normalize_addresses([registration.user_email])
            message = self._composer.registration_confirmed(registration)
            results = await self._send_email(message, recipients)
            outcome = NotificationOutcome.from_results(kind, event_id, sorted(recipients), results)
        except Exception as exc:  # noqa: BLE001 - confirmation is best-effort
            logger.exception(
                "Registration confirmation aborted",
                extra={"event_id": str(event_id), "recipient": registration.user_email},
            )
            outcome = NotificationOutcome.aborted(kind, event_id, str(exc) or type(exc).__name__)
        finally:
            notification_dispatch_duration_seconds.labels(kind=str(kind)).observe(
                time.perf_counter() - started
            )

        self._record(outcome)
        return outcome

    async def _fan_out(
        self,
        kind: MutationKind,
        event_id: UUID,
        scope: RecipientScope,
        message: NotificationMessage,
        *,
        broadcast: bool = False,
    ) -> NotificationOutcome:
        recipients = await self._resolver.resolve(scope, event_id)
        results = await self._send_email(message, recipients)

        broadcast_issued = False
        if broadcast and self._realtime is not None:
            broadcast_issued = await self._realtime.announce(message)

        return NotificationOutcome.from_results(
            kind,
            event_id,
            sorted(recipients),
            results,
            broadcast_issued=broadcast_issued,
        )

    async def _send_email(
        self,
        message: NotificationMessage,
        recipients: Iterable[str],
    ) -> list[RecipientResult]:
        ordered = sorted(recipients)
        if not ordered:
            lazy_logger.debug(lambda: f"no email recipients for {message.subject!r}")
            return []

        results = await self._email.deliver(message, ordered)
        for result in results:
            status = "delivered" if result.success else "failed"
            notification_sends_total.labels(channel=result.channel, status=status).inc()
            if result.error is not None:
                notification_errors_total.labels(
                    channel=result.channel,
                    error_category=_error_category(result.error.cause),
                ).inc()
        return results

    @staticmethod
    def _record(outcome: NotificationOutcome) -> None:
        status = outcome.status
        notification_dispatched_total.labels(kind=str(outcome.kind), status=str(status)).inc()

        extra = {
            "kind": str(outcome.kind),
            "event_id": str(outcome.event_id) if outcome.event_id else None,
            "status": str(status),
            "attempted": outcome.attempted,
            "succeeded": outcome.succeeded,
            "failed": outcome.failed,
            "broadcast": outcome.broadcast_issued,
        }
        if status in (NotificationStatus.DELIVERED, NotificationStatus.SKIPPED):
            logger.info("Notification dispatched", extra=extra)
        else:
            extra["failures"] = outcome.failures
            if outcome.error is not None:
                extra["error"] = outcome.error
            logger.warning("Notification dispatch incomplete", extra=extra)


_dispatcher: NotificationDispatcher | None = None


def get_notification_dispatcher() -> NotificationDispatcher:
    """Get the global notification dispatcher.

    Raises:
        RuntimeError: If the dispatcher has not been started.
    """
    if _dispatcher is None:
        raise RuntimeError(
            "Notification dispatcher not initialized. Call start_notification_dispatcher() first."
        )
    return _dispatcher


def start_notification_dispatcher(dispatcher: NotificationDispatcher) -> NotificationDispatcher:
    """Install ``dispatcher`` as the process-wide instance."""
    global _dispatcher
    _dispatcher = dispatcher
    logger.info("Notification dispatcher started", extra={"enabled": dispatcher.enabled})
    return dispatcher


def stop_notification_dispatcher() -> None:
    """Forget the global notification dispatcher."""
    global _dispatcher
    _dispatcher = None


def build_notification_dispatcher(
    session_factory: async_sessionmaker[AsyncSession],
    email_client: EmailClient,
    connection_manager: ConnectionManager | None,
    *,
    notification_settings: NotificationSettings,
    websocket_settings: WebSocketSettings,
) -> NotificationDispatcher:
    """Wire a dispatcher from the lifespan-managed transports and settings."""
    from campus_events.features.notifications.channels import EmailChannel, RealtimeChannel
    from campus_events.features.notifications.composer import NotificationComposer
    from campus_events.features.notifications.recipients import RecipientResolver
    from campus_events.infra.email.templates import get_template_renderer

    realtime_channel = None
    if connection_manager is not None:
        realtime_channel = RealtimeChannel(
            connection_manager,
            channel=websocket_settings.broadcast_channel,
            event_name=notification_settings.realtime_event_name,
        )

    return NotificationDispatcher(
        RecipientResolver(session_factory),
        NotificationComposer(get_template_renderer(), notification_settings),
        EmailChannel(
            email_client,
            policy=notification_settings.email_policy,
            recipient_timeout=notification_settings.recipient_timeout,
            max_concurrency=notification_settings.max_concurrency,
        ),
        realtime_channel,
        enabled=notification_settings.enabled,
    )
