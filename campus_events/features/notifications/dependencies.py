"""FastAPI dependencies for triggering notifications from route handlers.

Usage:
    from campus_events.features.notifications.dependencies import NotifierDep

    @router.post("/add-event")
    async def add_event(payload: EventCreate, session: DbSession, notifier: NotifierDep):
        event = await EventService(session).create_event(payload)
        summary = await notifier.event_changed(event, MutationKind.CREATED)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated

from fastapi import BackgroundTasks, Depends

from campus_events.core.settings import get_notification_settings
from campus_events.core.settings.notifications import NotificationSettings
from campus_events.features.notifications.dispatcher import (
    NotificationDispatcher,
    get_notification_dispatcher,
)
from campus_events.features.notifications.schemas import NotificationSummary

if TYPE_CHECKING:
    from campus_events.core.settings.notifications import DispatchMode
    from campus_events.features.events.models import Event
    from campus_events.features.notifications.outcome import MutationKind
    from campus_events.features.registrations.models import Registration


def get_notification_dispatcher_dep() -> NotificationDispatcher:
    """Get the lifespan-managed dispatcher.

    The import of the global is deferred to call time so tests can override
    this dependency with a dispatcher wired to fake transports.
    """
    return get_notification_dispatcher()


class Notifier:
    """Runs a dispatch inline or hands it to ``BackgroundTasks``.

    Inline mode awaits the dispatch and returns its summary. Background mode
    queues the dispatch to run after the response is sent and returns a
    ``scheduled`` summary.
    """

    def __init__(
        self,
        dispatcher: NotificationDispatcher,
        background_tasks: BackgroundTasks,
        mode: DispatchMode = "inline",
    ) -> None:
        self._dispatcher = dispatcher
        self._background_tasks = background_tasks
        self._mode = mode

    async def event_changed(self, event: Event, kind: MutationKind) -> NotificationSummary:
        if self._mode == "background":
            self._background_tasks.add_task(self._dispatcher.dispatch, event, kind)
            return NotificationSummary.scheduled()
        return NotificationSummary.from_outcome(await self._dispatcher.dispatch(event, kind))

    async def registration_created(self, registration: Registration) -> NotificationSummary:
        if self._mode == "background":
            self._background_tasks.add_task(self._dispatcher.notify_registration, registration)
            return NotificationSummary.scheduled()
        return NotificationSummary.from_outcome(
            await self._dispatcher.notify_registration(registration)
        )


def get_notifier(
    background_tasks: BackgroundTasks,
    dispatcher: Annotated[NotificationDispatcher, Depends(get_notification_dispatcher_dep)],
    settings: Annotated[NotificationSettings, Depends(get_notification_settings)],
) -> Notifier:
    """FastAPI dependency returning a request-scoped ``Notifier``."""
    return Notifier(dispatcher, background_tasks, settings.dispatch_mode)


NotifierDep = Annotated[Notifier, Depends(get_notifier)]

__all__ = ["Notifier", "NotifierDep", "get_notification_dispatcher_dep", "get_notifier"]
