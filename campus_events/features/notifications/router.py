"""API router for manually triggered notifications.

Endpoints:
    POST /send-notification/{event_id} - Re-send the "new event" fan-out for an event
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter

from campus_events.core.dependencies.database import DbSession
from campus_events.features.events.service import EventService
from campus_events.features.notifications.dependencies import NotifierDep
from campus_events.features.notifications.outcome import MutationKind
from campus_events.features.notifications.schemas import NotificationResponse

router = APIRouter(tags=["notifications"])


@router.post(
    "/send-notification/{event_id}",
    response_model=NotificationResponse,
    summary="Send event notification",
    description=(
        "Email every user about an existing event and broadcast it to connected "
        "clients, exactly as when the event was created."
    ),
    responses={404: {"description": "Event not found"}},
)
async def send_notification(
    event_id: UUID,
    session: DbSession,
    notifier: NotifierDep,
) -> NotificationResponse:
    event = await EventService(session).get_event(event_id)
    notification = await notifier.event_changed(event, MutationKind.CREATED)
    return NotificationResponse(message="Notification sent", notification=notification)
