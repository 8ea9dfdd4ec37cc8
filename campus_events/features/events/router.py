"""API router for the events feature.

Endpoints:
    POST   /add-event                     - Create an event and notify every user
    PUT    /update-event/{event_id}       - Partially update an event and notify its registrants
    DELETE /delete-event/{event_id}       - Delete an event and its registrations
    GET    /events                        - List events
    GET    /events/{event_id}             - Get one event
    GET    /events/{event_id}/registrations - Registrations of an event

Mutations commit first and notify afterwards. The ``notification`` field of a
mutation response is advisory: a failed fan-out never changes the status code.
"""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import APIRouter, status

from campus_events.core.dependencies.database import DbSession
from campus_events.features.events.schemas import (
    EventCreate,
    EventDeleteResponse,
    EventMutationResponse,
    EventResponse,
    EventUpdate,
)
from campus_events.features.events.service import EventService
from campus_events.features.notifications.dependencies import NotifierDep
from campus_events.features.notifications.outcome import MutationKind
from campus_events.features.registrations.schemas import RegistrationResponse

router = APIRouter(tags=["events"])
logger = logging.getLogger(__name__)


@router.post(
    "/add-event",
    response_model=EventMutationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an event",
    description="Persist a new event, email every user and broadcast it to connected clients.",
)
async def add_event(
    payload: EventCreate,
    session: DbSession,
    notifier: NotifierDep,
) -> EventMutationResponse:
    event = await EventService(session).create_event(payload)
    notification = await notifier.event_changed(event, MutationKind.CREATED)

    return EventMutationResponse(
        message="Event added & email sent",
        event=EventResponse.model_validate(event),
        notification=notification,
    )


@router.put(
    "/update-event/{event_id}",
    response_model=EventMutationResponse,
    summary="Update an event",
    description="Change the supplied fields and email everyone registered for the event.",
    responses={404: {"description": "Event not found"}},
)
async def update_event(
    event_id: UUID,
    payload: EventUpdate,
    session: DbSession,
    notifier: NotifierDep,
) -> EventMutationResponse:
    event = await EventService(session).update_event(event_id, payload)
    notification = await notifier.event_changed(event, MutationKind.UPDATED)

    return EventMutationResponse(
        message="Event updated & emails sent",
        event=EventResponse.model_validate(event),
        notification=notification,
    )


@router.delete(
    "/delete-event/{event_id}",
    response_model=EventDeleteResponse,
    summary="Delete an event",
    description="Delete an event and every registration for it. Nobody is notified.",
    responses={404: {"description": "Event not found"}},
)
async def delete_event(event_id: UUID, session: DbSession) -> EventDeleteResponse:
    removed = await EventService(session).delete_event(event_id)
    return EventDeleteResponse(message="Event deleted", registrations_deleted=removed)


@router.get(
    "/events",
    response_model=list[EventResponse],
    summary="List events",
)
async def list_events(session: DbSession) -> list[EventResponse]:
    events = await EventService(session).list_events()
    return [EventResponse.model_validate(event) for event in events]


@router.get(
    "/events/{event_id}",
    response_model=EventResponse,
    summary="Get an event",
    responses={404: {"description": "Event not found"}},
)
async def get_event(event_id: UUID, session: DbSession) -> EventResponse:
    return EventResponse.model_validate(await EventService(session).get_event(event_id))


@router.get(
    "/events/{event_id}/registrations",
    response_model=list[RegistrationResponse],
    summary="List registrations of an event",
    responses={404: {"description": "Event not found"}},
)
async def list_event_registrations(event_id: UUID, session: DbSession) -> list[RegistrationResponse]:
    registrations = await EventService(session).list_registrations(event_id)
    return [RegistrationResponse.model_validate(r) for r in registrations]
