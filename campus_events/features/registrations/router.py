"""API router for event registrations.

Endpoints:
    POST /register-event       - Register for an event (idempotent per email)
    GET  /registrations?email= - Registrations made with an email address
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Query, Response, status
from pydantic import EmailStr

from campus_events.core.dependencies.database import DbSession
from campus_events.features.notifications.dependencies import NotifierDep
from campus_events.features.registrations.schemas import (
    RegistrationCreate,
    RegistrationResponse,
    RegistrationResult,
)
from campus_events.features.registrations.service import RegistrationService

router = APIRouter(tags=["registrations"])


@router.post(
    "/register-event",
    response_model=RegistrationResult,
    status_code=status.HTTP_201_CREATED,
    summary="Register for an event",
    description=(
        "Create a registration and send a confirmation email. Registering the same "
        "email twice returns 200 with ``already_registered`` set."
    ),
    responses={
        200: {"description": "Already registered", "model": RegistrationResult},
        404: {"description": "Event not found"},
    },
)
async def register_event(
    payload: RegistrationCreate,
    response: Response,
    session: DbSession,
    notifier: NotifierDep,
) -> RegistrationResult:
    registration, created = await RegistrationService(session).register(payload)

    if not created:
        response.status_code = status.HTTP_200_OK
        return RegistrationResult(message="Already registered", already_registered=True)

    notification = await notifier.registration_created(registration)
    return RegistrationResult(
        message="Registration successful & email sent",
        registration=RegistrationResponse.model_validate(registration),
        notification=notification,
    )


@router.get(
    "/registrations",
    response_model=list[RegistrationResponse],
    summary="List a user's registrations",
)
async def list_registrations(
    email: Annotated[EmailStr, Query(description="Email the registrations were made with")],
    session: DbSession,
) -> list[RegistrationResponse]:
    registrations = await RegistrationService(session).list_for_email(email)
    return [RegistrationResponse.model_validate(r) for r in registrations]
