"""Pydantic schemas for event registrations."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import EmailStr, Field

from campus_events.core.schemas import CustomBase
from campus_events.features.notifications.schemas import NotificationSummary


class RegistrationCreate(CustomBase):
    """Payload of ``POST /register-event``.

    The event title is snapshotted from the stored event, so a client-sent
    ``eventTitle`` is ignored.
    """

    event_id: UUID
    user_email: EmailStr
    user_name: str = Field(..., min_length=1, max_length=100)


class RegistrationResponse(CustomBase):
    id: UUID
    event_id: UUID
    event_title: str
    user_email: str
    user_name: str
    created_at: datetime


class RegistrationResult(CustomBase):
    """Response of ``POST /register-event``.

    ``already_registered`` is true when the (event, email) pair existed; no
    row is written and no email is sent in that case.
    """

    message: str
    already_registered: bool = False
    registration: RegistrationResponse | None = None
    notification: NotificationSummary | None = None
