"""Pydantic schemas for the events feature."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import Field, field_validator

from campus_events.core.schemas import CustomBase
from campus_events.features.notifications.schemas import NotificationSummary


class EventBase(CustomBase):
    """Shared attributes for event payloads."""

    title: str = Field(..., min_length=1, max_length=200, description="Event title")
    date: str | None = Field(default=None, max_length=50, description="Display date, e.g. '2024-05-01'")
    time: str | None = Field(default=None, max_length=50, description="Display time, e.g. '7 PM'")
    location: str | None = Field(default=None, max_length=255)
    instruction: str | None = Field(default=None, description="Extra instructions for attendees")
    image: str | None = Field(
        default=None,
        max_length=500,
        description="Image URL, or a path such as '/uploads/poster.png'",
    )
    link: str | None = Field(default=None, max_length=500, description="External link")


class EventCreate(EventBase):
    """Payload used when creating an event."""


class EventUpdate(CustomBase):
    """Partial update: only the fields present in the body change."""

    title: str | None = Field(default=None, min_length=1, max_length=200)
    date: str | None = Field(default=None, max_length=50)
    time: str | None = Field(default=None, max_length=50)
    location: str | None = Field(default=None, max_length=255)
    instruction: str | None = None
    image: str | None = Field(default=None, max_length=500)
    link: str | None = Field(default=None, max_length=500)

    @field_validator("title")
    @classmethod
    def title_not_null(cls, v: str | None) -> str:
        if v is None:
            raise ValueError("title can not be cleared")
        return v


class EventResponse(EventBase):
    """Representation returned from the API."""

    id: UUID
    created_at: datetime
    updated_at: datetime


class EventMutationResponse(CustomBase):
    """Response of add-event and update-event."""

    message: str
    event: EventResponse
    notification: NotificationSummary


class EventDeleteResponse(CustomBase):
    """Response of delete-event."""

    message: str
    registrations_deleted: int = Field(ge=0)
