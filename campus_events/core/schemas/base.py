"""Base schema classes for request and response payloads."""

from __future__ import annotations

from pydantic import AliasGenerator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CustomBase(BaseModel):
    """Base model with common configuration for all schemas.

    Request bodies are accepted in either camelCase (``eventId``, as sent by
    the browser client) or snake_case; responses are always serialized with
    snake_case field names.

    Example:
        class RegistrationCreate(CustomBase):
            event_id: UUID
            user_email: EmailStr

        RegistrationCreate.model_validate({"eventId": "...", "userEmail": "a@x.com"})
    """

    model_config = ConfigDict(
        alias_generator=AliasGenerator(validation_alias=to_camel),
        populate_by_name=True,
        from_attributes=True,
        extra="ignore",
        str_strip_whitespace=True,
    )


class MessageResponse(CustomBase):
    """Plain ``{"message": ...}`` acknowledgement."""

    message: str = Field(description="Human-readable outcome")
