"""Pydantic schemas for user accounts."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import EmailStr, Field, field_validator

from campus_events.core.schemas import CustomBase


class UserCreate(CustomBase):
    """Payload of ``POST /signup``."""

    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class UserCredentials(CustomBase):
    """Payload of ``POST /signin``."""

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)


class UserResponse(CustomBase):
    """A user as returned by the API; the password hash is never included."""

    id: UUID
    name: str
    email: str
    created_at: datetime


class UserAuthResponse(CustomBase):
    message: str
    user: UserResponse
