"""Repository-level exceptions.

These stay independent of HTTP; services translate them into
``AppException`` subclasses.
"""
from __future__ import annotations

from typing import Any


class RepositoryError(Exception):
    """Base exception for repository operations."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class NotFoundError(RepositoryError):
    """Entity not found by primary key or unique field.

    Attributes:
        model_name: Name of the model class that wasn't found
        identifier: The key/value that was searched for
    """

    def __init__(self, model_name: str, identifier: dict[str, Any]):
        self.model_name = model_name
        self.identifier = identifier
        id_str = ", ".join(f"{k}={v!r}" for k, v in identifier.items())
        super().__init__(
            f"{model_name} not found with {id_str}",
            details={"model": model_name, **identifier},
        )


class DuplicateRegistrationError(RepositoryError):
    """A registration for this (event, email) pair already exists.

    Raised when the unique constraint rejects a concurrent insert that slipped
    past the existence check.
    """

    def __init__(self, event_id: Any, user_email: str):
        self.event_id = event_id
        self.user_email = user_email
        super().__init__(
            "Registration already exists",
            details={"event_id": str(event_id), "user_email": user_email},
        )


class DuplicateUserError(RepositoryError):
    """A user with this email already exists; raised by the unique constraint."""

    def __init__(self, email: str):
        self.email = email
        super().__init__("User already exists", details={"email": email})


__all__ = [
    "DuplicateRegistrationError",
    "DuplicateUserError",
    "NotFoundError",
    "RepositoryError",
]
