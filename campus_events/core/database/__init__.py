"""Database base classes, repository and repository exceptions."""

from __future__ import annotations

from .base import Base, TimestampMixin, UUIDPKMixin
from .exceptions import (
    DuplicateRegistrationError,
    DuplicateUserError,
    NotFoundError,
    RepositoryError,
)
from .repository import BaseRepository

__all__ = [
    "Base",
    "BaseRepository",
    "DuplicateRegistrationError",
    "DuplicateUserError",
    "NotFoundError",
    "RepositoryError",
    "TimestampMixin",
    "UUIDPKMixin",
]
