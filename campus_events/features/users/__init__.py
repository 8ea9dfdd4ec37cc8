"""User accounts: signup, signin and the address book for notifications."""

from __future__ import annotations

from .models import User
from .repository import UserRepository, get_user_repository

__all__ = ["User", "UserRepository", "get_user_repository"]
