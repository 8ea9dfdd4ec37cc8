"""Registrations feature: one registration per (event, email) pair."""

from __future__ import annotations

from .models import Registration
from .repository import RegistrationRepository, get_registration_repository

__all__ = ["Registration", "RegistrationRepository", "get_registration_repository"]
