"""Shared request/response schemas."""

from __future__ import annotations

from .base import CustomBase, MessageResponse
from .error import ProblemDetail, ValidationError, ValidationProblemDetail

__all__ = [
    "CustomBase",
    "MessageResponse",
    "ProblemDetail",
    "ValidationError",
    "ValidationProblemDetail",
]
