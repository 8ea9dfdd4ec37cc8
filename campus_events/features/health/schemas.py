"""Pydantic schemas for the health endpoint."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field


class HealthStatus(StrEnum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


class HealthResponse(BaseModel):
    """Overall status plus one boolean per dependency.

    The database is critical; email and websocket problems only degrade
    the service since notifications are best-effort.
    """

    status: HealthStatus
    service: str
    version: str
    checks: dict[str, bool] = Field(default_factory=dict)
