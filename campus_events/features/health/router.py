"""Health check endpoint.

Endpoints:
    GET /health - Dependency status (200 unless the database is down)
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Response, status
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from campus_events.core.dependencies.database import DbSession
from campus_events.core.dependencies.realtime import OptionalConnectionManager
from campus_events.core.settings import get_app_settings
from campus_events.features.health.schemas import HealthResponse, HealthStatus

logger = logging.getLogger(__name__)
router = APIRouter(tags=["health"])


async def _check_database(session: AsyncSession) -> bool:
    try:
        await session.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.warning("Database health check failed", extra={"error": str(e)})
        return False
    return True


async def _check_email() -> bool:
    from campus_events.infra.email import get_email_client

    try:
        client = get_email_client()
    except RuntimeError:
        return False
    return await client.health_check()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    responses={503: {"description": "Database unavailable", "model": HealthResponse}},
)
async def health(
    response: Response,
    session: DbSession,
    manager: OptionalConnectionManager,
) -> HealthResponse:
    settings = get_app_settings()
    checks = {
        "database": await _check_database(session),
        "email": await _check_email(),
        "websocket": manager is not None,
    }

    if not checks["database"]:
        overall = HealthStatus.UNHEALTHY
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    elif all(checks.values()):
        overall = HealthStatus.HEALTHY
    else:
        overall = HealthStatus.DEGRADED

    return HealthResponse(
        status=overall,
        service=settings.service_name,
        version=settings.version,
        checks=checks,
    )
