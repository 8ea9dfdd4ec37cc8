"""Helpers that record error metrics from the exception handlers."""

from __future__ import annotations

import logging
from typing import Any

from campus_events.infra.metrics import prometheus

logger = logging.getLogger(__name__)


def track_error(
    error_type: str,
    endpoint: str,
    status_code: int,
    extra: dict[str, Any] | None = None,
) -> None:
    """Track an error returned to a client.

    Args:
        error_type: Problem type identifier (e.g. ``event-not-found``).
        endpoint: Request path.
        status_code: HTTP status code.
        extra: Additional context for the debug log.
    """
    prometheus.errors_total.labels(
        error_type=error_type,
        endpoint=endpoint,
        status_code=str(status_code),
    ).inc()
    logger.debug(
        "Tracked error: %s",
        error_type,
        extra={"endpoint": endpoint, "status_code": status_code, **(extra or {})},
    )


def track_validation_error(endpoint: str, field: str) -> None:
    """Track a validation failure for a single field."""
    prometheus.validation_errors_total.labels(endpoint=endpoint, field=field).inc()


def track_unhandled_exception(exception_type: str, endpoint: str) -> None:
    """Track an exception that reached the catch-all handler."""
    prometheus.unhandled_exceptions_total.labels(
        exception_type=exception_type,
        endpoint=endpoint,
    ).inc()
