"""Prometheus metrics endpoint.

Endpoints:
    GET /metrics - Prometheus scrape endpoint

Metrics Exposed:
    Notification Metrics:
        - notification_dispatched_total - Dispatches by mutation kind and status
        - notification_sends_total - Per-recipient sends by channel and result
        - notification_errors_total - Delivery errors by channel and category
        - notification_broadcasts_total - Realtime broadcasts by result
        - notification_dispatch_duration_seconds - Dispatch wall time

    WebSocket Metrics:
        - websocket_connections_total / websocket_connections_active

    Errors:
        - errors_total, validation_errors_total, unhandled_exceptions_total

    Application Info:
        - app_info - Service version, name, and environment labels
"""

from __future__ import annotations

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from campus_events.infra.metrics.prometheus import REGISTRY

router = APIRouter(tags=["observability"])


@router.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    """Expose Prometheus metrics in text exposition format."""
    return Response(content=generate_latest(REGISTRY), media_type=CONTENT_TYPE_LATEST)
