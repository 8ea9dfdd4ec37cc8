"""Prometheus registry and service-wide metrics."""

from __future__ import annotations

from prometheus_client import CollectorRegistry, Counter, Gauge, Info

# Custom registry so tests and multiple app instances never collide with the
# process default registry.
REGISTRY = CollectorRegistry()

DEFAULT_LATENCY_BUCKETS = (
    0.005,
    0.01,
    0.025,
    0.05,
    0.1,
    0.25,
    0.5,
    1.0,
    2.5,
    5.0,
    10.0,
    30.0,
)

application_info = Info(
    "application",
    "Application metadata",
    registry=REGISTRY,
)

errors_total = Counter(
    "errors_total",
    "Errors returned to clients by type and endpoint",
    ["error_type", "endpoint", "status_code"],
    registry=REGISTRY,
)

validation_errors_total = Counter(
    "validation_errors_total",
    "Request validation failures by endpoint and field",
    ["endpoint", "field"],
    registry=REGISTRY,
)

unhandled_exceptions_total = Counter(
    "unhandled_exceptions_total",
    "Exceptions that reached the catch-all handler",
    ["exception_type", "endpoint"],
    registry=REGISTRY,
)

websocket_connections_total = Counter(
    "websocket_connections_total",
    "WebSocket connections accepted or rejected",
    ["status"],
    registry=REGISTRY,
)

websocket_connections_active = Gauge(
    "websocket_connections_active",
    "Currently open WebSocket connections on this instance",
    registry=REGISTRY,
)
