"""Prometheus metrics for the notification fan-out.

Usage:
    notification_sends_total.labels(channel="email", status="delivered").inc()
"""

from __future__ import annotations

from prometheus_client import Counter, Histogram

from campus_events.infra.metrics.prometheus import DEFAULT_LATENCY_BUCKETS, REGISTRY

notification_dispatched_total = Counter(
    "notification_dispatched_total",
    "Notification dispatches by mutation kind and aggregate status",
    labelnames=["kind", "status"],
    registry=REGISTRY,
)

notification_sends_total = Counter(
    "notification_sends_total",
    "Per-recipient send attempts by channel and result",
    labelnames=["channel", "status"],
    registry=REGISTRY,
)

notification_errors_total = Counter(
    "notification_errors_total",
    "Notification delivery errors by channel and category",
    labelnames=["channel", "error_category"],
    registry=REGISTRY,
)

notification_broadcasts_total = Counter(
    "notification_broadcasts_total",
    "Realtime broadcasts by result",
    labelnames=["status"],
    registry=REGISTRY,
)

notification_dispatch_duration_seconds = Histogram(
    "notification_dispatch_duration_seconds",
    "Wall time of one dispatch, from recipient lookup to last settled send",
    labelnames=["kind"],
    buckets=DEFAULT_LATENCY_BUCKETS,
    registry=REGISTRY,
)
