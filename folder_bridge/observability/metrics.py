"""Prometheus metrics for folder-bridge.

Usage::

    from folder_bridge.observability.metrics import FILE_OPERATIONS_TOTAL

    FILE_OPERATIONS_TOTAL.labels(operation="read", outcome="ok").inc()
"""

from __future__ import annotations

from prometheus_client import (
    REGISTRY,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
    CONTENT_TYPE_LATEST,
)

# ---------------------------------------------------------------------------
# HTTP request metrics (bridge app)
# ---------------------------------------------------------------------------

HTTP_REQUESTS_TOTAL = Counter(
    "bridge_http_requests_total",
    "Total HTTP requests by method, path pattern, and status code.",
    labelnames=["method", "path", "status"],
    registry=REGISTRY,
)

HTTP_REQUEST_DURATION_SECONDS = Histogram(
    "bridge_http_request_duration_seconds",
    "HTTP request latency in seconds.",
    labelnames=["method", "path"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
    registry=REGISTRY,
)

HTTP_REQUESTS_IN_FLIGHT = Gauge(
    "bridge_http_requests_in_flight",
    "Number of HTTP requests currently being processed.",
    registry=REGISTRY,
)

# ---------------------------------------------------------------------------
# Bridge metrics
# ---------------------------------------------------------------------------

FILE_OPERATIONS_TOTAL = Counter(
    "bridge_file_operations_total",
    "File operations by operation name and outcome (ok or error code).",
    labelnames=["operation", "outcome"],
    registry=REGISTRY,
)

PAIRING_ATTEMPTS_TOTAL = Counter(
    "bridge_pairing_attempts_total",
    "Pairing attempts by result.",
    labelnames=["result"],
    registry=REGISTRY,
)

SHARE_SESSIONS_ACTIVE = Gauge(
    "bridge_share_sessions_active",
    "Number of share sessions currently starting or running.",
    registry=REGISTRY,
)


def metrics_text() -> tuple[bytes, str]:
    """Generate Prometheus exposition text and content-type header."""
    return generate_latest(REGISTRY), CONTENT_TYPE_LATEST
