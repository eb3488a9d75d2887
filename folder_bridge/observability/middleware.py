"""Observability middleware for the bridge app.

Provides:
- ``RequestIdMiddleware`` -- accepts or generates ``X-Request-ID``, binds it
  into the structlog context for the request and echoes it on the response.
- ``MetricsMiddleware`` -- Prometheus counters and histograms per request,
  labelled by route template.
- ``RequestLoggingMiddleware`` -- one structured log entry per request.

All are added via ``app.add_middleware()``.
"""

from __future__ import annotations

import re
import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import Scope

from .logging import get_logger
from .metrics import (
    HTTP_REQUEST_DURATION_SECONDS,
    HTTP_REQUESTS_IN_FLIGHT,
    HTTP_REQUESTS_TOTAL,
)

logger = get_logger(__name__)

# Allowed request-ID format: 8-128 chars of hex, dash, or alphanumeric.
_VALID_REQUEST_ID = re.compile(r"^[a-zA-Z0-9\-]{8,128}$")

UNMATCHED_ROUTE = "{unmatched}"


def route_label(scope: Scope) -> str:
    """Route template the router matched, e.g. ``/api/files/list``.

    Raw URLs never become label values: shared files all fall under the
    static catch-all template, and requests no route accepted share one
    label.
    """
    route = scope.get("route")
    return getattr(route, "path", None) or UNMATCHED_ROUTE


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Generate or accept X-Request-ID and bind it for structured logs.

    Malformed IDs are replaced with a fresh UUID.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint,
    ) -> Response:
        incoming_id = request.headers.get("x-request-id", "")
        if incoming_id and _VALID_REQUEST_ID.match(incoming_id):
            rid = incoming_id
        else:
            rid = str(uuid.uuid4())

        with structlog.contextvars.bound_contextvars(request_id=rid):
            response = await call_next(request)

        response.headers["X-Request-ID"] = rid
        return response


class MetricsMiddleware(BaseHTTPMiddleware):
    """Record Prometheus HTTP metrics for every request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint,
    ) -> Response:
        method = request.method
        status = "500"

        HTTP_REQUESTS_IN_FLIGHT.inc()
        start = time.perf_counter()
        try:
            response = await call_next(request)
            status = str(response.status_code)
        finally:
            # The router records the matched route in the shared scope
            path = route_label(request.scope)
            HTTP_REQUESTS_IN_FLIGHT.dec()
            HTTP_REQUEST_DURATION_SECONDS.labels(
                method=method, path=path,
            ).observe(time.perf_counter() - start)
            HTTP_REQUESTS_TOTAL.labels(
                method=method, path=path, status=status,
            ).inc()

        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every completed request with method, path, status, and duration."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint,
    ) -> Response:
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000

        logger.info(
            "request_completed",
            method=request.method,
            path=request.url.path,
            route=route_label(request.scope),
            status=response.status_code,
            client=request.client.host if request.client else None,
            duration_ms=round(duration_ms, 2),
        )
        return response
