"""Observability infrastructure for folder-bridge.

Provides structured logging, Prometheus metrics, and request-ID
correlation middleware for the bridge app.

Quick start::

    from folder_bridge.observability import configure_logging, get_logger
    from folder_bridge.observability.middleware import (
        MetricsMiddleware,
        RequestIdMiddleware,
        RequestLoggingMiddleware,
    )

    configure_logging()
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIdMiddleware)
"""

from .logging import configure_logging, get_logger, share_context
from .metrics import metrics_text

__all__ = [
    "configure_logging",
    "get_logger",
    "metrics_text",
    "share_context",
]
