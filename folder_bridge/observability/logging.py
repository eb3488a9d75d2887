"""Structured logging for folder-bridge.

Every entry carries the context bound through ``structlog.contextvars``:
the bridge thread binds ``share`` (the shared folder's name) for its whole
lifetime and the request-id middleware binds ``request_id`` per request, so
lines from concurrent shares and requests can be told apart.

Usage::

    from folder_bridge.observability.logging import configure_logging, get_logger

    configure_logging()  # once, from the CLI or the host application
    logger = get_logger(__name__)
    with share_context("Photos"):
        logger.info("share_started", port=3000)
"""

from __future__ import annotations

import logging
import os
import sys
from contextlib import contextmanager
from typing import IO, Iterator

import structlog

_configured = False


def configure_logging(
    *,
    level: str | None = None,
    json_output: bool | None = None,
    stream: IO[str] | None = None,
) -> None:
    """Route structlog and stdlib logging through one handler.

    Only the first call takes effect. Library code never calls this; the
    CLI does, and embedding applications may.

    Args:
        level: Level name. Defaults to LOG_LEVEL or INFO.
        json_output: JSON lines instead of console output. Defaults to
            LOG_FORMAT == "json".
        stream: Destination, stderr by default so CLI output on stdout
            (address, PIN) stays clean.
    """
    global _configured
    if _configured:
        return
    _configured = True

    level = level or os.environ.get("LOG_LEVEL", "INFO")
    if json_output is None:
        json_output = os.environ.get("LOG_FORMAT", "console") == "json"

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    renderer = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer()
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    ))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # bridge_running/bridge_stopped already cover uvicorn's startup banner
    logging.getLogger("uvicorn.error").setLevel(logging.WARNING)


@contextmanager
def share_context(root_name: str) -> Iterator[None]:
    """Tag every log entry emitted inside the block with ``share=root_name``.

    Bound on the bridge thread before its event loop starts, so request
    handling tasks inherit it.
    """
    with structlog.contextvars.bound_contextvars(share=root_name):
        yield


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger bound to the given name."""
    return structlog.get_logger(name)
