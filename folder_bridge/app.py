"""Application factory for the folder bridge."""
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse, Response

from .config import BridgeConfig
from .errors import BridgeError, PairingRateLimitedError
from .modules.files import create_file_router
from .modules.pairing import create_pairing_router
from .modules.static import create_static_router
from .observability.logging import get_logger
from .observability.metrics import metrics_text
from .observability.middleware import (
    MetricsMiddleware,
    RequestIdMiddleware,
    RequestLoggingMiddleware,
)
from .pairing import PairingGate
from .storage import FileOps

logger = get_logger(__name__)


def create_bridge_app(
    root: Path | str,
    config: BridgeConfig | None = None,
    pairing_gate: PairingGate | None = None,
) -> FastAPI:
    """Create the FastAPI application serving one shared folder.

    Args:
        root: Folder to expose
        config: Bridge configuration. Defaults to env-derived values.
        pairing_gate: Gate enforcing the PIN handshake. When None every
            route is open, matching a plain static file server.

    Returns:
        Configured FastAPI application. Route order matters: the static
        catch-all is mounted last.
    """
    config = config or BridgeConfig()
    file_ops = FileOps(root)

    app = FastAPI(
        title='Folder Bridge',
        description='Expose one local folder to a paired device',
        version='0.1.0',
    )
    app.state.file_ops = file_ops
    app.state.pairing_gate = pairing_gate

    # Middleware: last added runs first, so request ids exist for logging.
    # Credentials only for explicitly listed origins: under '*' Starlette
    # echoes any Origin back as allowed.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials='*' not in config.cors_origins,
        allow_methods=['*'],
        allow_headers=['*'],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIdMiddleware)

    @app.exception_handler(BridgeError)
    async def bridge_error_handler(request: Request, exc: BridgeError):
        headers = None
        if isinstance(exc, PairingRateLimitedError):
            headers = {'Retry-After': str(max(1, int(exc.retry_after + 0.5)))}
        return JSONResponse(exc.to_dict(), status_code=exc.http_status, headers=headers)

    @app.get('/health')
    async def health():
        """Health check endpoint.

        Open on every bridge; the folder name is only disclosed when the
        share is not PIN-gated (paired peers get it from ``POST /pair``).
        """
        body = {'status': 'ok', 'pairing_required': pairing_gate is not None}
        if pairing_gate is None:
            body['root_name'] = file_ops.root.name
        return body

    @app.get('/metrics')
    async def metrics():
        """Prometheus exposition."""
        body, content_type = metrics_text()
        return Response(content=body, media_type=content_type)

    if pairing_gate is not None:
        app.include_router(create_pairing_router(pairing_gate, file_ops.root.name))

    app.include_router(create_file_router(file_ops), prefix='/api/files')
    app.include_router(create_static_router(file_ops))

    logger.debug('bridge_app_created', root_name=file_ops.root.name, pairing=pairing_gate is not None)
    return app
