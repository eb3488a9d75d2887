"""Background HTTP listener for one shared folder.

``FileBridgeServer.start`` returns as soon as the worker thread is spawned;
the bind happens on that thread. Callers that need the listener up wait on
the returned ``BridgeHandle``.

State machine::

    idle -> starting -> running -> stopped
               |
               +-> failed (bind error)
"""
from __future__ import annotations

import socket
import sys
import threading
from enum import Enum
from pathlib import Path
from typing import Callable

import uvicorn

from .app import create_bridge_app
from .config import BridgeConfig
from .errors import BindFailureError
from .observability.logging import get_logger, share_context

logger = get_logger(__name__)


class BridgeStatus(str, Enum):
    """Lifecycle states shared by the bridge server and its share session."""
    IDLE = 'idle'
    STARTING = 'starting'
    RUNNING = 'running'
    STOPPED = 'stopped'
    FAILED = 'failed'


class _NotifyingServer(uvicorn.Server):
    """uvicorn server that reports once its listeners accept connections."""

    def __init__(self, config: uvicorn.Config, on_started: Callable[[], None]):
        super().__init__(config)
        self._on_started = on_started

    async def startup(self, sockets: list[socket.socket] | None = None) -> None:
        await super().startup(sockets=sockets)
        if not self.should_exit:
            self._on_started()


def format_url(host: str, port: int) -> str:
    if ':' in host:
        return f'http://[{host}]:{port}'
    return f'http://{host}:{port}'


class BridgeHandle:
    """Handle on a started bridge: bound address, readiness, stop."""

    def __init__(self, server: FileBridgeServer, thread: threading.Thread):
        self._server = server
        self.thread = thread

    @property
    def root(self) -> Path:
        return self._server.root

    @property
    def host(self) -> str:
        return self._server.config.host

    @property
    def port(self) -> int:
        return self._server.port

    @property
    def url(self) -> str:
        return format_url(self.host, self.port)

    @property
    def status(self) -> BridgeStatus:
        return self._server.status

    def wait_until_running(self, timeout: float | None = None) -> bool:
        """Block until the listener is bound or the start settles otherwise.

        Returns:
            True when running, False on timeout or if stopped before binding

        Raises:
            BindFailureError: If the server failed to start
        """
        if not self._server.wait_settled(timeout):
            return False
        status = self._server.status
        if status is BridgeStatus.FAILED:
            raise BindFailureError(self._server.failure_reason or 'Bridge failed to start', operation='start')
        return status is BridgeStatus.RUNNING

    def stop(self) -> None:
        self._server.stop()


class FileBridgeServer:
    """Owns one uvicorn listener running on a dedicated daemon thread.

    Instances are single use: a new share session builds a new server.
    """

    def __init__(
        self,
        config: BridgeConfig | None = None,
        app_factory: Callable[[Path], object] | None = None,
    ):
        """Initialize the server.

        Args:
            config: Host, port and stop timeout. Defaults to env-derived values.
            app_factory: Builds the ASGI app for a root folder. Defaults to
                an open (unpaired) bridge app.
        """
        self.config = config or BridgeConfig()
        self._app_factory = app_factory or (lambda root: create_bridge_app(root, self.config))
        self._lock = threading.Lock()
        self._settled = threading.Event()
        self._status = BridgeStatus.IDLE
        self._failure_reason: str | None = None
        self._root: Path | None = None
        self._bound_port: int | None = None
        self._uvicorn: _NotifyingServer | None = None
        self._thread: threading.Thread | None = None
        self._handle: BridgeHandle | None = None

    @property
    def status(self) -> BridgeStatus:
        with self._lock:
            return self._status

    @property
    def failure_reason(self) -> str | None:
        with self._lock:
            return self._failure_reason

    @property
    def root(self) -> Path | None:
        return self._root

    @property
    def port(self) -> int:
        """Bound port once known, otherwise the configured port."""
        if self._bound_port is not None:
            return self._bound_port
        return self.config.port

    @property
    def handle(self) -> BridgeHandle | None:
        return self._handle

    def wait_settled(self, timeout: float | None = None) -> bool:
        return self._settled.wait(timeout)

    def start(self, root: Path | str) -> BridgeHandle:
        """Spawn the listener thread for ``root`` and return immediately.

        Raises:
            RuntimeError: If this instance was already started
        """
        root = Path(root).resolve()
        with self._lock:
            if self._status is not BridgeStatus.IDLE:
                raise RuntimeError(f'Bridge server already {self._status.value}; create a new instance')

            app = self._app_factory(root)
            uv_config = uvicorn.Config(
                app,
                host=self.config.host,
                port=self.config.port,
                log_config=None,
                access_log=False,
            )
            self._uvicorn = _NotifyingServer(uv_config, on_started=self._mark_running)
            self._root = root
            self._status = BridgeStatus.STARTING
            self._thread = threading.Thread(
                target=self._serve,
                name=f'folder-bridge:{root.name}',
                daemon=True,
            )
            self._handle = BridgeHandle(self, self._thread)
            self._thread.start()

        logger.info(
            'bridge_starting',
            root_name=root.name,
            host=self.config.host,
            port=self.config.port,
        )
        return self._handle

    def stop(self) -> None:
        """Tear the listener down without draining in-flight requests.

        No-op unless the server is starting or running.
        """
        with self._lock:
            if self._status not in (BridgeStatus.STARTING, BridgeStatus.RUNNING):
                return
            server = self._uvicorn
            thread = self._thread
            server.should_exit = True
            server.force_exit = True

        thread.join(self.config.stop_timeout_seconds)
        if thread.is_alive():
            logger.warning('bridge_stop_timeout', timeout=self.config.stop_timeout_seconds)

        with self._lock:
            if self._status is not BridgeStatus.FAILED:
                self._status = BridgeStatus.STOPPED
        self._settled.set()
        logger.info('bridge_stopped', root_name=self._root.name if self._root else None)

    def _bind(self) -> socket.socket:
        host, port = self.config.host, self.config.port
        family = socket.AF_INET6 if ':' in host else socket.AF_INET
        sock = socket.socket(family, socket.SOCK_STREAM)
        try:
            if sys.platform != 'win32':
                sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind((host, port))
        except OSError:
            sock.close()
            raise
        sock.set_inheritable(True)
        return sock

    def _serve(self) -> None:
        with share_context(self._root.name):
            self._serve_in_context()

    def _serve_in_context(self) -> None:
        try:
            sock = self._bind()
        except OSError as e:
            self._fail(f'Could not bind {self.config.host}:{self.config.port}: {e.strerror or e}')
            return

        self._bound_port = sock.getsockname()[1]
        try:
            self._uvicorn.run(sockets=[sock])
        except (Exception, SystemExit) as e:
            # uvicorn exits via sys.exit on fatal startup errors
            logger.exception('bridge_crashed')
            self._fail(f'Bridge server crashed: {e!r}')
            return
        finally:
            sock.close()

        with self._lock:
            if self._status in (BridgeStatus.STARTING, BridgeStatus.RUNNING):
                self._status = BridgeStatus.STOPPED
        self._settled.set()

    def _mark_running(self) -> None:
        with self._lock:
            if self._status is not BridgeStatus.STARTING:
                return
            self._status = BridgeStatus.RUNNING
        self._settled.set()
        logger.info('bridge_running', url=format_url(self.config.host, self.port))

    def _fail(self, reason: str) -> None:
        with self._lock:
            self._status = BridgeStatus.FAILED
            self._failure_reason = reason
        self._settled.set()
        logger.error('bridge_start_failed', reason=reason)
