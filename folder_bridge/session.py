"""Share session orchestration.

SessionController is the only writer of share-session state. It pairs a
fresh PIN with a new FileBridgeServer per "share a folder" action and
serializes start/stop transitions behind one lock.

Policy: starting a share while one is starting or running is rejected with
AlreadySharingError; the caller must stop first.
"""
from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .app import create_bridge_app
from .config import BridgeConfig
from .errors import AlreadySharingError, EntryNotFoundError, NotADirectoryPathError, NotSharingError
from .observability.logging import get_logger
from .observability.metrics import SHARE_SESSIONS_ACTIVE
from .pairing import PairingGate
from .pin import PinAuthority
from .server import BridgeHandle, BridgeStatus, FileBridgeServer, format_url
from .storage import FileOps

logger = get_logger(__name__)

_ACTIVE = (BridgeStatus.STARTING, BridgeStatus.RUNNING)


@dataclass
class ShareSession:
    """State of the one folder currently being shared."""
    root: Path
    host: str
    port: int
    pin: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    status: BridgeStatus = BridgeStatus.IDLE
    failure_reason: str | None = None

    @property
    def address(self) -> str:
        return format_url(self.host, self.port)

    @property
    def is_active(self) -> bool:
        return self.status in _ACTIVE

    def to_dict(self) -> dict[str, Any]:
        return {
            'root': str(self.root),
            'address': self.address,
            'pin': self.pin,
            'created_at': self.created_at.isoformat(),
            'status': self.status.value,
            'failure_reason': self.failure_reason,
        }


class SessionController:
    """Owns the single ShareSession and its server."""

    def __init__(
        self,
        config: BridgeConfig | None = None,
        pin_authority: PinAuthority | None = None,
    ):
        self.config = config or BridgeConfig()
        self.config.validate()
        self.pins = pin_authority or PinAuthority()
        self._lock = threading.Lock()
        self._session: ShareSession | None = None
        self._server: FileBridgeServer | None = None
        self._gate: PairingGate | None = None
        self._file_ops: FileOps | None = None
        self._pending_pin: str | None = None

    def __enter__(self) -> SessionController:
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop_sharing()

    def _sync(self) -> None:
        """Copy server status into the session. Caller holds the lock."""
        if self._session is None or self._server is None:
            return
        was_active = self._session.is_active
        self._session.status = self._server.status
        self._session.failure_reason = self._server.failure_reason
        self._session.port = self._server.port
        if was_active and not self._session.is_active:
            SHARE_SESSIONS_ACTIVE.dec()

    @property
    def session(self) -> ShareSession | None:
        """Current session with its status refreshed, or None when idle."""
        with self._lock:
            self._sync()
            return self._session

    @property
    def status(self) -> BridgeStatus:
        session = self.session
        return session.status if session is not None else BridgeStatus.IDLE

    @property
    def handle(self) -> BridgeHandle | None:
        with self._lock:
            return self._server.handle if self._server is not None else None

    def generate_pin(self) -> str:
        """Draw a PIN and hold it for the next start_sharing call."""
        with self._lock:
            self._pending_pin = self.pins.generate()
            return self._pending_pin

    def start_sharing(self, folder: Path | str) -> tuple[str, ShareSession]:
        """Start sharing ``folder`` and return (pin, session) without waiting for the bind.

        Raises:
            AlreadySharingError: A session is already starting or running
            EntryNotFoundError: ``folder`` does not exist
            NotADirectoryPathError: ``folder`` is not a directory
        """
        with self._lock:
            self._sync()
            if self._session is not None and self._session.is_active:
                logger.info('share_rejected', reason='already_sharing', status=self._session.status.value)
                raise AlreadySharingError(
                    f'Already sharing {self._session.root.name}; stop sharing first',
                    operation='start_sharing',
                )

            root = Path(folder).expanduser().resolve()
            if not root.exists():
                raise EntryNotFoundError(f'Folder not found: {folder}', path=str(folder), operation='start_sharing')
            if not root.is_dir():
                raise NotADirectoryPathError(f'Not a folder: {folder}', path=str(folder), operation='start_sharing')

            pin = self._pending_pin or self.pins.generate()
            self._pending_pin = None

            gate = None
            if self.config.require_pairing:
                gate = PairingGate(
                    pin,
                    pin_ttl_seconds=self.config.pin_ttl_seconds,
                    max_attempts=self.config.max_pair_attempts,
                    window_seconds=self.config.pair_window_seconds,
                    pin_authority=self.pins,
                )

            server = FileBridgeServer(
                self.config,
                app_factory=lambda r: create_bridge_app(r, self.config, pairing_gate=gate),
            )
            server.start(root)

            self._server = server
            self._gate = gate
            self._file_ops = FileOps(root)
            self._session = ShareSession(
                root=root,
                host=self.config.host,
                port=server.port,
                pin=pin,
                status=BridgeStatus.STARTING,
            )
            SHARE_SESSIONS_ACTIVE.inc()
            logger.info('share_started', root_name=root.name, address=self._session.address, pairing=gate is not None)
            return pin, self._session

    def stop_sharing(self) -> None:
        """Stop the active server, revoke pairings and reset to idle.

        No-op when nothing is being shared.
        """
        with self._lock:
            if self._session is None:
                return
            self._sync()
            was_active = self._session.is_active
            self._server.stop()
            if self._gate is not None:
                self._gate.revoke_all()
            if was_active:
                SHARE_SESSIONS_ACTIVE.dec()
            logger.info('share_stopped', root_name=self._session.root.name)
            self._session = None
            self._server = None
            self._gate = None
            self._file_ops = None

    def wait_until_running(self, timeout: float | None = None) -> bool:
        """Wait for the active bridge to bind.

        Raises:
            NotSharingError: Nothing is being shared
            BindFailureError: The bridge failed to start
        """
        handle = self.handle
        if handle is None:
            raise NotSharingError('No folder is being shared', operation='wait_until_running')
        return handle.wait_until_running(timeout)

    def file_ops(self) -> FileOps:
        """File operations rooted at the shared folder.

        Raises:
            NotSharingError: Nothing is being shared
        """
        with self._lock:
            if self._file_ops is None:
                raise NotSharingError('No folder is being shared', operation='file_ops')
            return self._file_ops

    def pair(self, pin: str | int, client: str = 'local') -> str:
        """Run the pairing handshake in-process and return a bridge token.

        Raises:
            NotSharingError: Nothing is being shared or pairing is disabled
            PairingError: Wrong or expired PIN
        """
        with self._lock:
            gate = self._gate
        if gate is None:
            raise NotSharingError('No pairing-enabled share is active', operation='pair')
        return gate.pair(pin, client=client)
