"""Share one local folder with a paired device over HTTP.

Example:
    # Desktop side: share a folder and show the PIN
    from folder_bridge import BridgeCommands
    commands = BridgeCommands()
    pin = commands.generate_pin()
    commands.start_sharing('/home/me/Photos')

    # Lower level: drive the session directly
    from folder_bridge import BridgeConfig, SessionController
    with SessionController(BridgeConfig(port=0)) as controller:
        pin, session = controller.start_sharing('/home/me/Photos')
        controller.wait_until_running(timeout=5)
        print(session.address, pin)

    # Serve a folder without the pairing handshake
    from folder_bridge import create_bridge_app
    app = create_bridge_app('/home/me/Photos')
"""

# Configuration
from .config import BridgeConfig, ConfigValidationError

# Errors
from .errors import (
    AlreadySharingError,
    BindFailureError,
    BridgeError,
    EntryNotFoundError,
    ErrorCode,
    FileIOError,
    IsADirectoryPathError,
    NotADirectoryPathError,
    NotSharingError,
    PairingError,
    PairingRateLimitedError,
    PairingRequiredError,
    PathEscapeError,
)

# Core components
from .path_guard import GuardedPath, PathGuard
from .storage import FileEntry, FileOps
from .pin import PinAuthority
from .pairing import PairingGate
from .server import BridgeHandle, BridgeStatus, FileBridgeServer
from .session import SessionController, ShareSession
from .commands import BridgeCommands

# App factory
from .app import create_bridge_app

__all__ = [
    # Configuration
    'BridgeConfig',
    'ConfigValidationError',
    # Errors
    'AlreadySharingError',
    'BindFailureError',
    'BridgeError',
    'EntryNotFoundError',
    'ErrorCode',
    'FileIOError',
    'IsADirectoryPathError',
    'NotADirectoryPathError',
    'NotSharingError',
    'PairingError',
    'PairingRateLimitedError',
    'PairingRequiredError',
    'PathEscapeError',
    # Core components
    'GuardedPath',
    'PathGuard',
    'FileEntry',
    'FileOps',
    'PinAuthority',
    'PairingGate',
    'BridgeHandle',
    'BridgeStatus',
    'FileBridgeServer',
    'SessionController',
    'ShareSession',
    'BridgeCommands',
    # App factory
    'create_bridge_app',
]
