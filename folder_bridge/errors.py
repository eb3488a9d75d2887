"""Typed error hierarchy for folder-bridge operations.

Every error carries a stable machine-readable code and the HTTP status the
bridge answers with, so the desktop command surface and the HTTP layer
report the same failure the same way. Messages never include the absolute
location of the shared root.
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Stable error codes surfaced to callers and remote peers."""

    PATH_ESCAPE = "path_escape"
    NOT_FOUND = "not_found"
    NOT_A_DIRECTORY = "not_a_directory"
    IS_A_DIRECTORY = "is_a_directory"
    IO_ERROR = "io_error"
    BIND_FAILURE = "bind_failure"
    ALREADY_SHARING = "already_sharing"
    NOT_SHARING = "not_sharing"
    PAIRING_FAILED = "pairing_failed"
    PAIRING_REQUIRED = "pairing_required"
    PAIRING_RATE_LIMITED = "pairing_rate_limited"
    BRIDGE_ERROR = "bridge_error"


class BridgeError(Exception):
    """Base error for all bridge operations."""

    code: ErrorCode = ErrorCode.BRIDGE_ERROR
    http_status: int = 500

    def __init__(
        self,
        message: str,
        *,
        path: str | None = None,
        operation: str | None = None,
    ):
        self.path = path
        self.operation = operation
        super().__init__(message)

    def __repr__(self) -> str:
        parts = [f"{type(self).__name__}({self.args[0]!r}"]
        if self.path is not None:
            parts.append(f"path={self.path!r}")
        if self.operation:
            parts.append(f"operation={self.operation!r}")
        return ", ".join(parts) + ")"

    def to_dict(self) -> dict:
        """Convert to dict for API responses."""
        return {
            "detail": str(self),
            "error_code": self.code.value,
        }


class PathEscapeError(BridgeError):
    """Resolved path falls outside the shared root."""

    code = ErrorCode.PATH_ESCAPE
    http_status = 400


class EntryNotFoundError(BridgeError):
    """Requested file or directory does not exist."""

    code = ErrorCode.NOT_FOUND
    http_status = 404


class NotADirectoryPathError(BridgeError):
    """A directory operation was requested on a file."""

    code = ErrorCode.NOT_A_DIRECTORY
    http_status = 400


class IsADirectoryPathError(BridgeError):
    """A file operation was requested on a directory."""

    code = ErrorCode.IS_A_DIRECTORY
    http_status = 400


class FileIOError(BridgeError):
    """Underlying filesystem failure (permissions, disk full, device error)."""

    code = ErrorCode.IO_ERROR
    http_status = 500


class BindFailureError(BridgeError):
    """The bridge listener could not bind its address."""

    code = ErrorCode.BIND_FAILURE
    http_status = 503


class AlreadySharingError(BridgeError):
    """A share session is already starting or running."""

    code = ErrorCode.ALREADY_SHARING
    http_status = 409


class NotSharingError(BridgeError):
    """An operation needs an active share session and none exists."""

    code = ErrorCode.NOT_SHARING
    http_status = 409


class PairingError(BridgeError):
    """The supplied PIN was wrong or has expired."""

    code = ErrorCode.PAIRING_FAILED
    http_status = 401


class PairingRequiredError(BridgeError):
    """A protected route was called without a valid pairing token."""

    code = ErrorCode.PAIRING_REQUIRED
    http_status = 401


class PairingRateLimitedError(PairingError):
    """Too many failed pairing attempts from one client."""

    code = ErrorCode.PAIRING_RATE_LIMITED
    http_status = 429

    def __init__(self, message: str, *, retry_after: float):
        self.retry_after = retry_after
        super().__init__(message, operation="pair")
