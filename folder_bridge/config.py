"""Configuration for the folder bridge."""
import os
from dataclasses import dataclass, field

DEFAULT_HOST = '127.0.0.1'
DEFAULT_PORT = 3000


class ConfigValidationError(ValueError):
    """Raised when bridge configuration values are invalid."""


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name, '').strip().lower()
    if not raw:
        return default
    return raw in {'1', 'true', 'yes', 'on'}


def _env_optional_float(name: str) -> float | None:
    raw = os.environ.get(name, '').strip()
    if not raw:
        return None
    return float(raw)


def _default_cors_origins() -> list[str]:
    """Get default CORS origins, supporting env override."""
    env_origins = os.environ.get('FOLDER_BRIDGE_CORS_ORIGINS', '')
    if env_origins:
        return [o.strip() for o in env_origins.split(',') if o.strip()]
    # Remote peers load the bridge from arbitrary local pages
    return ['*']


@dataclass
class BridgeConfig:
    """Central configuration for the bridge server and share sessions.

    Passed to the app factory, the server and the session controller,
    so tests can inject values without touching os.environ.
    """
    host: str = field(default_factory=lambda: os.environ.get('FOLDER_BRIDGE_HOST', DEFAULT_HOST))
    port: int = field(default_factory=lambda: int(os.environ.get('FOLDER_BRIDGE_PORT', str(DEFAULT_PORT))))

    # Pairing handshake: when disabled the bridge serves every request,
    # which is how an unauthenticated static server behaves.
    require_pairing: bool = field(default_factory=lambda: _env_bool('FOLDER_BRIDGE_REQUIRE_PAIRING', True))
    pin_ttl_seconds: float | None = field(default_factory=lambda: _env_optional_float('FOLDER_BRIDGE_PIN_TTL'))
    max_pair_attempts: int = field(default_factory=lambda: int(os.environ.get('FOLDER_BRIDGE_MAX_PAIR_ATTEMPTS', '5')))
    pair_window_seconds: float = field(default_factory=lambda: float(os.environ.get('FOLDER_BRIDGE_PAIR_WINDOW', '60')))

    stop_timeout_seconds: float = field(default_factory=lambda: float(os.environ.get('FOLDER_BRIDGE_STOP_TIMEOUT', '5')))
    cors_origins: list[str] = field(default_factory=_default_cors_origins)

    def validate(self) -> None:
        """Validate configuration values.

        Raises:
            ConfigValidationError: listing every invalid field
        """
        problems = []
        if not self.host or not self.host.strip():
            problems.append('host must not be empty')
        if not 0 <= self.port <= 65535:
            problems.append(f'port must be between 0 and 65535, got {self.port}')
        if self.pin_ttl_seconds is not None and self.pin_ttl_seconds <= 0:
            problems.append(f'pin_ttl_seconds must be positive, got {self.pin_ttl_seconds}')
        if self.max_pair_attempts < 1:
            problems.append(f'max_pair_attempts must be at least 1, got {self.max_pair_attempts}')
        if self.pair_window_seconds <= 0:
            problems.append(f'pair_window_seconds must be positive, got {self.pair_window_seconds}')
        if self.stop_timeout_seconds <= 0:
            problems.append(f'stop_timeout_seconds must be positive, got {self.stop_timeout_seconds}')

        if problems:
            raise ConfigValidationError(
                'Invalid bridge configuration:\n  ' + '\n  '.join(problems)
            )
