"""Pairing handshake: trade the session PIN for a bridge token.

A remote peer posts the PIN shown on the desktop once and receives an
opaque token; protected bridge routes then require that token. Failed
attempts are counted per client in a sliding window so the 6-digit space
cannot be walked quickly.
"""
from __future__ import annotations

import secrets
import time
from collections import defaultdict
from threading import Lock

from .errors import PairingError, PairingRateLimitedError
from .observability.logging import get_logger
from .observability.metrics import PAIRING_ATTEMPTS_TOTAL
from .pin import PinAuthority

logger = get_logger(__name__)

TOKEN_HEADER = 'X-Bridge-Token'
TOKEN_COOKIE = 'bridge_token'
TOKEN_QUERY = 'token'


class FailedAttemptWindow:
    """Thread-safe sliding window of failed attempts per client key."""

    def __init__(self, max_attempts: int, window_seconds: float):
        self.max_attempts = max_attempts
        self.window_seconds = window_seconds
        self._windows: dict[str, list[float]] = defaultdict(list)
        self._lock = Lock()

    def _prune(self, key: str, now: float) -> list[float]:
        cutoff = now - self.window_seconds
        timestamps = [t for t in self._windows[key] if t > cutoff]
        self._windows[key] = timestamps
        return timestamps

    def check(self, key: str, now: float | None = None) -> None:
        """Raise PairingRateLimitedError if ``key`` has used up its attempts."""
        now = now if now is not None else time.time()
        with self._lock:
            timestamps = self._prune(key, now)
            if len(timestamps) >= self.max_attempts:
                retry_after = timestamps[0] + self.window_seconds - now
                raise PairingRateLimitedError(
                    f'Too many failed pairing attempts. Retry after {retry_after:.1f}s',
                    retry_after=retry_after,
                )

    def record_failure(self, key: str, now: float | None = None) -> None:
        now = now if now is not None else time.time()
        with self._lock:
            self._prune(key, now).append(now)

    def clear(self, key: str) -> None:
        with self._lock:
            self._windows.pop(key, None)


class PairingGate:
    """Validates the session PIN and tracks the tokens it has issued."""

    def __init__(
        self,
        pin: str,
        *,
        pin_ttl_seconds: float | None = None,
        max_attempts: int = 5,
        window_seconds: float = 60.0,
        pin_authority: PinAuthority | None = None,
        clock=time.time,
    ):
        self._pin = pin
        self._pin_ttl = pin_ttl_seconds
        self._authority = pin_authority or PinAuthority()
        self._clock = clock
        self._issued_at = clock()
        self._failures = FailedAttemptWindow(max_attempts, window_seconds)
        self._tokens: set[str] = set()
        self._lock = Lock()

    @property
    def pin_expired(self) -> bool:
        if self._pin_ttl is None:
            return False
        return self._clock() - self._issued_at > self._pin_ttl

    @property
    def paired_count(self) -> int:
        with self._lock:
            return len(self._tokens)

    def pair(self, candidate: str | int, client: str = 'unknown') -> str:
        """Check ``candidate`` against the session PIN and issue a token.

        Raises:
            PairingRateLimitedError: client exceeded its failed attempts
            PairingError: wrong or expired PIN
        """
        now = self._clock()
        try:
            self._failures.check(client, now)
        except PairingRateLimitedError:
            PAIRING_ATTEMPTS_TOTAL.labels(result='rate_limited').inc()
            logger.warning('pairing_rate_limited', client=client)
            raise

        if self.pin_expired:
            PAIRING_ATTEMPTS_TOTAL.labels(result='expired').inc()
            logger.info('pairing_rejected', client=client, reason='expired')
            raise PairingError('PIN expired; start sharing again for a new PIN', operation='pair')

        if not self._authority.validate(candidate, self._pin):
            self._failures.record_failure(client, now)
            PAIRING_ATTEMPTS_TOTAL.labels(result='rejected').inc()
            logger.info('pairing_rejected', client=client, reason='mismatch')
            raise PairingError('Incorrect PIN', operation='pair')

        self._failures.clear(client)
        token = secrets.token_urlsafe(32)
        with self._lock:
            self._tokens.add(token)
        PAIRING_ATTEMPTS_TOTAL.labels(result='accepted').inc()
        logger.info('pairing_accepted', client=client)
        return token

    def is_authorized(self, token: str | None) -> bool:
        if not token:
            return False
        with self._lock:
            return token in self._tokens

    def revoke(self, token: str) -> None:
        with self._lock:
            self._tokens.discard(token)

    def revoke_all(self) -> None:
        with self._lock:
            self._tokens.clear()
