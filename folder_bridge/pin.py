"""Pairing PIN generation and comparison.

The PIN is a pairing convenience code shown on the desktop and typed on the
remote device. It is drawn from a non-cryptographic source and
must not be reused as a secret anywhere else.
"""
from __future__ import annotations

import hmac
import random

PIN_MIN = 100_000
PIN_MAX = 999_999


def _decimal(value: str | int) -> str | None:
    """Decimal form of a PIN value, or None for values that can never match."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str) and value:
        return value
    return None


class PinAuthority:
    """Generates and validates 6-digit pairing codes."""

    def __init__(self, rng: random.Random | None = None):
        self._rng = rng or random.Random()

    def generate(self) -> str:
        """Draw a PIN uniformly from [100000, 999999]."""
        return str(self._rng.randint(PIN_MIN, PIN_MAX))

    @staticmethod
    def validate(candidate: str | int, expected: str | int) -> bool:
        """Exact equality of the decimal forms of ``candidate`` and ``expected``.

        No normalization: whitespace, bools and empty values never match.
        """
        left, right = _decimal(candidate), _decimal(expected)
        if left is None or right is None:
            return False
        return hmac.compare_digest(
            left.encode('utf-8'),
            right.encode('utf-8'),
        )
