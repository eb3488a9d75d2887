"""Unit tests for folder_bridge.pairing module."""
import pytest

from folder_bridge.errors import PairingError, PairingRateLimitedError
from folder_bridge.pairing import FailedAttemptWindow, PairingGate


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


class TestPairingGate:
    """Tests for PairingGate."""

    def test_correct_pin_issues_token(self):
        gate = PairingGate('482913')
        token = gate.pair('482913', client='10.0.0.2')
        assert token
        assert gate.is_authorized(token)
        assert gate.paired_count == 1

    def test_tokens_are_unique(self):
        gate = PairingGate('482913')
        assert gate.pair('482913') != gate.pair('482913')

    def test_wrong_pin_rejected(self):
        gate = PairingGate('482913')
        with pytest.raises(PairingError, match='Incorrect PIN'):
            gate.pair('000000')
        assert gate.paired_count == 0

    def test_unknown_tokens_not_authorized(self):
        gate = PairingGate('482913')
        assert not gate.is_authorized(None)
        assert not gate.is_authorized('')
        assert not gate.is_authorized('forged')

    def test_rate_limit_after_max_failures(self):
        gate = PairingGate('482913', max_attempts=3, window_seconds=60)
        for _ in range(3):
            with pytest.raises(PairingError):
                gate.pair('111111', client='peer')

        with pytest.raises(PairingRateLimitedError) as exc:
            gate.pair('482913', client='peer')
        assert exc.value.retry_after > 0

    def test_rate_limit_is_per_client(self):
        gate = PairingGate('482913', max_attempts=1)
        with pytest.raises(PairingError):
            gate.pair('111111', client='a')
        assert gate.pair('482913', client='b')

    def test_window_slides(self):
        clock = FakeClock()
        gate = PairingGate('482913', max_attempts=2, window_seconds=10, clock=clock)
        for _ in range(2):
            with pytest.raises(PairingError):
                gate.pair('111111', client='peer')
        with pytest.raises(PairingRateLimitedError):
            gate.pair('482913', client='peer')

        clock.now += 11
        assert gate.pair('482913', client='peer')

    def test_success_clears_failures(self):
        gate = PairingGate('482913', max_attempts=2)
        with pytest.raises(PairingError):
            gate.pair('111111', client='peer')
        gate.pair('482913', client='peer')
        with pytest.raises(PairingError):
            gate.pair('111111', client='peer')
        # Only one failure recorded since the success
        assert gate.pair('482913', client='peer')

    def test_pin_expiry(self):
        clock = FakeClock()
        gate = PairingGate('482913', pin_ttl_seconds=30, clock=clock)
        assert not gate.pin_expired
        clock.now += 31
        assert gate.pin_expired
        with pytest.raises(PairingError, match='expired'):
            gate.pair('482913')

    def test_tokens_survive_pin_expiry(self):
        clock = FakeClock()
        gate = PairingGate('482913', pin_ttl_seconds=30, clock=clock)
        token = gate.pair('482913')
        clock.now += 60
        assert gate.is_authorized(token)

    def test_revoke(self):
        gate = PairingGate('482913')
        t1 = gate.pair('482913')
        t2 = gate.pair('482913')
        gate.revoke(t1)
        assert not gate.is_authorized(t1)
        assert gate.is_authorized(t2)
        gate.revoke_all()
        assert not gate.is_authorized(t2)


class TestFailedAttemptWindow:
    """Tests for FailedAttemptWindow."""

    def test_check_passes_under_limit(self):
        window = FailedAttemptWindow(max_attempts=2, window_seconds=10)
        window.record_failure('k', now=0)
        window.check('k', now=1)

    def test_retry_after_counts_from_oldest_failure(self):
        window = FailedAttemptWindow(max_attempts=2, window_seconds=10)
        window.record_failure('k', now=0)
        window.record_failure('k', now=4)
        with pytest.raises(PairingRateLimitedError) as exc:
            window.check('k', now=5)
        assert exc.value.retry_after == pytest.approx(5.0)

    def test_clear(self):
        window = FailedAttemptWindow(max_attempts=1, window_seconds=10)
        window.record_failure('k', now=0)
        window.clear('k')
        window.check('k', now=1)
