"""Unit tests for folder_bridge.pin module."""
import random
from collections import Counter

import pytest

from folder_bridge.pin import PIN_MAX, PIN_MIN, PinAuthority


class TestGenerate:
    """Tests for PinAuthority.generate."""

    def test_ten_thousand_draws_stay_in_range(self):
        authority = PinAuthority(rng=random.Random(20240601))
        pins = [authority.generate() for _ in range(10_000)]

        for pin in pins:
            assert len(pin) == 6
            assert pin.isdigit()
            assert pin[0] != '0'
            assert PIN_MIN <= int(pin) <= PIN_MAX

    def test_distribution_is_roughly_uniform(self):
        authority = PinAuthority(rng=random.Random(7))
        pins = [authority.generate() for _ in range(10_000)]

        # No single value dominates the 900,000-value space
        most_common_count = Counter(pins).most_common(1)[0][1]
        assert most_common_count <= 4

        # Leading digits 1-9 each expected ~1111 times
        leading = Counter(pin[0] for pin in pins)
        assert set(leading) == set('123456789')
        for count in leading.values():
            assert 800 < count < 1450

    def test_default_source_varies(self):
        authority = PinAuthority()
        assert len({authority.generate() for _ in range(50)}) > 1

    def test_bounds_reachable(self):
        class EdgeRandom(random.Random):
            def __init__(self, values):
                super().__init__()
                self._values = iter(values)

            def randint(self, a, b):
                assert (a, b) == (PIN_MIN, PIN_MAX)
                return next(self._values)

        authority = PinAuthority(rng=EdgeRandom([PIN_MIN, PIN_MAX]))
        assert authority.generate() == '100000'
        assert authority.generate() == '999999'


class TestValidate:
    """Tests for PinAuthority.validate."""

    @pytest.mark.parametrize('candidate, expected', [
        ('123456', '123456'),
        (123456, '123456'),
        ('123456', 123456),
    ])
    def test_matches(self, candidate, expected):
        assert PinAuthority.validate(candidate, expected) is True

    @pytest.mark.parametrize('candidate', [
        '123457',
        '12345',
        '1234567',
        '',
        ' 123456',
        '123456\n',
        'abcdef',
        '１２３４５６',
        True,
        None,
    ])
    def test_mismatches(self, candidate):
        assert PinAuthority.validate(candidate, '123456') is False

    @pytest.mark.parametrize('candidate, expected', [
        ('', ''),
        (True, False),
        (True, True),
        (False, 0),
    ])
    def test_degenerate_values_never_match(self, candidate, expected):
        assert PinAuthority.validate(candidate, expected) is False
