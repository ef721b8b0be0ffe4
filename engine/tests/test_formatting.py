"""
Tests for number formatting.

Validates:
1. Shortest round-trip drawing coordinates
2. Half-up fixed-point summaries
"""

import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

from engine.formatting import format_fixed, format_number, round_fixed


class TestFormatNumber:
    """Test drawing coordinate formatting."""

    @pytest.mark.parametrize('value, expected', [
        (30.0, '30'),
        (30, '30'),
        (146.0, '146'),
        (-0.0, '0'),
        (-12.0, '-12'),
        (18.5, '18.5'),
        (0.1 + 0.2, '0.30000000000000004'),
        (1e-05, '0.00001'),
        (1.5e-7, '1.5e-7'),
        (1e21, '1e+21'),
        (123456789.5, '123456789.5'),
    ])
    def test_format(self, value, expected):
        assert format_number(value) == expected

    def test_round_trips(self):
        for value in (18.336000000000002, 29.000000000000004, 2.9, 0.618):
            assert float(format_number(value)) == value

    @pytest.mark.parametrize('value', [float('nan'), float('inf'), float('-inf')])
    def test_non_finite_rejected(self, value):
        with pytest.raises(ValueError):
            format_number(value)


class TestFormatFixed:
    """Test fixed-point summary formatting."""

    @pytest.mark.parametrize('value, digits, expected', [
        (0.25, 1, '0.3'),
        (2.25, 1, '2.3'),
        (-2.25, 1, '-2.3'),
        (23.5392, 1, '23.5'),
        (150, 1, '150.0'),
        (0.7071, 3, '0.707'),
        (2.675, 2, '2.67'),  # binary value is just below 2.675
    ])
    def test_format(self, value, digits, expected):
        assert format_fixed(value, digits) == expected

    def test_round_fixed(self):
        assert round_fixed(2.8661) == 2.9
        assert isinstance(round_fixed(3), float)

    def test_non_finite_rejected(self):
        with pytest.raises(ValueError):
            format_fixed(float('nan'))
