"""
Number formatting for drawings and result summaries.

Two conventions are needed:

- Drawing coordinates are written as the shortest decimal that round-trips
  to the same double, with integral values printed without a fractional
  part (``30``, not ``30.0``).
- Summary figures are fixed-point with half-up rounding of the exact binary
  value (``2.25`` → ``2.3``), as shown on the results panel.
"""

import math
from decimal import Decimal, ROUND_HALF_UP


def format_number(value: float) -> str:
    """
    Format a float as the shortest round-trip decimal.

    Examples:
        format_number(30.0)     → '30'
        format_number(18.336)   → '18.336'
        format_number(0.00005)  → '0.00005'
        format_number(1.5e-7)   → '1.5e-7'
    """
    value = float(value)
    if not math.isfinite(value):
        raise ValueError(f"Cannot format non-finite value {value!r}")

    if value == int(value) and abs(value) < 1e21:
        return str(int(value))

    text = repr(value)
    if 'e' not in text:
        return text

    mantissa, exponent = text.split('e')
    exp = int(exponent)
    if -7 < exp < 21:
        return format(Decimal(text), 'f')
    sign = '+' if exp > 0 else '-'
    return f"{mantissa}e{sign}{abs(exp)}"


def format_fixed(value: float, digits: int = 1) -> str:
    """Fixed-point string with ``digits`` decimals, rounding half away from zero."""
    value = float(value)
    if not math.isfinite(value):
        raise ValueError(f"Cannot format non-finite value {value!r}")
    quantum = Decimal(1).scaleb(-digits)
    return str(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def round_fixed(value: float, digits: int = 1) -> float:
    """Round like :func:`format_fixed` but return a float."""
    return float(format_fixed(value, digits))
