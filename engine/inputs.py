"""
Resolve raw user input into engine parameters.

Form fields arrive as text that may be blank, carry units ("40 Hz") or be
garbage. Driver parameters are required and never defaulted; box
dimensions fall back to documented defaults so a drawing can be produced
before any calculation has run.
"""

import math
import re
from typing import Optional, Tuple, Union

from engine.enclosure import DriverParameters
from engine.errors import MissingInputError

DEFAULT_WIDTH_CM = 3
DEFAULT_HEIGHT_CM = 4.8
DEFAULT_DEPTH_CM = 1.8
DEFAULT_DRIVER_SIZE_CM = 12

# Leading decimal number, optionally signed, with optional exponent
_LEADING_NUMBER = re.compile(r'^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)')

RawValue = Union[str, int, float, None]


def parse_number(value: RawValue) -> Optional[float]:
    """
    Parse the leading number of a form value.

    Examples:
        parse_number('40')      → 40.0
        parse_number(' 0.38 ')  → 0.38
        parse_number('28.5 L')  → 28.5
        parse_number('')        → None
        parse_number('n/a')     → None
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
        return number if not math.isnan(number) else None

    match = _LEADING_NUMBER.match(str(value))
    if not match:
        return None
    try:
        return float(match.group(1))
    except (ValueError, OverflowError):
        return None


def _is_blank(number: Optional[float]) -> bool:
    return number is None or number == 0


def parse_driver_inputs(fs: RawValue, qts: RawValue, vas: RawValue) -> DriverParameters:
    """
    Build DriverParameters from raw values.

    Absent, unparseable and zero values are all reported as missing so the
    user is asked to complete them instead of calculating with a zero.

    Raises:
        MissingInputError: listing every missing field.
        InfeasibleDesignError: for negative or infinite values.
    """
    parsed = {
        'fs': parse_number(fs),
        'qts': parse_number(qts),
        'vas': parse_number(vas),
    }
    missing = [name for name, number in parsed.items() if _is_blank(number)]
    if missing:
        raise MissingInputError(missing, "Please fill in all T/S parameters: " + ', '.join(missing))

    return DriverParameters(**parsed)


def resolve_layout_inputs(
    width: RawValue = None,
    height: RawValue = None,
    depth: RawValue = None,
    driver_size: RawValue = None,
) -> Tuple[float, float, float, float]:
    """
    Box dimensions and driver size in cm, with defaults for blank fields.

    Negative values are passed through unchanged; the layout generator
    rejects them.
    """
    def _or_default(value: RawValue, default: float) -> float:
        number = parse_number(value)
        return default if _is_blank(number) else number

    return (
        _or_default(width, DEFAULT_WIDTH_CM),
        _or_default(height, DEFAULT_HEIGHT_CM),
        _or_default(depth, DEFAULT_DEPTH_CM),
        _or_default(driver_size, DEFAULT_DRIVER_SIZE_CM),
    )
