"""
Lenient number parsing for passage geometry and zoom.

Malformed values never fail a parse; they fall back to the given default.
"""

import math
import re
from typing import Any, Optional, Tuple

from twine_workshop import config

_LEADING_INT = re.compile(r'\s*([-+]?\d+)')


def parse_int(token: Optional[str], default: int) -> int:
    """Parse a leading integer the way browsers read coordinates.

    Examples:
        >>> parse_int("12.7", 100)
        12
        >>> parse_int("abc", 100)
        100
    """
    match = _LEADING_INT.match(token or '')
    if not match:
        return default
    return int(match.group(1))


def parse_pair(value: Optional[str], default: int) -> Tuple[int, int]:
    """Parse an 'a,b' pair; each half falls back to default on its own."""
    parts = (value or '').split(',')
    first = parse_int(parts[0], default)
    second = parse_int(parts[1], default) if len(parts) > 1 else default
    return first, second


def positive_size(value: int) -> int:
    return value if value > 0 else config.DEFAULT_SIZE


def parse_zoom(value: Any) -> float:
    """Positive finite zoom factor; numbers are kept as given, strings are parsed."""
    if isinstance(value, bool):
        return config.DEFAULT_ZOOM
    try:
        zoom = value if isinstance(value, (int, float)) else float(value)
    except (TypeError, ValueError):
        return config.DEFAULT_ZOOM
    if not math.isfinite(zoom) or zoom <= 0:
        return config.DEFAULT_ZOOM
    return zoom


def round_half_up(value: float) -> int:
    """Round like JavaScript's Math.round, which Twine uses for positions."""
    return math.floor(value + 0.5)


def format_number(value: float) -> str:
    """Render a number without a trailing '.0' for whole values."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))
