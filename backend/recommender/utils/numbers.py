"""Lenient number parsing for loosely-typed listing records."""

import math
from decimal import Decimal
from typing import Any


def to_float(value: Any) -> float | None:
    """Parse a price/area style value. Returns None for missing or malformed input.

    e.g. 1500000 -> 1500000.0, "1,500,000" -> 1500000.0, "abc" -> None
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        result = float(value)
    elif isinstance(value, str):
        cleaned = value.replace(",", "").strip()
        if not cleaned:
            return None
        try:
            result = float(cleaned)
        except ValueError:
            return None
    else:
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def to_int(value: Any) -> int | None:
    """Parse a room count. Fractional values are truncated; e.g. "3" -> 3, 2.0 -> 2."""
    result = to_float(value)
    if result is None:
        return None
    return int(result)


def is_positive(value: float | int | None) -> bool:
    return value is not None and value > 0


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (2.5 -> 3), unlike round()."""
    return math.floor(value + 0.5)
