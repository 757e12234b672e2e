"""Lenient numeric coercion for backend payloads."""

from __future__ import annotations

import math
from typing import Optional

BYTES_PER_GB: int = 1024 * 1024 * 1024


def as_number(value: object) -> Optional[float]:
    """
    Return `value` as a finite float, or None.

    Accepts ints, floats and numeric strings. Booleans are not numbers here.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        n = float(value)
        return n if math.isfinite(n) else None
    if isinstance(value, str):
        s = value.strip()
        if not s:
            return None
        try:
            n = float(s)
        except ValueError:
            return None
        return n if math.isfinite(n) else None
    return None


def as_int(value: object) -> Optional[int]:
    n = as_number(value)
    if n is None:
        return None
    return int(n)


def round2(value: float) -> float:
    return round(value, 2)


def non_negative(value: Optional[float]) -> Optional[float]:
    """Negative capacities are treated as absent."""
    if value is None or value < 0:
        return None
    return value


def bytes_to_gb(value: object) -> Optional[float]:
    n = non_negative(as_number(value))
    if n is None:
        return None
    return round2(n / BYTES_PER_GB)


def gb(value: object) -> Optional[float]:
    n = non_negative(as_number(value))
    if n is None:
        return None
    return round2(n)
