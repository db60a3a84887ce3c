from __future__ import annotations

import math
from typing import Any


def finite_or_zero(value: Any) -> float:
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return 0.0
    return parsed if math.isfinite(parsed) else 0.0


def clamp(value: Any, min_value: float, max_value: float) -> float:
    return max(min_value, min(max_value, finite_or_zero(value)))


def safe_ratio(numerator: float, denominator: float) -> float:
    """numerator / denominator, or 0 when the division is undefined."""
    if not denominator:
        return 0.0
    return finite_or_zero(numerator / denominator)


def round_half_up(value: float, digits: int = 0) -> float:
    factor = 10**digits
    return math.floor(finite_or_zero(value) * factor + 0.5) / factor
