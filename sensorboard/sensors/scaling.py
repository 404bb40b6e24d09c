"""Raw ADC to percentage scaling."""

import math
from typing import Optional

ADC_MAX = 4095


def round_half_away(value: float, digits: int = 1) -> float:
    """Round to ``digits`` decimals, halves away from zero.

    Python's round() uses banker's rounding, which would turn 0.25 into 0.2.
    """
    factor = 10 ** digits
    scaled = abs(value) * factor
    rounded = math.floor(scaled + 0.5) / factor
    return math.copysign(rounded, value) if rounded else 0.0


def scale_direct(raw: Optional[float]) -> Optional[float]:
    """0 raw -> 0%, 4095 raw -> 100%. Out of range values are not clamped."""
    if raw is None:
        return None
    return round_half_away(raw / ADC_MAX * 100)


def scale_inverted(raw: Optional[float]) -> Optional[float]:
    """0 raw -> 100%, 4095 raw -> 0%. Out of range values are not clamped."""
    if raw is None:
        return None
    return round_half_away((ADC_MAX - raw) / ADC_MAX * 100)
