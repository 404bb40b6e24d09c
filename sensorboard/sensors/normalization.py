"""Raw reading to display value mapping, descriptions and alert predicates."""

from typing import Optional

from .categories import (
    DEFAULT_COLOR,
    FLAME_ALERT_THRESHOLD,
    SOUND_ALERT_PERCENTAGE,
    UNKNOWN_DESCRIPTION,
    Buckets,
    Scaling,
    get_spec,
)
from .scaling import scale_direct, scale_inverted

flame_alert_threshold_percentage = FLAME_ALERT_THRESHOLD


def normalize(category: str, raw: Optional[float]) -> Optional[float]:
    """Convert a raw reading to its display value for ``category``.

    Args:
        category: Category name, e.g. 'light'.
        raw: Raw reading, or None.

    Returns:
        Percentage for ADC categories, the raw value for passthrough
        categories, None for a None input.

    Raises:
        ValueError: For event categories, which carry no value.
    """
    spec = get_spec(category)
    if spec.scaling is Scaling.INVERTED:
        return scale_inverted(raw)
    if spec.scaling is Scaling.DIRECT:
        return scale_direct(raw)
    if spec.scaling is Scaling.PASSTHROUGH:
        return raw
    raise ValueError(f"{category} readings carry no value")


def _bucket(buckets: Buckets, value: Optional[float], default: str) -> str:
    if value is None:
        return default
    for upper, label in buckets:
        if upper is None or value < upper:
            return label
    return default


def describe(category: str, value: Optional[float]) -> str:
    """Qualitative label for a display value; "Unknown" for None."""
    return _bucket(get_spec(category).descriptions, value, UNKNOWN_DESCRIPTION)


def gradient_color(category: str, value: Optional[float]) -> str:
    """Rich colour for a display value; grey for None."""
    return _bucket(get_spec(category).colors, value, DEFAULT_COLOR)


def normalize_light(raw: Optional[float]) -> Optional[float]:
    return normalize("light", raw)


def normalize_gas(raw: Optional[float]) -> Optional[float]:
    return normalize("gas", raw)


def normalize_flame(raw: Optional[float]) -> Optional[float]:
    return normalize("flame", raw)


def normalize_soil_moisture(raw: Optional[float]) -> Optional[float]:
    return normalize("soil-moisture", raw)


def normalize_sound(raw: Optional[float]) -> Optional[float]:
    return normalize("sound", raw)


def describe_light(percentage: Optional[float]) -> str:
    return describe("light", percentage)


def describe_gas(percentage: Optional[float]) -> str:
    return describe("gas", percentage)


def describe_flame(percentage: Optional[float]) -> str:
    return describe("flame", percentage)


def describe_soil_moisture(percentage: Optional[float]) -> str:
    return describe("soil-moisture", percentage)


def describe_sound(percentage: Optional[float]) -> str:
    return describe("sound", percentage)


def describe_temperature(celsius: Optional[float]) -> str:
    return describe("temperature", celsius)


def describe_humidity(percentage: Optional[float]) -> str:
    return describe("humidity", percentage)


def is_fire_alert(percentage: Optional[float]) -> bool:
    """True once the flame reading reaches the raw 1000 equivalent."""
    return percentage is not None and percentage >= flame_alert_threshold_percentage


def is_sound_alert(percentage: Optional[float]) -> bool:
    """True at 75% and above."""
    return percentage is not None and percentage >= SOUND_ALERT_PERCENTAGE


def is_warm(celsius: Optional[float]) -> bool:
    """Temperatures over 30°C get the warm highlight."""
    return celsius is not None and celsius > 30


def is_alert(category: str, value: Optional[float]) -> bool:
    """Alert predicate for categories that have one."""
    if category == "flame":
        return is_fire_alert(value)
    if category == "sound":
        return is_sound_alert(value)
    return False
