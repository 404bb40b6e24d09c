"""Sensor category table.

One entry per storage path under ``sensors/``. Every per-category rule used by
the dashboard (value field, scaling direction, description and colour
buckets) lives here so the display code stays category agnostic.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from .scaling import ADC_MAX, round_half_away

SENSORS_ROOT = "sensors"

# Retention job processes categories in this order
CATEGORIES = (
    "light",
    "gas",
    "flame",
    "soil-moisture",
    "motion",
    "sound",
    "vibration",
    "humidity",
    "temperature",
)

# Home page order
DASHBOARD_ORDER = (
    "light",
    "motion",
    "vibration",
    "gas",
    "flame",
    "soil-moisture",
    "sound",
    "temperature",
    "humidity",
)

# Raw readings below this mean a flame is in view. Kept as a raw cutoff and
# converted, rather than a fixed percentage, so it always tracks the scaling.
FLAME_ALERT_RAW = 1000
FLAME_ALERT_THRESHOLD = round_half_away((ADC_MAX - FLAME_ALERT_RAW) / ADC_MAX * 100)

SOUND_ALERT_PERCENTAGE = 75.0

UNKNOWN_DESCRIPTION = "Unknown"
DEFAULT_COLOR = "grey50"


class Scaling(Enum):
    """How raw values become display values."""
    INVERTED = "inverted"
    DIRECT = "direct"
    PASSTHROUGH = "passthrough"
    EVENT = "event"


# (upper bound, label) pairs, checked in order against [lo, hi).
# An upper bound of None matches everything left.
Buckets = Tuple[Tuple[Optional[float], str], ...]


@dataclass(frozen=True)
class CategorySpec:
    name: str
    title: str
    scaling: Scaling
    value_field: Optional[str]
    unit: str
    accent: str
    descriptions: Buckets = ()
    colors: Buckets = ()
    fallback_field: Optional[str] = None

    @property
    def path(self) -> str:
        return f"{SENSORS_ROOT}/{self.name}"

    @property
    def is_event(self) -> bool:
        return self.scaling is Scaling.EVENT


SPECS: Dict[str, CategorySpec] = {
    spec.name: spec
    for spec in (
        CategorySpec(
            name="light",
            title="Light",
            scaling=Scaling.INVERTED,
            value_field="value",
            unit="%",
            accent="#ea580c",
            descriptions=(
                (20, "Very Dark"),
                (40, "Dim"),
                (60, "Moderate"),
                (80, "Bright"),
                (None, "Very Bright"),
            ),
            colors=(
                (30, "dark_orange3"),
                (60, "orange3"),
                (None, "gold1"),
            ),
        ),
        CategorySpec(
            name="gas",
            title="Gas",
            scaling=Scaling.DIRECT,
            value_field="value",
            unit="%",
            accent="#4b5563",
            descriptions=(
                (25, "Safe"),
                (60, "Moderate"),
                (75, "Elevated"),
                (None, "Warning"),
            ),
            colors=(
                (25, "green"),
                (60, "yellow"),
                (75, "dark_orange"),
                (None, "red"),
            ),
        ),
        CategorySpec(
            name="flame",
            title="Flame",
            scaling=Scaling.INVERTED,
            value_field="value",
            unit="%",
            accent="#dc2626",
            descriptions=(
                (20, "Safe"),
                (50, "Low Detection"),
                (FLAME_ALERT_THRESHOLD, "Elevated"),
                (None, "Fire Alert!"),
            ),
            colors=(
                (20, "green"),
                (50, "yellow"),
                (FLAME_ALERT_THRESHOLD, "dark_orange"),
                (None, "red"),
            ),
        ),
        CategorySpec(
            name="soil-moisture",
            title="Soil Moisture",
            scaling=Scaling.INVERTED,
            value_field="value",
            unit="%",
            accent="#b45309",
            descriptions=(
                (20, "Dry"),
                (40, "Low"),
                (70, "Optimal"),
                (90, "High"),
                (None, "Saturated"),
            ),
            colors=(
                (20, "tan"),
                (40, "yellow3"),
                (70, "green"),
                (90, "dodger_blue2"),
                (None, "blue"),
            ),
        ),
        CategorySpec(
            name="motion",
            title="Motion",
            scaling=Scaling.EVENT,
            value_field=None,
            unit="",
            accent="#2563eb",
        ),
        CategorySpec(
            name="sound",
            title="Sound",
            scaling=Scaling.DIRECT,
            value_field="amplitude",
            fallback_field="value",
            unit="%",
            accent="#0891b2",
            descriptions=(
                (25, "Quiet"),
                (50, "Moderate"),
                (SOUND_ALERT_PERCENTAGE, "Loud"),
                (None, "Very Loud"),
            ),
            colors=(
                (25, "cyan"),
                (50, "turquoise2"),
                (SOUND_ALERT_PERCENTAGE, "dark_orange"),
                (None, "red"),
            ),
        ),
        CategorySpec(
            name="vibration",
            title="Vibration",
            scaling=Scaling.EVENT,
            value_field=None,
            unit="",
            accent="#3f3f46",
        ),
        CategorySpec(
            name="humidity",
            title="Humidity",
            scaling=Scaling.PASSTHROUGH,
            value_field="value",
            unit="%",
            accent="#38bdf8",
            descriptions=(
                (30, "Dry"),
                (60, "Comfortable"),
                (80, "Humid"),
                (None, "Very Humid"),
            ),
            colors=(
                (30, "tan"),
                (60, "sky_blue1"),
                (80, "dodger_blue1"),
                (None, "blue"),
            ),
        ),
        CategorySpec(
            name="temperature",
            title="Temperature",
            scaling=Scaling.PASSTHROUGH,
            value_field="value",
            unit="°C",
            accent="#f97316",
            descriptions=(
                (0, "Freezing"),
                (15, "Cold"),
                (25, "Comfortable"),
                (30, "Warm"),
                (None, "Hot"),
            ),
            colors=(
                (15, "deep_sky_blue1"),
                (25, "green"),
                (30, "orange1"),
                (None, "red"),
            ),
        ),
    )
}


def get_spec(category: str) -> CategorySpec:
    """Look up a category, raising KeyError for unknown names."""
    try:
        return SPECS[category]
    except KeyError:
        raise KeyError(f"Unknown sensor category: {category}") from None
