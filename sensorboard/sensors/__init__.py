"""Sensor categories and value normalization."""

from .categories import CATEGORIES, DASHBOARD_ORDER, SPECS, CategorySpec, Scaling, get_spec
from .normalization import (
    describe,
    flame_alert_threshold_percentage,
    gradient_color,
    is_fire_alert,
    is_sound_alert,
    normalize,
)

__all__ = [
    "CATEGORIES",
    "DASHBOARD_ORDER",
    "SPECS",
    "CategorySpec",
    "Scaling",
    "get_spec",
    "describe",
    "flame_alert_threshold_percentage",
    "gradient_color",
    "is_fire_alert",
    "is_sound_alert",
    "normalize",
]
