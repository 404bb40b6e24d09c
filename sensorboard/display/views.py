"""
Snapshot to view derivation for the dashboard.
Every delivery is a full snapshot, so views are rebuilt from scratch each time.
"""

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Tuple, Union

from sensorboard.sensors.categories import get_spec
from sensorboard.sensors.normalization import describe, gradient_color, is_alert, is_warm, normalize
from sensorboard.sensors.scaling import round_half_away
from sensorboard.shared.models import readings_from_snapshot

from .status import LIVE_THRESHOLD_SECONDS, format_relative_time, format_sensor_status, format_time_between

Snapshot = Optional[Mapping[str, Any]]


@dataclass
class AnalogView:
    """Display state for a sensor that reports a magnitude"""
    category: str
    title: str
    unit: str
    accent: str
    history: List[Tuple[int, float]] = field(default_factory=list)  # (timestamp, display value), oldest first
    current: Optional[float] = None
    last_timestamp: Optional[int] = None
    description: str = "Unknown"
    color: str = "grey50"
    status_text: str = "Live"
    alert: bool = False
    warm: bool = False
    minimum: Optional[float] = None
    average: Optional[float] = None
    maximum: Optional[float] = None

    @property
    def has_data(self) -> bool:
        return bool(self.history)

    def values(self) -> List[float]:
        return [v for _, v in self.history]


@dataclass
class EventView:
    """Display state for motion/vibration event markers"""
    category: str
    title: str
    accent: str
    events: List[int] = field(default_factory=list)  # newest first
    gaps: List[Optional[str]] = field(default_factory=list)  # gap to the next older event
    last_timestamp: Optional[int] = None
    relative_time: str = ""

    @property
    def has_data(self) -> bool:
        return bool(self.events)


View = Union[AnalogView, EventView]


def build_analog_view(
    category: str,
    snapshot: Snapshot,
    now: float,
    live_threshold: float = LIVE_THRESHOLD_SECONDS,
) -> AnalogView:
    spec = get_spec(category)
    view = AnalogView(category=category, title=spec.title, unit=spec.unit, accent=spec.accent)

    readings = readings_from_snapshot(snapshot, spec.value_field, spec.fallback_field)
    for reading in readings:
        if reading.timestamp is None or reading.value is None:
            continue
        view.history.append((reading.timestamp, normalize(category, reading.value)))

    if not view.history:
        return view

    view.last_timestamp, view.current = view.history[-1]
    view.description = describe(category, view.current)
    view.color = gradient_color(category, view.current)
    view.status_text = format_sensor_status(view.last_timestamp, now, live_threshold)
    view.alert = is_alert(category, view.current)
    view.warm = category == "temperature" and is_warm(view.current)

    values = view.values()
    view.minimum = min(values)
    view.maximum = max(values)
    view.average = round_half_away(sum(values) / len(values))
    return view


def build_event_view(category: str, snapshot: Snapshot, now: float) -> EventView:
    spec = get_spec(category)
    view = EventView(category=category, title=spec.title, accent=spec.accent)

    readings = readings_from_snapshot(snapshot)
    view.events = [r.timestamp for r in reversed(readings) if r.timestamp is not None]
    if not view.events:
        return view

    view.gaps = [
        format_time_between(current, previous)
        for current, previous in zip(view.events, view.events[1:])
    ] + [None]
    view.last_timestamp = view.events[0]
    view.relative_time = format_relative_time(view.last_timestamp, now)
    return view


def build_view(
    category: str,
    snapshot: Snapshot,
    now: float,
    live_threshold: float = LIVE_THRESHOLD_SECONDS,
) -> View:
    """Build the right kind of view for a category."""
    if get_spec(category).is_event:
        return build_event_view(category, snapshot, now)
    return build_analog_view(category, snapshot, now, live_threshold)
