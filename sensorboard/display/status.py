"""Age and liveness formatting for dashboard status lines.

All timestamps are epoch milliseconds, matching what the devices write.
"""

import math
from datetime import datetime
from typing import Optional

SECOND_MS = 1000
LIVE_THRESHOLD_SECONDS = 10


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'' if count == 1 else 's'} ago"


def format_sensor_status(
    timestamp: Optional[float],
    now: float,
    live_threshold: float = LIVE_THRESHOLD_SECONDS,
) -> str:
    """Status text for an analog sensor: "Live" or the age of its last reading.

    Args:
        timestamp: Last reading time, or None if nothing has arrived yet.
        now: Current time.
        live_threshold: Seconds within which a reading counts as live.

    Returns:
        "Live", or the age in its largest whole unit, e.g. "3 minutes ago".
    """
    if timestamp is None:
        return "Live"

    diff = now - timestamp
    if diff < live_threshold * SECOND_MS:
        return "Live"

    seconds = math.floor(diff / SECOND_MS)
    minutes = seconds // 60
    hours = minutes // 60
    days = hours // 24

    if days > 0:
        return _plural(days, "day")
    if hours > 0:
        return _plural(hours, "hour")
    if minutes > 0:
        return _plural(minutes, "minute")
    return _plural(seconds, "second")


def format_relative_time(timestamp: float, now: float) -> str:
    """Relative time for discrete events, e.g. "just now" or "2 hours ago"."""
    seconds = math.floor((now - timestamp) / SECOND_MS)
    if seconds < 1:
        return "just now"
    if seconds < 60:
        return _plural(seconds, "second")

    minutes = seconds // 60
    if minutes < 60:
        return _plural(minutes, "minute")

    hours = minutes // 60
    if hours < 24:
        return _plural(hours, "hour")

    return _plural(hours // 24, "day")


def format_time_between(current: float, previous: float) -> str:
    """Gap between two consecutive events, e.g. "42s after"."""
    seconds = math.floor((current - previous) / SECOND_MS)
    if seconds < 60:
        return f"{seconds}s after"
    minutes = seconds // 60
    if minutes < 60:
        return f"{minutes}m after"
    return f"{minutes // 60}h after"


def format_clock(timestamp: float) -> str:
    """Local wall clock time, e.g. "03:04:05 PM"."""
    return datetime.fromtimestamp(timestamp / SECOND_MS).strftime("%I:%M:%S %p")


def format_datetime(timestamp: float) -> str:
    """Local date and time, e.g. "Jan 5, 03:04:05 PM"."""
    dt = datetime.fromtimestamp(timestamp / SECOND_MS)
    return f"{dt:%b} {dt.day}, {dt:%I:%M:%S %p}"
