"""Core data models for sensor readings."""

from dataclasses import dataclass
from typing import Any, List, Mapping, Optional


def _as_number(raw: Any) -> Optional[float]:
    # bool is an int subclass but never a valid reading
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        return None
    return raw


@dataclass
class SensorReading:
    """A single record stored under ``sensors/<category>/<key>``.

    Analog categories carry a value (``value``, or ``amplitude`` for sound);
    motion and vibration records are bare event markers with only a timestamp.
    """
    key: str
    timestamp: Optional[int]
    value: Optional[float] = None

    @classmethod
    def from_record(
        cls,
        key: str,
        record: Any,
        value_field: Optional[str] = None,
        fallback_field: Optional[str] = None,
    ) -> "SensorReading":
        """Build a reading from a raw database record.

        Args:
            key: Generated child key of the record.
            record: Decoded JSON record; anything but a dict yields empty fields.
            value_field: Name of the magnitude field, or None for event records.
            fallback_field: Field to read when value_field is absent.

        Returns:
            SensorReading with missing fields set to None.
        """
        if not isinstance(record, Mapping):
            return cls(key=key, timestamp=None)

        timestamp = _as_number(record.get("timestamp"))
        value = None
        if value_field:
            value = _as_number(record.get(value_field))
            if value is None and fallback_field:
                value = _as_number(record.get(fallback_field))

        return cls(
            key=key,
            timestamp=int(timestamp) if timestamp is not None else None,
            value=value,
        )


def readings_from_snapshot(
    snapshot: Optional[Mapping[str, Any]],
    value_field: Optional[str] = None,
    fallback_field: Optional[str] = None,
) -> List[SensorReading]:
    """Convert a snapshot into readings sorted oldest first by timestamp.

    Child key order carries no meaning, so the sort is always explicit.
    Records without a timestamp sort first; ties keep snapshot order.
    """
    if not snapshot:
        return []

    readings = [
        SensorReading.from_record(key, record, value_field, fallback_field)
        for key, record in snapshot.items()
    ]
    readings.sort(key=lambda r: (r.timestamp is not None, r.timestamp or 0))
    return readings
