from sensorboard.shared.models import SensorReading, readings_from_snapshot


def test_from_record_reads_value_field():
    reading = SensorReading.from_record("k1", {"timestamp": 5, "value": 1200}, "value")
    assert reading == SensorReading(key="k1", timestamp=5, value=1200)


def test_from_record_uses_fallback_field():
    reading = SensorReading.from_record("k1", {"timestamp": 5, "value": 30}, "amplitude", "value")
    assert reading.value == 30

    reading = SensorReading.from_record("k1", {"timestamp": 5, "amplitude": 40, "value": 30}, "amplitude", "value")
    assert reading.value == 40


def test_from_record_tolerates_bad_records():
    assert SensorReading.from_record("k", None, "value") == SensorReading(key="k", timestamp=None)
    assert SensorReading.from_record("k", "garbage", "value").timestamp is None

    reading = SensorReading.from_record("k", {"timestamp": "yesterday", "value": True}, "value")
    assert reading.timestamp is None
    assert reading.value is None


def test_event_records_have_no_value():
    reading = SensorReading.from_record("k", {"timestamp": 9, "value": 1})
    assert reading.value is None
    assert reading.timestamp == 9


def test_snapshot_sorted_by_timestamp_not_key():
    snapshot = {
        "-b": {"timestamp": 300, "value": 3},
        "-a": {"timestamp": 100, "value": 1},
        "-c": {"timestamp": 200, "value": 2},
        "-z": {"value": 9},
    }
    readings = readings_from_snapshot(snapshot, "value")
    assert [r.key for r in readings] == ["-z", "-a", "-c", "-b"]


def test_empty_snapshot():
    assert readings_from_snapshot(None) == []
    assert readings_from_snapshot({}) == []
