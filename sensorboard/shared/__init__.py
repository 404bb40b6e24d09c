"""Shared utilities for sensorboard services."""

from .models import SensorReading, readings_from_snapshot
from .database import Query, RealtimeDatabase, Subscription
from .config import FirebaseConfig, load_yaml_config
from .errors import ConfigError, DatabaseError, SensorboardError
from .logging import setup_logging

__all__ = [
    "SensorReading",
    "readings_from_snapshot",
    "Query",
    "RealtimeDatabase",
    "Subscription",
    "FirebaseConfig",
    "load_yaml_config",
    "ConfigError",
    "DatabaseError",
    "SensorboardError",
    "setup_logging",
]
