"""Exception types shared by the sensorboard services."""

from typing import Optional


class SensorboardError(Exception):
    """Base class for sensorboard errors."""

    pass


class ConfigError(SensorboardError):
    """Raised when required configuration is missing or invalid."""

    pass


class DatabaseError(SensorboardError):
    """Raised when the realtime database request fails.

    Args:
        message: Human readable description.
        path: Database path the request targeted.
        status: HTTP status code, if a response was received.
    """

    def __init__(self, message: str, path: Optional[str] = None, status: Optional[int] = None):
        super().__init__(message)
        self.path = path
        self.status = status
