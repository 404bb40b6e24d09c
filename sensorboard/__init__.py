"""Environmental sensor dashboard and retention cleanup job."""

__version__ = "0.1.0"
