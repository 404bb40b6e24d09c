"""Configuration for the dashboard."""

import os
from dataclasses import dataclass
from typing import Optional

from sensorboard.sensors.categories import SPECS
from sensorboard.shared.config import get_log_level, load_yaml_config
from sensorboard.shared.errors import ConfigError

HOME_PAGE = "home"


@dataclass
class DashboardConfig:
    """Configuration for the terminal dashboard."""

    # "home" or a category name
    page: str = HOME_PAGE

    # Query sizes
    detail_limit: int = 20
    preview_limit: int = 10
    event_limit: int = 20
    last_event_limit: int = 1

    # Status text re-render period and stream reopen delay (seconds)
    refresh_interval: float = 1.0
    live_threshold_seconds: float = 10.0

    log_level: str = "INFO"

    def __post_init__(self):
        if self.page != HOME_PAGE and self.page not in SPECS:
            raise ConfigError(f"Unknown dashboard page: {self.page}")

    @classmethod
    def from_dict(cls, data: dict) -> "DashboardConfig":
        """Create config from dictionary."""
        return cls(
            page=data.get("page", HOME_PAGE),
            detail_limit=int(data.get("detail_limit", 20)),
            preview_limit=int(data.get("preview_limit", 10)),
            event_limit=int(data.get("event_limit", 20)),
            last_event_limit=int(data.get("last_event_limit", 1)),
            refresh_interval=float(data.get("refresh_interval", 1.0)),
            live_threshold_seconds=float(data.get("live_threshold_seconds", 10.0)),
            log_level=get_log_level(data),
        )


def load_config(config_path: Optional[str] = None) -> DashboardConfig:
    """Load configuration from YAML file or environment.

    Args:
        config_path: Path to YAML config file. If not provided,
                    looks for SENSORBOARD_CONFIG env var,
                    then falls back to defaults.

    Returns:
        DashboardConfig instance.

    Raises:
        ConfigError: If the file is invalid or names an unknown page.
    """
    if config_path is None:
        config_path = os.environ.get("SENSORBOARD_CONFIG")

    data = load_yaml_config(config_path) if config_path else {}

    # Environment variable overrides
    if page := os.environ.get("DASHBOARD_PAGE"):
        data["page"] = page
    if log_level := os.environ.get("LOG_LEVEL"):
        data["log_level"] = log_level

    return DashboardConfig.from_dict(data)
