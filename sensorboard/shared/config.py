"""Configuration loading utilities."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import yaml
from dotenv import load_dotenv

from .errors import ConfigError

DATABASE_URL_ENV = "FIREBASE_DATABASE_URL"
AUTH_TOKEN_ENV = "FIREBASE_AUTH_TOKEN"


@dataclass
class FirebaseConfig:
    """Realtime database endpoint and legacy access token."""
    database_url: str
    auth_token: str

    def __post_init__(self):
        self.database_url = self.database_url.rstrip("/")

    @classmethod
    def from_env(cls, load_env: bool = True) -> "FirebaseConfig":
        """Create config from environment variables.

        Args:
            load_env: Whether to load a .env file first.

        Returns:
            FirebaseConfig instance.

        Raises:
            ConfigError: If either variable is missing or empty.
        """
        if load_env:
            load_dotenv()

        database_url = os.getenv(DATABASE_URL_ENV)
        if not database_url:
            raise ConfigError(f"{DATABASE_URL_ENV} environment variable is not set")

        auth_token = os.getenv(AUTH_TOKEN_ENV)
        if not auth_token:
            raise ConfigError(f"{AUTH_TOKEN_ENV} environment variable is not set")

        return cls(database_url=database_url, auth_token=auth_token)


def load_yaml_config(config_path: Union[str, Path]) -> dict:
    """Load a YAML configuration file.

    Args:
        config_path: Path to config file.

    Returns:
        Configuration dictionary.

    Raises:
        ConfigError: If the file doesn't exist or isn't valid YAML.
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with open(config_path, "r") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping")
    return data


def get_log_level(config: Optional[dict] = None) -> str:
    """Resolve log level from config, then LOG_LEVEL, defaulting to INFO.

    Args:
        config: Optional configuration dictionary.

    Returns:
        Log level string (e.g., 'INFO', 'DEBUG').
    """
    if config and config.get("log_level"):
        return str(config["log_level"]).upper()
    return os.getenv("LOG_LEVEL", "INFO").upper()
