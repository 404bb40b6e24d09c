"""Terminal dashboard service."""

from .terminal_monitor import TerminalMonitor
from .views import AnalogView, EventView, build_view


def main():
    """Entry point for the dashboard."""
    import logging
    import sys

    from .config import load_config
    from sensorboard.shared.config import FirebaseConfig
    from sensorboard.shared.database import RealtimeDatabase
    from sensorboard.shared.errors import ConfigError
    from sensorboard.shared.logging import setup_logging

    logger = logging.getLogger(__name__)

    try:
        firebase_config = FirebaseConfig.from_env()
        config = load_config()
    except ConfigError as e:
        setup_logging()
        logger.error(f"Error: {e}")
        sys.exit(1)

    setup_logging(config.log_level)

    monitor = TerminalMonitor(config, RealtimeDatabase(firebase_config))
    monitor.run()


__all__ = ["TerminalMonitor", "AnalogView", "EventView", "build_view", "main"]
