"""Retention cleanup job - removes sensor records older than three days."""

__version__ = "0.1.0"

from .job import RETENTION_DAYS, CategoryResult, RetentionJob, RetentionReport


async def run_once(config) -> RetentionReport:
    """Connect, run a single cleanup pass and close the connection."""
    from sensorboard.shared.database import RealtimeDatabase

    async with RealtimeDatabase(config) as db:
        return await RetentionJob(db).run()


def print_summary(report: RetentionReport) -> None:
    print("\n========================================")
    print(f"Total records deleted: {report.total_deleted}")
    print("========================================")


def main() -> int:
    """Entry point for the retention job. Returns the process exit status."""
    import asyncio
    import logging

    from sensorboard.shared.config import FirebaseConfig, get_log_level
    from sensorboard.shared.errors import ConfigError
    from sensorboard.shared.logging import setup_logging

    setup_logging(get_log_level())
    logger = logging.getLogger(__name__)

    try:
        config = FirebaseConfig.from_env()
    except ConfigError as e:
        logger.error(f"Error: {e}")
        return 1

    try:
        report = asyncio.run(run_once(config))
    except Exception as e:
        logger.error(f"Fatal error: {e}")
        return 1

    print_summary(report)

    if not report.ok:
        logger.error(f"Completed with errors in: {', '.join(report.failed_categories)}")
        return 1

    print("\nCompleted successfully")
    return 0


__all__ = ["RETENTION_DAYS", "CategoryResult", "RetentionJob", "RetentionReport", "run_once", "main"]
