"""Retention cleanup job - deletes sensor records older than the retention window."""

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, List, Optional, Protocol, Sequence

from sensorboard.sensors.categories import CATEGORIES, SENSORS_ROOT

logger = logging.getLogger(__name__)

RETENTION_DAYS = 3
DAY_MS = 24 * 60 * 60 * 1000


class NodeStore(Protocol):
    """The part of the database client the job needs."""

    async def get(self, path: str) -> Any: ...

    async def delete(self, path: str) -> None: ...


def now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class CategoryResult:
    """Outcome of cleaning one category."""
    category: str
    found: int = 0
    deleted: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class RetentionReport:
    """Outcome of a full run across all categories."""
    cutoff_ms: int
    results: List[CategoryResult] = field(default_factory=list)

    @property
    def total_deleted(self) -> int:
        return sum(r.deleted for r in self.results)

    @property
    def failed_categories(self) -> List[str]:
        return [r.category for r in self.results if not r.ok]

    @property
    def ok(self) -> bool:
        return not self.failed_categories


def is_expired(record: Any, cutoff_ms: int) -> bool:
    """True if the record has a numeric timestamp strictly before the cutoff.

    Records without a timestamp are never eligible.
    """
    if not isinstance(record, dict):
        return False
    timestamp = record.get("timestamp")
    if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
        return False
    return timestamp < cutoff_ms


class RetentionJob:
    """Deletes records older than ``retention_days`` from each category.

    Categories are processed one at a time in the given order. A failure in
    one category is logged and recorded, and the run moves on to the next.
    Failed deletes are not retried; the next scheduled run picks them up.
    """

    def __init__(
        self,
        db: NodeStore,
        categories: Sequence[str] = CATEGORIES,
        retention_days: int = RETENTION_DAYS,
        clock: Callable[[], int] = now_ms,
        out: Callable[[str], None] = print,
    ):
        self.db = db
        self.categories = tuple(categories)
        self.retention_days = retention_days
        self.clock = clock
        self.out = out

    def cutoff(self) -> int:
        return self.clock() - self.retention_days * DAY_MS

    async def run(self) -> RetentionReport:
        """Run one cleanup pass. The cutoff is computed once for all categories."""
        report = RetentionReport(cutoff_ms=self.cutoff())
        cutoff_iso = datetime.fromtimestamp(report.cutoff_ms / 1000, tz=timezone.utc).isoformat()
        self.out(f"Deleting records older than {cutoff_iso}")

        for category in self.categories:
            report.results.append(await self.clean_category(category, report.cutoff_ms))

        return report

    async def clean_category(self, category: str, cutoff_ms: int) -> CategoryResult:
        result = CategoryResult(category=category)
        path = f"{SENSORS_ROOT}/{category}"
        self.out(f"\nProcessing sensor: {category}")

        try:
            data = await self.db.get(path)
            if not data or not isinstance(data, dict):
                self.out(f"  No data found for {category}")
                return result

            result.found = len(data)
            self.out(f"  Found {result.found} records")

            for record_id, record in data.items():
                if is_expired(record, cutoff_ms):
                    await self.db.delete(f"{path}/{record_id}")
                    result.deleted += 1

            self.out(f"  Deleted {result.deleted} old records from {category}")
            logger.debug(f"{category}: deleted {result.deleted}/{result.found}")
        except Exception as e:
            logger.error(f"Error processing {category}: {e}")
            result.error = str(e) or e.__class__.__name__

        return result
