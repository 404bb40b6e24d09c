"""
Terminal Monitor for the Sensor Dashboard
Full-screen terminal interface using Rich library.
Renders either the Home overview or a single category page from live
database subscriptions.
"""

import asyncio
import logging
from datetime import datetime
from typing import Callable, Dict, List, Optional, Sequence

from rich.align import Align
from rich.console import Console, Group, RenderableType
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from sensorboard.sensors.categories import DASHBOARD_ORDER, Scaling, get_spec
from sensorboard.sensors.normalization import describe, gradient_color
from sensorboard.shared.database import Query, RealtimeDatabase, Subscription
from sensorboard.shared.errors import DatabaseError

from .config import HOME_PAGE, DashboardConfig
from .status import format_clock, format_datetime
from .views import AnalogView, EventView, View, build_view

logger = logging.getLogger(__name__)

SPARK_CHARS = "▁▂▃▄▅▆▇█"


def now_ms() -> int:
    return int(datetime.now().timestamp() * 1000)


def sparkline(values: Sequence[float], lo: Optional[float] = None, hi: Optional[float] = None) -> str:
    """Render values as a row of block characters scaled between lo and hi."""
    if not values:
        return ""
    lo = min(values) if lo is None else lo
    hi = max(values) if hi is None else hi
    span = hi - lo
    top = len(SPARK_CHARS) - 1
    chars = []
    for value in values:
        level = round((value - lo) / span * top) if span else top // 2
        chars.append(SPARK_CHARS[min(max(level, 0), top)])
    return "".join(chars)


def format_value(value: Optional[float], unit: str) -> str:
    if value is None:
        return "---"
    return f"{value:.1f}{unit}"


class TerminalMonitor:
    """Terminal-based dashboard using Rich.

    Holds one subscription per rendered category. Each delivered snapshot
    replaces the stored one; views are re-derived on every render.
    """

    def __init__(
        self,
        config: DashboardConfig,
        db: RealtimeDatabase,
        console: Optional[Console] = None,
        clock: Callable[[], int] = now_ms,
    ):
        self.config = config
        self.db = db
        self.console = console or Console()
        self.clock = clock

        # Latest snapshot per category; absent until the first delivery
        self.snapshots: Dict[str, dict] = {}
        self._subscriptions: Dict[str, Subscription] = {}
        self._tasks: List[asyncio.Task] = []
        self._running = False

    @property
    def is_home(self) -> bool:
        return self.config.page == HOME_PAGE

    def queries(self) -> Dict[str, Query]:
        """Queries needed by the current page, keyed by category."""
        if not self.is_home:
            spec = get_spec(self.config.page)
            limit = self.config.event_limit if spec.is_event else self.config.detail_limit
            return {spec.name: Query(spec.path, limit=limit)}

        queries = {}
        for category in DASHBOARD_ORDER:
            spec = get_spec(category)
            limit = self.config.last_event_limit if spec.is_event else self.config.preview_limit
            queries[category] = Query(spec.path, limit=limit)
        return queries

    def apply_snapshot(self, category: str, snapshot: Optional[dict]) -> None:
        """Replace the stored snapshot for a category."""
        self.snapshots[category] = snapshot or {}

    async def _watch(self, category: str, query: Query) -> None:
        """Keep one category's snapshot current, reopening the stream on failure."""
        while self._running:
            subscription = self.db.subscribe(query)
            self._subscriptions[category] = subscription
            try:
                async for snapshot in subscription:
                    self.apply_snapshot(category, snapshot)
            except DatabaseError as e:
                logger.warning(f"Subscription to {query.path} failed: {e}")

            if subscription.cancelled:
                return
            await asyncio.sleep(self.config.refresh_interval)

    def view(self, category: str) -> Optional[View]:
        """Current view for a category, or None while still loading."""
        if category not in self.snapshots:
            return None
        return build_view(
            category,
            self.snapshots[category],
            self.clock(),
            self.config.live_threshold_seconds,
        )

    def render(self) -> Layout:
        """Build the full layout for the current page."""
        if self.is_home:
            return self._create_home_layout()
        return self._create_detail_layout(self.config.page)

    def _create_header(self, title: str, accent: str) -> Panel:
        timestamp = datetime.fromtimestamp(self.clock() / 1000).strftime("%Y-%m-%d %H:%M:%S")
        header_text = Text()
        header_text.append(title, style=f"bold {accent}")
        header_text.append(f" - {timestamp}", style="white")
        return Panel(Align.center(header_text), style=accent)

    def _create_home_layout(self) -> Layout:
        layout = Layout()
        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="row0"),
            Layout(name="row1"),
            Layout(name="row2"),
        )
        layout["header"].update(self._create_header("SENSOR DASHBOARD", "#059669"))

        for row in range(3):
            categories = DASHBOARD_ORDER[row * 3:row * 3 + 3]
            layout[f"row{row}"].split_row(*[Layout(name=c) for c in categories])
            for category in categories:
                layout[category].update(self._create_preview_panel(category))

        return layout

    def _create_preview_panel(self, category: str) -> Panel:
        spec = get_spec(category)
        view = self.view(category)

        if view is None:
            body: RenderableType = Text("Loading...", style="dim")
        elif not view.has_data:
            body = Text("No data yet", style="dim")
        elif isinstance(view, EventView):
            body = Text()
            body.append("Last event\n", style="white")
            body.append(view.relative_time, style=f"bold {spec.accent}")
        else:
            body = self._create_analog_summary(view, spark=True)

        return Panel(body, title=spec.title.upper(), border_style=spec.accent)

    def _create_analog_summary(self, view: AnalogView, spark: bool = False) -> Text:
        text = Text()
        text.append(format_value(view.current, view.unit), style=f"bold {view.color}")
        text.append(f"  {view.description}\n", style="white")
        text.append(view.status_text, style="green" if view.status_text == "Live" else "yellow")

        if view.alert:
            label = "FIRE ALERT" if view.category == "flame" else "ALERT"
            text.append(f"\n{label}", style="bold white on red")
        elif view.warm:
            text.append("\nWarm", style="bold orange1")

        if spark:
            spec = get_spec(view.category)
            bounds = (None, None) if spec.scaling is Scaling.PASSTHROUGH else (0.0, 100.0)
            text.append("\n" + sparkline(view.values(), *bounds), style=view.accent)
        return text

    def _create_detail_layout(self, category: str) -> Layout:
        spec = get_spec(category)
        view = self.view(category)

        layout = Layout()
        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="top", size=8),
            Layout(name="history"),
        )
        layout["header"].update(self._create_header(f"{spec.title.upper()} SENSOR", spec.accent))

        if view is None or not view.has_data:
            message = "Loading..." if view is None else "No data yet"
            layout["top"].update(Panel(Text(message, style="dim"), title="CURRENT", border_style=spec.accent))
            layout["history"].update(Panel(Text(""), title="HISTORY", border_style=spec.accent))
            return layout

        if isinstance(view, EventView):
            layout["top"].update(self._create_last_event_panel(view))
            layout["history"].update(self._create_event_table(view))
        else:
            layout["top"].split_row(Layout(name="current"), Layout(name="stats"))
            layout["current"].update(
                Panel(self._create_analog_summary(view), title="CURRENT", border_style=spec.accent)
            )
            layout["stats"].update(self._create_stats_panel(view))
            layout["history"].update(self._create_history_table(view))

        return layout

    def _create_stats_panel(self, view: AnalogView) -> Panel:
        table = Table(show_header=False, box=None)
        table.add_column("Stat", style="white", width=10)
        table.add_column("Value", style="bold white")
        table.add_row("Minimum", format_value(view.minimum, view.unit))
        table.add_row("Average", format_value(view.average, view.unit))
        table.add_row("Maximum", format_value(view.maximum, view.unit))
        return Panel(table, title="STATS", border_style=view.accent)

    def _create_history_table(self, view: AnalogView) -> Panel:
        table = Table(show_header=True, header_style=f"bold {view.accent}", box=None)
        table.add_column("Time", style="white", width=14)
        table.add_column("Value", width=10)
        table.add_column("Level", style="white")

        for timestamp, value in reversed(view.history):
            table.add_row(
                format_clock(timestamp),
                Text(format_value(value, view.unit), style=gradient_color(view.category, value)),
                describe(view.category, value),
            )

        spark = Text(sparkline(view.values()), style=view.accent)
        return Panel(Group(spark, table), title="HISTORY", border_style=view.accent)

    def _create_last_event_panel(self, view: EventView) -> Panel:
        text = Text()
        text.append("Last event: ", style="white")
        text.append(view.relative_time, style=f"bold {view.accent}")
        if view.last_timestamp is not None:
            text.append(f"\n{format_datetime(view.last_timestamp)}", style="white")
        text.append(f"\n{len(view.events)} recent events", style="dim")
        return Panel(text, title="LAST EVENT", border_style=view.accent)

    def _create_event_table(self, view: EventView) -> Panel:
        table = Table(show_header=True, header_style=f"bold {view.accent}", box=None)
        table.add_column("#", style="dim", width=4)
        table.add_column("When", style="white", width=22)
        table.add_column("Gap", style="white")

        for index, (timestamp, gap) in enumerate(zip(view.events, view.gaps), start=1):
            table.add_row(str(index), format_datetime(timestamp), gap or "")

        return Panel(table, title="EVENT HISTORY", border_style=view.accent)

    async def run_async(self) -> None:
        """Open subscriptions and redraw until cancelled."""
        self._running = True
        self._tasks = [
            asyncio.create_task(self._watch(category, query))
            for category, query in self.queries().items()
        ]
        logger.info(f"Dashboard page '{self.config.page}' watching {len(self._tasks)} categories")

        try:
            with Live(self.render(), console=self.console, auto_refresh=False, screen=True) as live:
                while self._running:
                    live.update(self.render(), refresh=True)
                    await asyncio.sleep(self.config.refresh_interval)
        finally:
            await self.stop()

    async def stop(self) -> None:
        """Cancel every subscription and watcher task."""
        self._running = False
        for subscription in self._subscriptions.values():
            subscription.cancel()
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._subscriptions.clear()
        self._tasks = []

    def run(self) -> None:
        """Run the dashboard until interrupted, then close the database."""

        async def _run() -> None:
            try:
                await self.run_async()
            finally:
                await self.db.close()

        try:
            asyncio.run(_run())
        except KeyboardInterrupt:
            logger.info("Dashboard stopped")
