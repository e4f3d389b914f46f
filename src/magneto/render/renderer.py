"""Periodic rendering of the shared snapshot as a table."""

from __future__ import annotations

import logging
import threading

from rich.console import Console
from rich.table import Table
from rich.text import Text

from magneto.core.constants import DEFAULT_INTERVAL_SECONDS, TABLE_HEADER
from magneto.core.errors import MagnetoError
from magneto.monitoring.base import DerivedMetrics
from magneto.monitoring.snapshot import SharedSnapshot, SnapshotView
from magneto.render.formatting import bytes_size, format_percent, human_size

logger = logging.getLogger(__name__)


def format_row(metrics: DerivedMetrics) -> tuple[str, ...]:
    """Format one metrics record as table cells, in header order."""
    return (
        format_percent(metrics.cpu_percent),
        f"{bytes_size(metrics.memory_bytes)} / {bytes_size(metrics.memory_limit_bytes)}",
        format_percent(metrics.memory_percent),
        f"{human_size(metrics.net_rx_bytes)} / {human_size(metrics.net_tx_bytes)}",
        f"{human_size(metrics.block_read_bytes)} / {human_size(metrics.block_write_bytes)}",
        str(metrics.pids_current),
    )


def replaces_row(error: Exception) -> bool:
    """Whether an error hides the data row rather than annotating it."""
    if isinstance(error, MagnetoError):
        return error.replaces_row
    return True


def build_table(view: SnapshotView, error_row: bool = True) -> Table:
    """Build the stats table for one snapshot view.

    With `error_row`, an error that invalidates the sample replaces the data
    row with its text. Otherwise the row shows the last known metrics and
    the error becomes the caption, as lookup errors always do.
    """
    table = Table(box=None, header_style="bold", pad_edge=False, caption_justify="left")
    for name in TABLE_HEADER:
        table.add_column(name, no_wrap=True)

    error = view.error
    if error is not None and error_row and replaces_row(error):
        table.add_row(Text(str(error), style="red"))
        return table

    table.add_row(*format_row(view.metrics))
    if error is not None:
        table.caption = Text(str(error), style="yellow")
    elif view.stale:
        table.caption = Text("no stats received recently, metrics reset", style="dim")
    elif view.updated_at is None:
        table.caption = Text("waiting for stats...", style="dim")
    return table


class Renderer:
    """Redraws the stats table from the snapshot on a fixed interval.

    The renderer only reads the snapshot. An error replaces the data row on
    the first tick that sees it; later ticks show the last known metrics with
    the error as the caption. A failed tick is logged and the next tick
    proceeds as usual.
    """

    def __init__(
        self,
        snapshot: SharedSnapshot,
        console: Console | None = None,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
    ) -> None:
        self._snapshot = snapshot
        self._console = console or Console()
        self._interval = interval_seconds
        self.ticks = 0
        self._shown_error: Exception | None = None

    def render_once(self) -> None:
        """Clear the screen, home the cursor and print the current table."""
        view = self._snapshot.read()
        table = build_table(view, error_row=view.error is not self._shown_error)
        if view.error is not None:
            self._shown_error = view.error
        # No-op when stdout is not a terminal
        self._console.clear()
        self._console.print(table)
        self.ticks += 1

    def run(self, stop: threading.Event, done: threading.Event | None = None) -> None:
        """Render every interval until `stop` is set.

        Args:
            stop: Ends the loop when set
            done: If given, render once more after it is set and then return
        """
        while not stop.wait(self._interval):
            finished = done is not None and done.is_set()
            try:
                self.render_once()
            except Exception as e:
                logger.error(f"Failed to render stats: {e}")
            if finished:
                break
