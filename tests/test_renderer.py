"""Tests for table rendering and byte formatting."""

import io
import signal
import threading
from unittest.mock import MagicMock

import pytest
from rich.console import Console

from magneto.cli import _handle_signal
from magneto.core.errors import HostStatsUnavailable, ResourceLookupError
from magneto.monitoring.base import DerivedMetrics
from magneto.monitoring.snapshot import SharedSnapshot, SnapshotView
from magneto.render.formatting import bytes_size, human_size
from magneto.render.renderer import Renderer, build_table, format_row

METRICS = DerivedMetrics(
    cpu_percent=12.3456,
    memory_bytes=1.5 * 1024 * 1024,
    memory_limit_bytes=1024**3,
    memory_percent=0.146,
    net_rx_bytes=1500,
    net_tx_bytes=250,
    block_read_bytes=2_000_000,
    block_write_bytes=0,
    pids_current=7,
)


def render_text(view: SnapshotView) -> str:
    console = Console(file=io.StringIO(), width=200)
    console.print(build_table(view))
    return console.file.getvalue()


class TestFormatting:
    """Tests for byte humanization."""

    def test_bytes_size_binary(self) -> None:
        assert bytes_size(0) == "0B"
        assert bytes_size(200) == "200B"
        assert bytes_size(1.5 * 1024 * 1024) == "1.5MiB"
        assert bytes_size(1024**3) == "1GiB"

    def test_human_size_decimal(self) -> None:
        assert human_size(999) == "999B"
        assert human_size(1500) == "1.5kB"
        assert human_size(1_234_567) == "1.23MB"
        assert human_size(2_000_000) == "2MB"


class TestBuildTable:
    """Tests for the stats table."""

    def test_row_cells(self) -> None:
        """Test cell formatting in header order."""
        assert format_row(METRICS) == (
            "12.35%",
            "1.5MiB / 1GiB",
            "0.15%",
            "1.5kB / 250B",
            "2MB / 0B",
            "7",
        )

    def test_header_and_row(self) -> None:
        """Test the rendered table carries the header and the data row."""
        text = render_text(SnapshotView(metrics=METRICS, updated_at=1.0))
        for column in ("CPU %", "MEM USAGE / LIMIT", "MEM %", "NET I/O", "BLOCK I/O", "PIDS"):
            assert column in text
        assert "1.5MiB / 1GiB" in text
        assert "12.35%" in text

    def test_error_replaces_row(self) -> None:
        """Test a sample error hides the data row for that tick."""
        view = SnapshotView(metrics=METRICS, error=HostStatsUnavailable("no cpu line"))
        text = render_text(view)
        assert "no cpu line" in text
        assert "12.35%" not in text
        assert "CPU %" in text

    def test_lookup_error_keeps_row(self) -> None:
        """Test a lookup error is shown alongside the data."""
        view = SnapshotView(metrics=METRICS, error=ResourceLookupError("no state.json"))
        text = render_text(view)
        assert "no state.json" in text
        assert "12.35%" in text

    def test_no_data_yet(self) -> None:
        """Test the waiting indication before the first sample."""
        text = render_text(SnapshotView(metrics=DerivedMetrics()))
        assert "waiting for stats" in text

    def test_stale(self) -> None:
        """Test the stale indication after the silence window."""
        text = render_text(SnapshotView(metrics=DerivedMetrics(), updated_at=1.0, stale=True))
        assert "metrics reset" in text


class TestRenderer:
    """Tests for the timer loop."""

    def test_render_once(self) -> None:
        """Test a tick prints the current snapshot."""
        snapshot = SharedSnapshot()
        snapshot.write(METRICS)
        console = Console(file=io.StringIO(), width=200)
        renderer = Renderer(snapshot, console=console, interval_seconds=0.01)

        renderer.render_once()

        assert "12.35%" in console.file.getvalue()
        assert renderer.ticks == 1

    def test_error_row_shows_for_one_tick(self) -> None:
        """Test an error replaces the row once, then the metrics return with it as caption."""
        snapshot = SharedSnapshot()
        snapshot.write(METRICS)
        snapshot.set_error(HostStatsUnavailable("no cpu line"))
        console = Console(file=io.StringIO(), width=200)
        renderer = Renderer(snapshot, console=console, interval_seconds=0.01)

        renderer.render_once()
        first = console.file.getvalue()
        assert "no cpu line" in first
        assert "12.35%" not in first

        console.file.seek(0)
        console.file.truncate()
        renderer.render_once()
        second = console.file.getvalue()
        assert "no cpu line" in second
        assert "12.35%" in second

        snapshot.set_error(HostStatsUnavailable("still no cpu line"))
        console.file.seek(0)
        console.file.truncate()
        renderer.render_once()
        assert "12.35%" not in console.file.getvalue()

    def test_signal_during_tick_exits(self) -> None:
        """Test the signal handler's exit is not swallowed by a render tick."""
        console = MagicMock()
        console.print.side_effect = lambda *args, **kwargs: _handle_signal(signal.SIGINT, None)
        renderer = Renderer(SharedSnapshot(), console=console, interval_seconds=0.01)

        with pytest.raises(SystemExit) as exc_info:
            renderer.run(threading.Event())

        assert exc_info.value.code == 0
        assert renderer.ticks == 0

    def test_run_renders_final_tick_when_done(self) -> None:
        """Test the loop renders once more after the input ends, then returns."""
        done = threading.Event()
        done.set()
        console = Console(file=io.StringIO(), width=200)
        renderer = Renderer(SharedSnapshot(), console=console, interval_seconds=0.01)

        renderer.run(threading.Event(), done=done)

        assert renderer.ticks == 1
        assert "CPU %" in console.file.getvalue()

    def test_failed_tick_does_not_stop_loop(self) -> None:
        """Test an exception in one tick is logged and the next tick still runs."""
        stop = threading.Event()
        calls = []

        def read() -> SnapshotView:
            calls.append(1)
            if len(calls) == 1:
                raise RuntimeError("boom")
            stop.set()
            return SnapshotView(metrics=METRICS)

        snapshot = MagicMock()
        snapshot.read.side_effect = read
        console = Console(file=io.StringIO(), width=200)
        renderer = Renderer(snapshot, console=console, interval_seconds=0.01)

        renderer.run(stop)

        assert len(calls) == 2
        assert renderer.ticks == 1
