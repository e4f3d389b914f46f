"""CLI for magneto.

Reads `runc events` from stdin and redraws a stats table on an interval:

    runc events <container-id> | magneto
"""

from __future__ import annotations

import signal
import sys
import threading
from pathlib import Path
from typing import Any

import typer
from rich.console import Console

from magneto import __version__
from magneto.core.config import LimitSource, MonitorConfig, load_config
from magneto.monitoring.collector import Collector
from magneto.monitoring.decoder import RawEventDecoder
from magneto.monitoring.host_cpu import HostCPUSampler
from magneto.monitoring.limits import build_limit_lookup
from magneto.monitoring.snapshot import SharedSnapshot
from magneto.render.renderer import Renderer
from magneto.utils.logging import get_logger, setup_logging

app = typer.Typer(
    name="magneto",
    help="Pipe runc events to a stats TUI (Text User Interface)",
    add_completion=False,
)

console = Console()
logger = get_logger(__name__)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"magneto {__version__}")
        raise typer.Exit()


def _handle_signal(signum: int, frame: Any) -> None:
    logger.info(f"Received {signal.Signals(signum).name}, exiting.")
    # SystemExit is not an Exception, so a render tick in flight can't swallow it
    raise SystemExit(0)


def resolve_config(config_path: Path | None, overrides: dict[str, Any]) -> MonitorConfig:
    """Load the config file (if any) and apply CLI overrides on top.

    Raises:
        FileNotFoundError: If the config file doesn't exist
        ValueError: If the file or an override is invalid
    """
    base = load_config(config_path) if config_path is not None else MonitorConfig()
    data = base.model_dump()
    data.update({k: v for k, v in overrides.items() if v is not None})
    return MonitorConfig.model_validate(data)


@app.command()
def main(
    config: Path | None = typer.Option(
        None, "--config", "-c", help="Path to configuration file (YAML/JSON)"
    ),
    interval: float | None = typer.Option(
        None, "--interval", "-i", help="Seconds between table redraws (default 5)"
    ),
    stale_after: float | None = typer.Option(
        None, "--stale-after", help="Reset displayed metrics after this many silent seconds"
    ),
    proc_stat: Path | None = typer.Option(
        None, "--proc-stat", help="Host CPU accounting file (default /proc/stat)"
    ),
    limits: LimitSource | None = typer.Option(
        None, "--limits", help="Where to look up container memory limits"
    ),
    state_root: Path | None = typer.Option(
        None, "--state-root", help="runc state directory (default /run/runc)"
    ),
    exit_on_eof: bool = typer.Option(
        False, "--exit-on-eof", help="Exit after a final redraw once the input ends"
    ),
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug logging"),
    log_level: str = typer.Option("WARNING", "--log-level", "-l", help="Logging level"),
    log_file: Path | None = typer.Option(
        None, "--log-file", help="Write logs to file in addition to stderr"
    ),
    json_logs: bool = typer.Option(False, "--json-logs", help="Output logs in JSON format"),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version"
    ),
) -> None:
    """Display live stats for the container whose events arrive on stdin."""
    setup_logging(
        level="DEBUG" if debug else log_level,
        log_file=log_file,
        json_format=json_logs,
        rich_console=not json_logs,
    )

    try:
        monitor_config = resolve_config(
            config,
            {
                "interval_seconds": interval,
                "stale_after_seconds": stale_after,
                "proc_stat_path": proc_stat,
                "limit_source": limits,
                "state_root": state_root,
                "exit_on_eof": exit_on_eof or None,
            },
        )
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error loading config: {e}[/]")
        raise typer.Exit(1) from e

    if sys.stdin is None:
        console.print("[bold red]No input stream: stdin is closed[/]")
        raise typer.Exit(1)

    logger.debug(f"Configuration: {monitor_config.model_dump()}")

    snapshot = SharedSnapshot(stale_after_seconds=monitor_config.stale_after_seconds)
    collector = Collector(
        RawEventDecoder(sys.stdin),
        snapshot,
        HostCPUSampler(monitor_config.proc_stat_path),
        limits=build_limit_lookup(monitor_config.limit_source, monitor_config.state_root),
    )
    renderer = Renderer(snapshot, console=console, interval_seconds=monitor_config.interval_seconds)

    previous_handlers = {
        sig: signal.signal(sig, _handle_signal) for sig in (signal.SIGINT, signal.SIGTERM)
    }
    try:
        collector.start()
        renderer.run(
            threading.Event(),
            done=collector.terminated if monitor_config.exit_on_eof else None,
        )
    finally:
        for sig, handler in previous_handlers.items():
            signal.signal(sig, handler)


if __name__ == "__main__":
    app()
