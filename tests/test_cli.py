"""Tests for the magneto CLI."""

import json
from pathlib import Path

from typer.testing import CliRunner

from magneto import __version__
from magneto.cli import app

runner = CliRunner()


def stdin_events(*records: dict) -> str:
    return "".join(json.dumps(r) + "\n" for r in records)


class TestCLI:
    """Tests for the command line entry point."""

    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_renders_until_eof(self, tmp_path: Path, make_event, proc_stat_text) -> None:
        """Test stats piped on stdin are rendered and the command exits at EOF."""
        stat = tmp_path / "stat"
        stat.write_text(proc_stat_text(10, 0, 10, 80, 0, 0, 0))
        result = runner.invoke(
            app,
            ["--interval", "0.1", "--exit-on-eof", "--proc-stat", str(stat)],
            input=stdin_events(
                {"type": "oom", "id": "abc123"},
                make_event(memory_usage=300, memory_cache=100, memory_limit=1000, pids=7),
            ),
        )
        assert result.exit_code == 0, result.output
        assert "MEM USAGE / LIMIT" in result.output
        assert "20.00%" in result.output

    def test_config_file_with_override(self, tmp_path: Path, make_event, proc_stat_text) -> None:
        """Test CLI flags override values from the config file."""
        stat = tmp_path / "stat"
        stat.write_text(proc_stat_text(1, 1, 1, 1, 1, 1, 1))
        config = tmp_path / "magneto.yaml"
        config.write_text(f"interval_seconds: 60\nproc_stat_path: {stat}\nexit_on_eof: true\n")
        result = runner.invoke(
            app,
            ["--config", str(config), "--interval", "0.1"],
            input=stdin_events(make_event(pids=3)),
        )
        assert result.exit_code == 0, result.output
        assert "PIDS" in result.output

    def test_missing_config(self, tmp_path: Path) -> None:
        """Test an unreadable config is a startup failure."""
        result = runner.invoke(app, ["--config", str(tmp_path / "missing.yaml")], input="")
        assert result.exit_code == 1
        assert "Error loading config" in result.output

    def test_invalid_interval(self) -> None:
        """Test out-of-range values are rejected at startup."""
        result = runner.invoke(app, ["--interval", "0"], input="")
        assert result.exit_code == 1
        assert "Error loading config" in result.output
