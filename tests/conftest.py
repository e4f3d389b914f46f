"""Shared fixtures for magneto tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest


def build_stats_data(
    total_usage: int = 0,
    percpu: int = 4,
    memory_usage: int = 0,
    memory_cache: int = 0,
    memory_limit: int = 0,
    blkio: list[tuple[str, int]] | None = None,
    pids: int = 0,
    interfaces: list[tuple[int, int]] | None = None,
) -> dict[str, Any]:
    """Build a `runc events` stats payload."""
    return {
        "cpu": {"usage": {"total": total_usage, "percpu": [0] * percpu}},
        "memory": {"cache": memory_cache, "usage": {"usage": memory_usage, "limit": memory_limit}},
        "pids": {"current": pids},
        "blkio": {
            "ioServiceBytesRecursive": [
                {"major": 8, "minor": 0, "op": op, "value": value} for op, value in blkio or []
            ]
        },
        "network_interfaces": [
            {"name": f"eth{i}", "rx_bytes": rx, "tx_bytes": tx}
            for i, (rx, tx) in enumerate(interfaces or [])
        ],
    }


def build_event(event_type: str = "stats", container_id: str = "abc123", **kwargs: Any) -> dict:
    """Build a full event record."""
    return {"type": event_type, "id": container_id, "data": build_stats_data(**kwargs)}


def build_proc_stat_text(*cpu_fields: int) -> str:
    fields = " ".join(str(v) for v in cpu_fields)
    return f"cpu  {fields}\ncpu0 {fields}\nintr 12345\nctxt 678\n"


@pytest.fixture
def proc_stat(tmp_path: Path):
    """Write a /proc/stat look-alike and return a setter for its cpu line."""
    path = tmp_path / "stat"

    def write(*cpu_fields: int) -> Path:
        path.write_text(build_proc_stat_text(*cpu_fields))
        return path

    write(0, 0, 0, 0, 0, 0, 0, 0, 0, 0)
    return write


@pytest.fixture
def make_stats_data():
    """Builder for `runc events` stats payloads."""
    return build_stats_data


@pytest.fixture
def make_event():
    """Builder for full event records."""
    return build_event


@pytest.fixture
def proc_stat_text():
    """Builder for /proc/stat contents."""
    return build_proc_stat_text
