"""Shared constants for magneto.

Centralized constants to avoid duplication across the collector and renderer.
"""

from __future__ import annotations

from pathlib import Path

NANOSECONDS_PER_SECOND = 1_000_000_000

# Host CPU accounting source (see `man 5 proc`)
PROC_STAT_PATH = Path("/proc/stat")

# user, nice, system, idle, iowait, irq, softirq
HOST_CPU_FIELD_COUNT = 7

# Default runc state directory, holds <id>/state.json per container
RUNC_STATE_ROOT = Path("/run/runc")

# Only events of this type carry a stats payload
STATS_EVENT_TYPE = "stats"

DEFAULT_INTERVAL_SECONDS = 5.0

TABLE_HEADER = ("CPU %", "MEM USAGE / LIMIT", "MEM %", "NET I/O", "BLOCK I/O", "PIDS")
