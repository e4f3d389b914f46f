"""Data types shared by the collector, the snapshot and the renderer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class PreviousCounters:
    """Cumulative counters retained from the last processed stats sample.

    Owned by the collector; both fields only move forward between samples.
    """

    total_cpu_ns: int = 0  # Subject CPU time
    host_cpu_ns: int = 0  # Host CPU time across all accounting fields


@dataclass(frozen=True)
class DerivedMetrics:
    """Point-in-time metrics derived from one stats sample.

    Frozen so a published record can be handed to readers without copying.
    """

    cpu_percent: float = 0.0
    # Memory (bytes), working set excludes page cache
    memory_bytes: float = 0.0
    memory_limit_bytes: float = 0.0
    memory_percent: float = 0.0
    # Network (bytes), summed across interfaces
    net_rx_bytes: float = 0.0
    net_tx_bytes: float = 0.0
    # Block I/O (bytes), summed across devices
    block_read_bytes: float = 0.0
    block_write_bytes: float = 0.0
    pids_current: int = 0


@dataclass(frozen=True)
class SampleResult:
    """Outcome of processing one event.

    `skipped` marks events that carry no stats. A result may carry both
    metrics and an error when the error does not invalidate the sample.
    """

    metrics: DerivedMetrics | None = None
    error: Exception | None = None
    skipped: bool = False


class CollectorState(str, Enum):
    RUNNING = "running"
    TERMINATED = "terminated"
