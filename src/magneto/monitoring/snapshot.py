"""Lock-guarded handoff of the latest metrics from collector to renderer."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from magneto.monitoring.base import DerivedMetrics


@dataclass(frozen=True)
class SnapshotView:
    """Read-only copy of the snapshot at one instant."""

    metrics: DerivedMetrics
    error: Exception | None = None
    # Monotonic time of the last metrics write, None before the first one
    updated_at: float | None = None
    stale: bool = False


class SharedSnapshot:
    """Latest derived metrics plus an optional last error.

    The collector is the only writer; any number of readers may call
    `read()`. Metrics records are immutable and swapped under the lock, so a
    reader sees either the previous record or the new one, never a mix.

    With `stale_after_seconds` set, reads return zeroed metrics once no
    write has happened for that long. Reading never changes stored state.
    """

    def __init__(
        self,
        stale_after_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._lock = threading.Lock()
        self._metrics = DerivedMetrics()
        self._error: Exception | None = None
        self._updated_at: float | None = None
        self._stale_after = stale_after_seconds
        self._clock = clock

    def write(self, metrics: DerivedMetrics, error: Exception | None = None) -> None:
        """Publish new metrics and set (or clear) the error in one step."""
        now = self._clock()
        with self._lock:
            self._metrics = metrics
            self._error = error
            self._updated_at = now

    def set_error(self, error: Exception | None) -> None:
        """Record an error, leaving the last metrics untouched."""
        with self._lock:
            self._error = error

    def read(self) -> SnapshotView:
        with self._lock:
            metrics = self._metrics
            error = self._error
            updated_at = self._updated_at

        stale = self._is_stale(updated_at)
        if stale:
            metrics = DerivedMetrics()
        return SnapshotView(metrics=metrics, error=error, updated_at=updated_at, stale=stale)

    def _is_stale(self, updated_at: float | None) -> bool:
        if self._stale_after is None or updated_at is None:
            return False
        return self._clock() - updated_at > self._stale_after
