"""Collector - drives decoder, metrics computation and the shared snapshot.

The collector runs in a background thread for the lifetime of the process.
It blocks on the input stream, turns every stats event into derived metrics
and publishes them to the snapshot the renderer reads on its own schedule.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator

from magneto.core.errors import DecodeError, HostStatsUnavailable, ResourceLookupError
from magneto.core.schemas import Event
from magneto.monitoring.base import CollectorState, PreviousCounters, SampleResult
from magneto.monitoring.host_cpu import HostCPUSampler
from magneto.monitoring.limits import LimitLookup
from magneto.monitoring.metrics import compute
from magneto.monitoring.snapshot import SharedSnapshot

logger = logging.getLogger(__name__)


class Collector:
    """Consumes events and keeps the shared snapshot current.

    States:
    - RUNNING: pulling events; per-sample errors are recorded and skipped
    - TERMINATED: the input ended (cleanly or with an unrecoverable decode
      error); the snapshot keeps the last known metrics

    Example:
        ```python
        snapshot = SharedSnapshot()
        collector = Collector(RawEventDecoder(sys.stdin), snapshot, HostCPUSampler())
        collector.start()
        ```
    """

    def __init__(
        self,
        events: Iterator[Event],
        snapshot: SharedSnapshot,
        sampler: HostCPUSampler,
        limits: LimitLookup | None = None,
    ) -> None:
        """Initialize the collector.

        Args:
            events: Event iterator, normally a RawEventDecoder
            snapshot: Snapshot to publish into (the collector is its only writer)
            sampler: Host CPU time source
            limits: Optional resource-limit lookup for the memory percent
        """
        self._events = events
        self._snapshot = snapshot
        self._sampler = sampler
        self._limits = limits
        self._limit_cache: dict[str, int] = {}
        self._previous = PreviousCounters()
        self._state = CollectorState.RUNNING
        self._thread: threading.Thread | None = None
        self._last_error_message: str | None = None
        self.terminated = threading.Event()
        self.samples_processed = 0
        self.samples_skipped = 0
        self.errors = 0

    @property
    def state(self) -> CollectorState:
        return self._state

    @property
    def previous(self) -> PreviousCounters:
        return self._previous

    def start(self) -> None:
        """Run the collector in a daemon thread."""
        if self._thread is not None:
            logger.warning("Collector already running")
            return

        self._thread = threading.Thread(target=self.run, name="magneto-collector", daemon=True)
        self._thread.start()
        logger.debug("Started collector thread")

    def run(self) -> None:
        """Consume events until the input ends."""
        try:
            while True:
                try:
                    event = next(self._events)
                except StopIteration:
                    logger.info("Input stream closed, no more stats will arrive")
                    break
                except DecodeError as e:
                    self._record_error(e)
                    if e.terminal:
                        break
                    continue
                except OSError as e:
                    self._record_error(e)
                    break

                self._apply(self.step(event))
        finally:
            self._state = CollectorState.TERMINATED
            self.terminated.set()
            logger.debug(
                f"Collector terminated: {self.samples_processed} processed, "
                f"{self.samples_skipped} skipped, {self.errors} errors"
            )

    def step(self, event: Event) -> SampleResult:
        """Process one event, updating the retained counters on success.

        Non-stats events and samples that fail before metrics are computed
        leave the counters untouched.
        """
        if not event.is_stats:
            return SampleResult(skipped=True)

        try:
            stats = event.stats()
        except DecodeError as e:
            return SampleResult(error=e)

        try:
            host_cpu_total = self._sampler.sample()
        except HostStatsUnavailable as e:
            return SampleResult(error=e)

        memory_limit: int | None = None
        lookup_error: ResourceLookupError | None = None
        if self._limits is not None:
            try:
                memory_limit = self._memory_limit(event.id)
            except ResourceLookupError as e:
                memory_limit = 0
                lookup_error = e

        metrics, self._previous = compute(self._previous, host_cpu_total, stats, memory_limit)
        return SampleResult(metrics=metrics, error=lookup_error)

    def _memory_limit(self, container_id: str) -> int:
        if container_id not in self._limit_cache:
            self._limit_cache[container_id] = self._limits.memory_limit(container_id)
        return self._limit_cache[container_id]

    def _apply(self, result: SampleResult) -> None:
        if result.skipped:
            self.samples_skipped += 1
            return

        if result.metrics is None:
            self._record_error(result.error)
            return

        self.samples_processed += 1
        if result.error is not None:
            self._log_error(result.error)
        else:
            self._last_error_message = None
        self._snapshot.write(result.metrics, result.error)

    def _record_error(self, error: Exception | None) -> None:
        self._log_error(error)
        self._snapshot.set_error(error)

    def _log_error(self, error: Exception | None) -> None:
        if error is None:
            return
        self.errors += 1
        message = str(error)
        # Only log when the error changes, the renderer shows it every tick
        if message != self._last_error_message:
            logger.warning(f"{type(error).__name__}: {message}")
            self._last_error_message = message
