"""Monitoring module - turns a runc event stream into live container metrics.

Components:
- RawEventDecoder: incremental JSON event decoding
- HostCPUSampler: host CPU time from /proc/stat
- compute: pure metric derivation from cumulative counters
- SharedSnapshot: lock-guarded handoff to the renderer
- Collector: the driving loop
"""

from __future__ import annotations

from magneto.monitoring.base import (
    CollectorState,
    DerivedMetrics,
    PreviousCounters,
    SampleResult,
)
from magneto.monitoring.collector import Collector
from magneto.monitoring.decoder import RawEventDecoder
from magneto.monitoring.host_cpu import HostCPUSampler
from magneto.monitoring.limits import DockerLimits, RuncStateLimits, build_limit_lookup
from magneto.monitoring.metrics import compute
from magneto.monitoring.snapshot import SharedSnapshot, SnapshotView

__all__ = [
    "Collector",
    "CollectorState",
    "DerivedMetrics",
    "DockerLimits",
    "HostCPUSampler",
    "PreviousCounters",
    "RawEventDecoder",
    "RuncStateLimits",
    "SampleResult",
    "SharedSnapshot",
    "SnapshotView",
    "build_limit_lookup",
    "compute",
]
