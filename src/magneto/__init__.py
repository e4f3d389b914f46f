"""magneto - pipe runc events to a live container stats table."""

from __future__ import annotations

from magneto.core.config import MonitorConfig
from magneto.monitoring.base import DerivedMetrics, PreviousCounters
from magneto.monitoring.collector import Collector
from magneto.monitoring.snapshot import SharedSnapshot

__version__ = "0.1.0"

__all__ = [
    "Collector",
    "DerivedMetrics",
    "MonitorConfig",
    "PreviousCounters",
    "SharedSnapshot",
    "__version__",
]
