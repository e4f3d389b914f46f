"""Core module - configuration, schemas and errors."""

from __future__ import annotations

from magneto.core.config import LimitSource, MonitorConfig, load_config
from magneto.core.errors import (
    DecodeError,
    HostStatsUnavailable,
    MagnetoError,
    ResourceLookupError,
)
from magneto.core.schemas import BlkioEntry, BlkioOp, Event, NetworkInterface, Stats

__all__ = [
    "BlkioEntry",
    "BlkioOp",
    "DecodeError",
    "Event",
    "HostStatsUnavailable",
    "LimitSource",
    "load_config",
    "MagnetoError",
    "MonitorConfig",
    "NetworkInterface",
    "ResourceLookupError",
    "Stats",
]
