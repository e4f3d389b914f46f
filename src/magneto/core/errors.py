"""Error taxonomy for the collector.

All of these are per-sample failures surfaced through the shared snapshot;
only end-of-input stops the collector.
"""

from __future__ import annotations


class MagnetoError(Exception):
    """Base class for errors recorded in the shared snapshot."""

    # Whether the renderer replaces the data row with the error text
    replaces_row: bool = True


class DecodeError(MagnetoError):
    """Malformed or truncated input record."""

    def __init__(self, message: str, *, terminal: bool = False) -> None:
        super().__init__(message)
        self.terminal = terminal


class HostStatsUnavailable(MagnetoError):
    """Host CPU accounting source missing or corrupt."""


class ResourceLookupError(MagnetoError):
    """Resource limits for a subject could not be resolved."""

    replaces_row = False
