"""Human-readable byte sizes for the stats table."""

from __future__ import annotations

DECIMAL_UNITS = ("B", "kB", "MB", "GB", "TB", "PB", "EB", "ZB", "YB")
BINARY_UNITS = ("B", "KiB", "MiB", "GiB", "TiB", "PiB", "EiB", "ZiB", "YiB")


def _scale(size: float, base: float, units: tuple[str, ...]) -> tuple[float, str]:
    i = 0
    while size >= base and i < len(units) - 1:
        size /= base
        i += 1
    return size, units[i]


def bytes_size(size: float) -> str:
    """Format a size with binary units and 4 significant digits (e.g. "1.5MiB")."""
    value, unit = _scale(size, 1024.0, BINARY_UNITS)
    return f"{value:.4g}{unit}"


def human_size(size: float, precision: int = 3) -> str:
    """Format a size with decimal units (e.g. "1.5MB").

    Args:
        size: Size in bytes
        precision: Significant digits
    """
    value, unit = _scale(size, 1000.0, DECIMAL_UNITS)
    return f"{value:.{precision}g}{unit}"


def format_percent(value: float) -> str:
    return f"{value:.2f}%"
