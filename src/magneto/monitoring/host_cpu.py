"""Host CPU time sampling from /proc/stat."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from magneto.core.constants import HOST_CPU_FIELD_COUNT, NANOSECONDS_PER_SECOND, PROC_STAT_PATH
from magneto.core.errors import HostStatsUnavailable

logger = logging.getLogger(__name__)


def get_clock_ticks() -> int:
    """Return the kernel's clock ticks per second (USER_HZ)."""
    try:
        ticks = os.sysconf("SC_CLK_TCK")
    except (ValueError, OSError):
        ticks = -1
    if ticks <= 0:
        logger.debug("Could not read SC_CLK_TCK, using default 100")
        return 100
    return ticks


class HostCPUSampler:
    """Reads cumulative host CPU time in nanoseconds.

    Looks for the aggregate `cpu` line of /proc/stat and sums its first
    seven fields (user, nice, system, idle, iowait, irq, softirq), scaled
    from clock ticks to nanoseconds. See `man 5 proc`.
    """

    def __init__(self, path: Path | str = PROC_STAT_PATH, clock_ticks: int | None = None) -> None:
        self._path = Path(path)
        self._clock_ticks = clock_ticks if clock_ticks is not None else get_clock_ticks()

    @property
    def path(self) -> Path:
        return self._path

    def sample(self) -> int:
        """Return the current host CPU total.

        Raises:
            HostStatsUnavailable: If the file cannot be read or the cpu line is malformed
        """
        try:
            with open(self._path, encoding="ascii") as f:
                for line in f:
                    fields = line.split()
                    if fields and fields[0] == "cpu":
                        return self._parse_cpu_fields(fields)
        except (OSError, UnicodeDecodeError) as e:
            raise HostStatsUnavailable(f"cannot read {self._path}: {e}") from e

        raise HostStatsUnavailable(f"invalid stat format: no cpu line in {self._path}")

    def _parse_cpu_fields(self, fields: list[str]) -> int:
        values = fields[1 : HOST_CPU_FIELD_COUNT + 1]
        if len(values) < HOST_CPU_FIELD_COUNT:
            raise HostStatsUnavailable(
                f"invalid number of cpu fields: expected {HOST_CPU_FIELD_COUNT}, got {len(values)}"
            )

        total_ticks = 0
        for value in values:
            if not value.isdigit():
                raise HostStatsUnavailable(f"unable to convert value {value!r} to an unsigned int")
            total_ticks += int(value)

        return total_ticks * NANOSECONDS_PER_SECOND // self._clock_ticks
