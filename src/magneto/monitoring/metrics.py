"""Derivation of point-in-time metrics from cumulative counters.

Everything here is pure: the same inputs always give the same outputs and
no state is kept between calls. The collector owns the previous counters.
"""

from __future__ import annotations

from magneto.core.schemas import BlkioEntry, BlkioOp, MemoryStats, NetworkInterface, Stats
from magneto.monitoring.base import DerivedMetrics, PreviousCounters


def calculate_cpu_percent(
    previous: PreviousCounters, host_cpu_total: int, total_usage_ns: int, per_cpu_count: int
) -> float:
    """Calculate CPU utilization between two samples.

    Deltas are clamped at zero so a counter reset never yields a negative
    or overflowed figure. Without a previous host reading there is no
    interval to measure over, so the first sample always reports 0.

    Args:
        previous: Counters retained from the previous sample
        host_cpu_total: Current host CPU time in nanoseconds
        total_usage_ns: Current subject CPU time in nanoseconds
        per_cpu_count: Logical CPUs the subject usage is spread across

    Returns:
        CPU percent, may exceed 100 on multi-core subjects
    """
    if previous.host_cpu_ns == 0:
        return 0.0

    cpu_delta = max(0, total_usage_ns - previous.total_cpu_ns)
    system_delta = max(0, host_cpu_total - previous.host_cpu_ns)

    if system_delta > 0 and cpu_delta > 0:
        return (cpu_delta / system_delta) * per_cpu_count * 100.0
    return 0.0


def calculate_block_io(entries: list[BlkioEntry]) -> tuple[int, int]:
    """Sum read and write bytes across all block I/O entries.

    Entries repeat per device and per cgroup level; all of them add up.
    Operations other than read and write are ignored.

    Returns:
        Tuple of (read_bytes, write_bytes)
    """
    read_bytes = 0
    write_bytes = 0
    for entry in entries:
        kind = entry.kind
        if kind is BlkioOp.READ:
            read_bytes += entry.value
        elif kind is BlkioOp.WRITE:
            write_bytes += entry.value
    return read_bytes, write_bytes


def calculate_network_io(interfaces: list[NetworkInterface]) -> tuple[int, int]:
    """Sum received and transmitted bytes across interfaces."""
    rx = sum(iface.rx_bytes for iface in interfaces)
    tx = sum(iface.tx_bytes for iface in interfaces)
    return rx, tx


def calculate_mem_usage_no_cache(memory: MemoryStats) -> int:
    """Memory usage of the subject excluding page cache.

    Page cache is excluded to avoid misinterpretation of the output.
    """
    return max(0, memory.usage.usage - memory.cache)


def calculate_mem_percent_no_cache(limit: float, used_no_cache: float) -> float:
    # A zero limit means no limit data (e.g. the subject is not running)
    if limit != 0:
        return used_no_cache / limit * 100.0
    return 0.0


def compute(
    previous: PreviousCounters,
    host_cpu_total: int,
    sample: Stats,
    memory_limit: int | None = None,
) -> tuple[DerivedMetrics, PreviousCounters]:
    """Derive metrics for one stats sample.

    Args:
        previous: Counters retained from the previous sample
        host_cpu_total: Host CPU time sampled alongside this event
        sample: Validated stats payload
        memory_limit: Limit from a resource-limit lookup, replaces the sample's own limit

    Returns:
        Tuple of (metrics, counters to retain for the next sample)
    """
    total_usage = sample.cpu.usage.total
    cpu_percent = calculate_cpu_percent(
        previous, host_cpu_total, total_usage, sample.per_cpu_count
    )

    block_read, block_write = calculate_block_io(sample.blkio.io_service_bytes_recursive)
    net_rx, net_tx = calculate_network_io(sample.network_interfaces)

    mem = calculate_mem_usage_no_cache(sample.memory)
    mem_limit = sample.memory.usage.limit if memory_limit is None else memory_limit
    mem_percent = calculate_mem_percent_no_cache(mem_limit, mem)

    metrics = DerivedMetrics(
        cpu_percent=cpu_percent,
        memory_bytes=float(mem),
        memory_limit_bytes=float(mem_limit),
        memory_percent=mem_percent,
        net_rx_bytes=float(net_rx),
        net_tx_bytes=float(net_tx),
        block_read_bytes=float(block_read),
        block_write_bytes=float(block_write),
        pids_current=sample.pids.current,
    )
    return metrics, PreviousCounters(total_cpu_ns=total_usage, host_cpu_ns=host_cpu_total)
