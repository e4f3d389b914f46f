"""Pydantic schemas for the runc event stream.

The models mirror the JSON emitted by `runc events`. Every section is
optional so partial payloads validate with zero defaults.
"""

from __future__ import annotations

import os
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, Field, ValidationError

from magneto.core.constants import STATS_EVENT_TYPE
from magneto.core.errors import DecodeError


def describe_validation_error(error: ValidationError) -> str:
    """One-line summary of the first validation failure."""
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"]) or "<root>"
    return f"{location}: {first['msg']}"


class BlkioOp(str, Enum):
    """Block I/O operation classification."""

    READ = "read"
    WRITE = "write"
    OTHER = "other"


class CpuUsage(BaseModel):
    total: int = Field(default=0, ge=0, description="Cumulative CPU time in nanoseconds")
    percpu: list[int] = Field(default_factory=list)
    kernel: int = Field(default=0, ge=0)
    user: int = Field(default=0, ge=0)


class CpuStats(BaseModel):
    usage: CpuUsage = Field(default_factory=CpuUsage)


class MemoryEntry(BaseModel):
    usage: int = Field(default=0, ge=0)
    limit: int = Field(default=0, ge=0, description="0 means no limit data")
    max: int = Field(default=0, ge=0)
    failcnt: int = Field(default=0, ge=0)


class MemoryStats(BaseModel):
    cache: int = Field(default=0, ge=0, description="Page cache bytes")
    usage: MemoryEntry = Field(default_factory=MemoryEntry)


class BlkioEntry(BaseModel):
    major: int = 0
    minor: int = 0
    op: str = ""
    value: int = Field(default=0, ge=0)

    @property
    def kind(self) -> BlkioOp:
        op = self.op.lower()
        if op == "read":
            return BlkioOp.READ
        if op == "write":
            return BlkioOp.WRITE
        return BlkioOp.OTHER


class BlkioStats(BaseModel):
    io_service_bytes_recursive: list[BlkioEntry] = Field(
        default_factory=list,
        validation_alias=AliasChoices("ioServiceBytesRecursive", "io_service_bytes_recursive"),
    )


class PidsStats(BaseModel):
    current: int = Field(default=0, ge=0)
    limit: int = Field(default=0, ge=0)


class NetworkInterface(BaseModel):
    name: str = Field(default="", validation_alias=AliasChoices("name", "Name"))
    rx_bytes: int = Field(default=0, ge=0, validation_alias=AliasChoices("rx_bytes", "RxBytes"))
    tx_bytes: int = Field(default=0, ge=0, validation_alias=AliasChoices("tx_bytes", "TxBytes"))


class Stats(BaseModel):
    """Stats payload of a single `runc events` record (the RawSample)."""

    cpu: CpuStats = Field(default_factory=CpuStats)
    memory: MemoryStats = Field(default_factory=MemoryStats)
    pids: PidsStats = Field(default_factory=PidsStats)
    blkio: BlkioStats = Field(default_factory=BlkioStats)
    network_interfaces: list[NetworkInterface] = Field(
        default_factory=list,
        validation_alias=AliasChoices("network_interfaces", "interfaces", "Interfaces"),
    )

    model_config = {"extra": "ignore"}

    @property
    def per_cpu_count(self) -> int:
        """Logical CPUs the cumulative usage is spread across.

        cgroup v2 reports no per-CPU breakdown, in which case the host's
        logical CPU count is used instead.
        """
        return len(self.cpu.usage.percpu) or os.cpu_count() or 1


class Event(BaseModel):
    """One record of the event stream.

    `data` stays a raw mapping; only stats events are validated further.
    """

    type: str
    id: str = ""
    data: dict[str, Any] | None = None

    model_config = {"extra": "ignore"}

    @property
    def is_stats(self) -> bool:
        return self.type == STATS_EVENT_TYPE

    def stats(self) -> Stats:
        """Validate the payload as a Stats sample.

        Raises:
            DecodeError: If the payload does not match the stats shape
        """
        try:
            return Stats.model_validate(self.data or {})
        except ValidationError as e:
            raise DecodeError(
                f"invalid stats payload for {self.id or '?'}: {describe_validation_error(e)}"
            ) from e
