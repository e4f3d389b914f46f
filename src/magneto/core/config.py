"""Configuration loading utilities.

Supports YAML and JSON configuration files with schema validation.
"""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

from magneto.core.constants import DEFAULT_INTERVAL_SECONDS, PROC_STAT_PATH, RUNC_STATE_ROOT


class LimitSource(str, Enum):
    """Where container resource limits are looked up."""

    NONE = "none"
    RUNC = "runc"  # <state_root>/<id>/state.json
    DOCKER = "docker"  # Docker Engine API


class MonitorConfig(BaseModel):
    """Top-level monitor configuration.

    Attributes:
        interval_seconds: Render interval
        stale_after_seconds: Zero displayed metrics after this much silence (None disables)
        proc_stat_path: Host CPU accounting file
        limit_source: Resource-limit collaborator to consult
        state_root: runc state directory used by the runc limit source
        exit_on_eof: Exit after a final render once the input stream ends
    """

    interval_seconds: float = Field(default=DEFAULT_INTERVAL_SECONDS, ge=0.1, le=3600)
    stale_after_seconds: float | None = Field(default=None, gt=0)
    proc_stat_path: Path = Field(default=PROC_STAT_PATH)
    limit_source: LimitSource = Field(default=LimitSource.NONE)
    state_root: Path = Field(default=RUNC_STATE_ROOT)
    exit_on_eof: bool = Field(default=False)

    model_config = {"extra": "forbid"}


def load_config(path: Path | str) -> MonitorConfig:
    """Load and validate a monitor configuration file.

    Args:
        path: Path to YAML or JSON configuration file

    Returns:
        Validated MonitorConfig object

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If file format is unsupported
        pydantic.ValidationError: If config is invalid
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    suffix = path.suffix.lower()
    with open(path, encoding="utf-8") as f:
        if suffix in (".yaml", ".yml"):
            data = yaml.safe_load(f)
        elif suffix == ".json":
            data = json.load(f)
        else:
            raise ValueError(f"Unsupported config format: {suffix}. Use .yaml, .yml, or .json")

    return MonitorConfig.model_validate(data or {})
