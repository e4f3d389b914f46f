"""Resource-limit lookups for a container.

The memory limit reported inside a stats event is whatever the cgroup
exposes; these collaborators resolve the configured limit from the runtime
instead. A limit of 0 means no limit is configured.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Protocol

import docker
from docker.errors import DockerException, NotFound

from magneto.core.config import LimitSource
from magneto.core.constants import RUNC_STATE_ROOT
from magneto.core.errors import ResourceLookupError

logger = logging.getLogger(__name__)


class LimitLookup(Protocol):
    def memory_limit(self, container_id: str) -> int: ...


def _as_limit(value: Any, source: str) -> int:
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ResourceLookupError(f"invalid memory limit {value!r} in {source}")
    # runc stores -1 for "unlimited"
    return max(0, value)


class RuncStateLimits:
    """Reads limits from runc's `<root>/<id>/state.json`."""

    def __init__(self, root: Path | str = RUNC_STATE_ROOT) -> None:
        self._root = Path(root)

    def memory_limit(self, container_id: str) -> int:
        if not container_id or "/" in container_id or container_id in (".", ".."):
            raise ResourceLookupError(f"invalid container id {container_id!r}")

        state_file = self._root / container_id / "state.json"
        try:
            state = json.loads(state_file.read_text(encoding="utf-8"))
        except FileNotFoundError as e:
            raise ResourceLookupError(f"container {container_id} not found in {self._root}") from e
        except (OSError, ValueError) as e:
            raise ResourceLookupError(f"cannot read {state_file}: {e}") from e

        try:
            cgroups = state["config"]["cgroups"]
        except (KeyError, TypeError) as e:
            raise ResourceLookupError(f"no cgroup config in {state_file}") from e
        if not isinstance(cgroups, dict):
            raise ResourceLookupError(f"no cgroup config in {state_file}")

        # Older runc nests the resources, newer versions embed them
        resources = cgroups.get("resources")
        if not isinstance(resources, dict):
            resources = cgroups

        limit = _as_limit(resources.get("memory"), str(state_file))
        logger.debug(f"Memory limit for {container_id[:12]} from runc state: {limit}")
        return limit


class DockerLimits:
    """Reads limits from the Docker Engine API (`HostConfig.Memory`)."""

    def __init__(self, client: docker.DockerClient | None = None) -> None:
        self._client = client

    def _get_client(self) -> docker.DockerClient:
        if self._client is None:
            try:
                self._client = docker.from_env()
            except DockerException as e:
                raise ResourceLookupError(f"cannot connect to Docker: {e}") from e
        return self._client

    def memory_limit(self, container_id: str) -> int:
        client = self._get_client()
        try:
            container = client.containers.get(container_id)
        except NotFound as e:
            raise ResourceLookupError(f"container {container_id} not found in Docker") from e
        except DockerException as e:
            raise ResourceLookupError(f"Docker lookup failed for {container_id}: {e}") from e

        host_config = container.attrs.get("HostConfig") or {}
        limit = _as_limit(host_config.get("Memory"), "Docker HostConfig")
        logger.debug(f"Memory limit for {container_id[:12]} from Docker: {limit}")
        return limit


def build_limit_lookup(
    source: LimitSource, state_root: Path | str = RUNC_STATE_ROOT
) -> LimitLookup | None:
    """Create the lookup for a configured limit source, None for `none`."""
    if source is LimitSource.RUNC:
        return RuncStateLimits(state_root)
    if source is LimitSource.DOCKER:
        return DockerLimits()
    return None
