"""Process-wide cache of the backend's tool list."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any

CACHE_TTL = 60.0  # seconds


@dataclass
class ToolsCache:
    """Last tool list fetched from the backend.

    The tool list is only ever replaced wholesale, so concurrent refreshes
    resolve as last-writer-wins. ``backend_connected`` records the outcome
    of the most recent backend attempt of any kind and is advisory only.

    Attributes:
        tools: Tool descriptors as returned by the backend's tools/list.
        timestamp: Wall-clock time of the last successful refresh (0 = never).
        backend_connected: Whether the latest backend connection succeeded.
        ttl: Freshness window in seconds.
    """

    tools: list[dict[str, Any]] = field(default_factory=list)
    timestamp: float = 0.0
    backend_connected: bool = False
    ttl: float = CACHE_TTL

    def age(self, now: float | None = None) -> float:
        return (time.time() if now is None else now) - self.timestamp

    def is_stale(self, now: float | None = None) -> bool:
        return self.age(now) > self.ttl

    def is_fresh(self, now: float | None = None) -> bool:
        """True when the cache holds tools younger than the TTL."""
        return bool(self.tools) and self.age(now) < self.ttl

    def replace(self, tools: list[dict[str, Any]], now: float | None = None) -> None:
        self.tools = list(tools)
        self.timestamp = time.time() if now is None else now
