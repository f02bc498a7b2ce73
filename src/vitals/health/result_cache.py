"""Short-lived cache of the latest health result per component."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from .health_types import HealthCheckResult

DEFAULT_CACHE_TTL_SECONDS = 30.0


@dataclass(frozen=True)
class CacheEntry:
    result: HealthCheckResult
    inserted_at: float


class ResultCache:
    """Entries are valid while ``now - inserted_at < ttl``; stale ones are evicted on read."""

    def __init__(self, ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS, *, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def get(self, component: str) -> Optional[HealthCheckResult]:
        entry = self._entries.get(component)
        if entry is None:
            return None

        if self._clock() - entry.inserted_at >= self.ttl_seconds:
            del self._entries[component]
            return None

        return entry.result

    def put(self, component: str, result: HealthCheckResult) -> None:
        self._entries[component] = CacheEntry(result=result, inserted_at=self._clock())

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["CacheEntry", "DEFAULT_CACHE_TTL_SECONDS", "ResultCache"]
