"""Cache service probe: redis ``PING`` latency plus memory and version from ``INFO``."""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping

from ...exceptions import ConnectivityError
from ...redis_utils import REDIS_ERRORS, RedisClient, ensure_awaitable
from ..health_types import CacheServiceMetadata, HealthCheckResult
from .latency import classify_latency, elapsed_ms, start_timer

logger = logging.getLogger(__name__)

COMPONENT = "cache"
DEFAULT_DEGRADED_MS = 500.0
UNKNOWN = "unknown"


def _info_field(info: Mapping[str, Any], key: str) -> str:
    value = info.get(key)
    if value is None or value == "":
        return UNKNOWN
    return str(value).strip()


class CacheServiceProbe:
    """Opens a fresh client per check so a dead connection never lingers."""

    name = COMPONENT

    def __init__(self, client_factory: Callable[[], RedisClient], *, degraded_ms: float = DEFAULT_DEGRADED_MS):
        self.client_factory = client_factory
        self.degraded_ms = degraded_ms

    async def check(self) -> HealthCheckResult:
        client = self.client_factory()
        try:
            started = start_timer()
            await ensure_awaitable(client.ping())
            latency_ms = elapsed_ms(started)

            memory_info = await ensure_awaitable(client.info("memory"))
            server_info = await ensure_awaitable(client.info("server"))
        except REDIS_ERRORS as exc:
            raise ConnectivityError(f"Cache service unreachable: {exc}", component=COMPONENT) from exc
        finally:
            try:
                await client.aclose()
            except REDIS_ERRORS:
                logger.debug("Failed to close cache service health client", exc_info=True)

        return HealthCheckResult(
            status=classify_latency(latency_ms, self.degraded_ms),
            component=COMPONENT,
            latency_ms=latency_ms,
            metadata=CacheServiceMetadata(
                used_memory=_info_field(memory_info, "used_memory_human"),
                version=_info_field(server_info, "redis_version"),
            ),
        )


__all__ = ["CacheServiceProbe"]
