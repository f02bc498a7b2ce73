"""
Queue subsystem probe.

Reads Bull-style queue bookkeeping straight from redis: ``bull:<queue>:wait``
and ``bull:<queue>:active`` are lists, ``:delayed`` and ``:failed`` are sorted
sets. A waiting backlog above the threshold means workers are not keeping up.
With no queues configured the probe reports degraded rather than claiming
health it never verified.
"""

from __future__ import annotations

import logging
from typing import Callable, Sequence

from ...exceptions import ConnectivityError
from ...redis_utils import REDIS_ERRORS, RedisClient, ensure_awaitable
from ..health_types import HealthCheckResult, HealthStatus, QueueDepth, QueueMetadata

logger = logging.getLogger(__name__)

COMPONENT = "queues"
DEFAULT_BACKLOG_THRESHOLD = 1000
DEFAULT_KEY_PREFIX = "bull"
NOT_CONFIGURED_ERROR = "queue monitoring not configured"


class QueueProbe:
    name = COMPONENT

    def __init__(
        self,
        client_factory: Callable[[], RedisClient],
        queue_names: Sequence[str],
        *,
        backlog_threshold: int = DEFAULT_BACKLOG_THRESHOLD,
        key_prefix: str = DEFAULT_KEY_PREFIX,
    ):
        self.client_factory = client_factory
        self.queue_names = tuple(queue_names)
        self.backlog_threshold = backlog_threshold
        self.key_prefix = key_prefix

    def _key(self, queue_name: str, suffix: str) -> str:
        return f"{self.key_prefix}:{queue_name}:{suffix}"

    async def _read_depth(self, client: RedisClient, queue_name: str) -> QueueDepth:
        return QueueDepth(
            waiting=int(await ensure_awaitable(client.llen(self._key(queue_name, "wait")))),
            active=int(await ensure_awaitable(client.llen(self._key(queue_name, "active")))),
            delayed=int(await ensure_awaitable(client.zcard(self._key(queue_name, "delayed")))),
            failed=int(await ensure_awaitable(client.zcard(self._key(queue_name, "failed")))),
        )

    async def check(self) -> HealthCheckResult:
        if not self.queue_names:
            return HealthCheckResult(
                status=HealthStatus.DEGRADED,
                component=COMPONENT,
                error=NOT_CONFIGURED_ERROR,
                metadata=QueueMetadata(queues={}, monitored=False),
            )

        client = self.client_factory()
        try:
            depths = {name: await self._read_depth(client, name) for name in self.queue_names}
        except REDIS_ERRORS as exc:
            raise ConnectivityError(f"Queue backend unreachable: {exc}", component=COMPONENT) from exc
        finally:
            try:
                await client.aclose()
            except REDIS_ERRORS:
                logger.debug("Failed to close queue health client", exc_info=True)

        backlogged = [name for name, depth in depths.items() if depth.waiting > self.backlog_threshold]
        if backlogged:
            return HealthCheckResult(
                status=HealthStatus.DEGRADED,
                component=COMPONENT,
                error=f"backlog above {self.backlog_threshold} in: {', '.join(backlogged)}",
                metadata=QueueMetadata(queues=depths),
            )

        return HealthCheckResult(status=HealthStatus.HEALTHY, component=COMPONENT, metadata=QueueMetadata(queues=depths))


__all__ = ["NOT_CONFIGURED_ERROR", "QueueProbe"]
