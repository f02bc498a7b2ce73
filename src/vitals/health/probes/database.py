"""
Database probe: ``SELECT 1`` over an asyncpg connection pool.

The pool is created lazily from the configured DSN and reused across checks,
so the occupancy snapshot in the result reflects the live pool.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

import asyncpg

from ...config.errors import ConfigurationError
from ...exceptions import ConnectivityError
from ..health_types import ConnectionPoolStats, DatabaseMetadata, HealthCheckResult
from .latency import classify_latency, elapsed_ms, start_timer

logger = logging.getLogger(__name__)

COMPONENT = "database"
DEFAULT_DEGRADED_MS = 1000.0

DATABASE_ERRORS = (
    asyncpg.PostgresError,
    asyncpg.InterfaceError,
    OSError,
)


class DatabaseProbe:
    """Round-trip latency and pool occupancy for the relational database."""

    name = COMPONENT

    def __init__(
        self,
        database_url: Optional[str] = None,
        *,
        pool: Optional[asyncpg.Pool] = None,
        degraded_ms: float = DEFAULT_DEGRADED_MS,
        max_pool_size: int = 5,
    ):
        self.database_url = database_url
        self.degraded_ms = degraded_ms
        self.max_pool_size = max_pool_size
        self._pool = pool
        self._pool_lock = asyncio.Lock()

    async def _get_pool(self) -> asyncpg.Pool:
        if self._pool is not None:
            return self._pool
        if not self.database_url:
            raise ConfigurationError.not_configured("Database", "DATABASE_URL")
        async with self._pool_lock:
            # Another check may have created the pool while this one waited.
            if self._pool is not None:
                return self._pool
            try:
                self._pool = await asyncpg.create_pool(
                    dsn=self.database_url,
                    min_size=1,
                    max_size=self.max_pool_size,
                    command_timeout=10,
                )
            except DATABASE_ERRORS as exc:
                raise ConnectivityError(f"Database connection failed: {exc}", component=COMPONENT) from exc
            logger.debug("Database health pool created (max_size=%d)", self.max_pool_size)
            return self._pool

    async def check(self) -> HealthCheckResult:
        pool = await self._get_pool()

        started = start_timer()
        try:
            async with pool.acquire() as conn:
                value = await conn.fetchval("SELECT 1")
        except DATABASE_ERRORS as exc:
            raise ConnectivityError(f"Database query failed: {exc}", component=COMPONENT) from exc
        latency_ms = elapsed_ms(started)

        if value != 1:
            raise ConnectivityError(f"Database returned unexpected ping result {value!r}", component=COMPONENT)

        return HealthCheckResult(
            status=classify_latency(latency_ms, self.degraded_ms),
            component=COMPONENT,
            latency_ms=latency_ms,
            metadata=DatabaseMetadata(connection_pool=pool_stats(pool)),
        )

    async def close(self) -> None:
        if self._pool is not None:
            await self._pool.close()
            self._pool = None


def pool_stats(pool: asyncpg.Pool) -> ConnectionPoolStats:
    total = pool.get_size()
    idle = pool.get_idle_size()
    return ConnectionPoolStats(
        active=max(total - idle, 0),
        idle=idle,
        total=total,
        max_size=pool.get_max_size(),
    )


__all__ = ["DATABASE_ERRORS", "DatabaseProbe", "pool_stats"]
