from __future__ import annotations

"""
Typing and construction helpers for redis.asyncio usage.

redis-py exposes unified sync/async command signatures that confuse static type
checkers. These helpers provide narrow aliases that reflect the async behavior
the probes rely on.
"""


import asyncio
from typing import TYPE_CHECKING, Awaitable, TypeVar, cast

from redis import asyncio as redis_asyncio
from redis.exceptions import RedisError

from .config.health import RedisSettings

if TYPE_CHECKING:
    from redis.asyncio import Redis as RedisClient
else:  # pragma: no cover - runtime alias for typing-only import
    RedisClient = redis_asyncio.Redis

T = TypeVar("T")

REDIS_ERRORS = (
    RedisError,
    ConnectionError,
    OSError,
    asyncio.TimeoutError,
)


def ensure_awaitable(result: "Awaitable[T] | T") -> Awaitable[T]:
    """Coerce redis command results into awaitables for typing purposes."""

    return cast(Awaitable[T], result)


def create_redis_client(settings: RedisSettings, *, db: int | None = None) -> RedisClient:
    """Build a short-lived client; callers own it and must ``aclose()`` it."""

    return redis_asyncio.Redis(
        host=settings.host,
        port=settings.port,
        password=settings.password,
        db=settings.db if db is None else db,
        socket_connect_timeout=settings.socket_connect_timeout,
        socket_timeout=settings.socket_connect_timeout,
        decode_responses=True,
    )


__all__ = ["REDIS_ERRORS", "RedisClient", "create_redis_client", "ensure_awaitable"]
