from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from tests.helpers.health_fakes import FakeRedis
from vitals.exceptions import ConnectivityError
from vitals.health.circuit_breaker import CircuitBreakerRegistry
from vitals.health.guarded_probe import GuardedProbe
from vitals.health.health_types import HealthStatus
from vitals.health.probes import cache_service as cache_module
from vitals.health.probes.cache_service import CacheServiceProbe
from vitals.health.result_cache import ResultCache


def refusing_client():
    client = FakeRedis()
    client.ping = AsyncMock(side_effect=RedisConnectionError("Error 111 connecting to localhost:6379. Connection refused."))
    return client


@pytest.mark.asyncio
async def test_ping_and_info(monkeypatch):
    monkeypatch.setattr(cache_module, "elapsed_ms", lambda started: 3.0)
    client = FakeRedis()

    result = await CacheServiceProbe(lambda: client).check()

    assert result.status is HealthStatus.HEALTHY
    assert result.component == "cache"
    assert result.metadata.to_dict() == {"usedMemory": "1.25M", "version": "7.2.4"}
    assert client.ping_calls == 1
    assert client.closed is True


@pytest.mark.asyncio
async def test_slow_ping_is_degraded(monkeypatch):
    monkeypatch.setattr(cache_module, "elapsed_ms", lambda started: 750.0)

    result = await CacheServiceProbe(FakeRedis, degraded_ms=500.0).check()

    assert result.status is HealthStatus.DEGRADED


@pytest.mark.asyncio
async def test_missing_info_fields_are_unknown():
    client = FakeRedis()
    client.info_sections = {}

    result = await CacheServiceProbe(lambda: client).check()

    assert result.metadata.used_memory == "unknown"
    assert result.metadata.version == "unknown"


@pytest.mark.asyncio
async def test_connection_refused_raises_and_closes_client():
    client = refusing_client()

    with pytest.raises(ConnectivityError, match="Connection refused"):
        await CacheServiceProbe(lambda: client).check()

    assert client.closed is True


@pytest.mark.asyncio
async def test_refused_cache_counts_failures_then_short_circuits(fake_clock):
    calls = []

    def factory():
        calls.append(1)
        return refusing_client()

    registry = CircuitBreakerRegistry(5, 60.0, clock=fake_clock)
    guard = GuardedProbe(CacheServiceProbe(factory), registry, ResultCache(30.0, clock=fake_clock))

    first = await guard.check()
    assert first.status is HealthStatus.UNHEALTHY
    assert "Connection refused" in first.error
    assert registry.get("cache").failures == 1

    for _ in range(4):
        fake_clock.advance(30)
        await guard.check()
    fake_clock.advance(30)
    blocked = await guard.check()

    assert len(calls) == 5
    assert blocked.error == "circuit breaker open"
