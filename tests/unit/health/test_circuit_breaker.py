import asyncio
import time

import pytest

from vitals.health.circuit_breaker import BreakerState, CircuitBreakerRegistry
from vitals.health.result_cache import ResultCache

_THRESHOLD = 5
_TIMEOUT = 60.0


def make_registry(clock):
    return CircuitBreakerRegistry(_THRESHOLD, _TIMEOUT, clock=clock)


async def fail_times(registry, component, count):
    for _ in range(count):
        await registry.record_failure(component)


@pytest.mark.asyncio
async def test_unknown_component_is_closed(fake_clock):
    registry = make_registry(fake_clock)

    assert await registry.is_open("database") is False
    assert registry.get("database") is None


@pytest.mark.asyncio
async def test_each_failure_increments_by_one(fake_clock):
    registry = make_registry(fake_clock)

    for expected in range(1, 4):
        state = await registry.record_failure("cache")
        assert state.failures == expected
        assert state.last_failure_at == fake_clock.now


@pytest.mark.asyncio
async def test_success_resets_count_regardless_of_history(fake_clock):
    registry = make_registry(fake_clock)
    await fail_times(registry, "cache", 4)

    await registry.record_success("cache")

    state = registry.get("cache")
    assert state.failures == 0
    assert state.state is BreakerState.CLOSED


@pytest.mark.asyncio
async def test_opens_at_threshold_not_before(fake_clock):
    registry = make_registry(fake_clock)

    await fail_times(registry, "storage", _THRESHOLD - 1)
    assert await registry.is_open("storage") is False

    await registry.record_failure("storage")
    assert await registry.is_open("storage") is True
    assert registry.get("storage").state is BreakerState.OPEN


@pytest.mark.asyncio
async def test_stays_open_until_timeout_elapses(fake_clock):
    registry = make_registry(fake_clock)
    await fail_times(registry, "storage", _THRESHOLD)

    fake_clock.advance(_TIMEOUT - 1)
    assert await registry.is_open("storage") is True

    fake_clock.advance(1)
    assert await registry.is_open("storage") is False
    assert registry.get("storage").state is BreakerState.HALF_OPEN


@pytest.mark.asyncio
async def test_half_open_success_closes(fake_clock):
    registry = make_registry(fake_clock)
    await fail_times(registry, "queues", _THRESHOLD)
    fake_clock.advance(_TIMEOUT)
    assert await registry.is_open("queues") is False

    await registry.record_success("queues")

    state = registry.get("queues")
    assert state.state is BreakerState.CLOSED
    assert state.failures == 0
    assert await registry.is_open("queues") is False


@pytest.mark.asyncio
async def test_half_open_failure_reopens_and_restarts_timeout(fake_clock):
    registry = make_registry(fake_clock)
    await fail_times(registry, "queues", _THRESHOLD)
    fake_clock.advance(_TIMEOUT)
    assert await registry.is_open("queues") is False

    await registry.record_failure("queues")
    reopened_at = fake_clock.now

    assert registry.get("queues").state is BreakerState.OPEN
    assert registry.get("queues").last_failure_at == reopened_at
    fake_clock.advance(_TIMEOUT - 1)
    assert await registry.is_open("queues") is True
    fake_clock.advance(1)
    assert await registry.is_open("queues") is False


@pytest.mark.asyncio
async def test_half_open_failure_reopens_even_below_threshold(fake_clock):
    registry = CircuitBreakerRegistry(2, _TIMEOUT, clock=fake_clock)
    await fail_times(registry, "cache", 2)
    fake_clock.advance(_TIMEOUT)
    await registry.is_open("cache")
    # Simulate an operator bumping the threshold while the breaker is half-open.
    registry.failure_threshold = 100

    await registry.record_failure("cache")

    assert registry.get("cache").state is BreakerState.OPEN


@pytest.mark.asyncio
async def test_reset_all_clears_every_breaker(fake_clock):
    registry = make_registry(fake_clock)
    await fail_times(registry, "database", _THRESHOLD)
    await fail_times(registry, "cache", 2)

    registry.reset_all()

    assert registry.snapshot() == {}
    assert await registry.is_open("database") is False


@pytest.mark.asyncio
async def test_snapshot_returns_copies(fake_clock):
    registry = make_registry(fake_clock)
    await registry.record_failure("database")

    snapshot = registry.snapshot()
    snapshot["database"].failures = 99

    assert registry.get("database").failures == 1
    assert snapshot["database"].to_dict()["timeoutMs"] == 60000


@pytest.mark.asyncio
async def test_concurrent_failures_are_not_lost(fake_clock):
    registry = CircuitBreakerRegistry(50, _TIMEOUT, clock=fake_clock)

    await asyncio.gather(*(registry.record_failure("database") for _ in range(50)))

    state = registry.get("database")
    assert state.failures == 50
    assert state.state is BreakerState.OPEN


def test_threshold_must_be_positive():
    with pytest.raises(ValueError):
        CircuitBreakerRegistry(0)


@pytest.mark.asyncio
async def test_half_open_admits_one_trial_at_a_time(fake_clock):
    registry = make_registry(fake_clock)
    await fail_times(registry, "storage", _THRESHOLD)
    fake_clock.advance(_TIMEOUT)

    decisions = await asyncio.gather(*(registry.is_open("storage") for _ in range(3)))

    assert sorted(decisions) == [False, True, True]
    assert registry.get("storage").state is BreakerState.HALF_OPEN


@pytest.mark.asyncio
async def test_unreported_trial_expires_after_timeout(fake_clock):
    registry = make_registry(fake_clock)
    await fail_times(registry, "storage", _THRESHOLD)
    fake_clock.advance(_TIMEOUT)
    assert await registry.is_open("storage") is False

    fake_clock.advance(_TIMEOUT - 1)
    assert await registry.is_open("storage") is True

    fake_clock.advance(1)
    assert await registry.is_open("storage") is False
    assert await registry.is_open("storage") is True


@pytest.mark.asyncio
async def test_trial_outcome_frees_the_slot(fake_clock):
    registry = make_registry(fake_clock)
    await fail_times(registry, "queues", _THRESHOLD)
    fake_clock.advance(_TIMEOUT)
    await registry.is_open("queues")

    await registry.record_success("queues")

    assert registry.get("queues").trial_started_at is None
    assert await registry.is_open("queues") is False
    assert await registry.is_open("queues") is False


@pytest.mark.asyncio
async def test_listing_reports_wall_clock_failure_time(fake_clock):
    registry = CircuitBreakerRegistry(_THRESHOLD, _TIMEOUT, clock=fake_clock, wall_clock=lambda: 1_800_000_000.0)

    state = await registry.record_failure("database")

    assert state.last_failure_at == fake_clock.now
    assert state.to_dict()["lastFailureAt"] == 1_800_000_000.0


def test_default_clocks_are_monotonic_for_timeouts():
    registry = CircuitBreakerRegistry()

    assert registry._clock is time.monotonic
    assert registry._wall_clock is time.time
    assert ResultCache()._clock is time.monotonic
