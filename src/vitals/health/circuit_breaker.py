"""
Per-component circuit breakers for dependency probes.

Each component gets its own breaker, created lazily on the first recorded
failure:

    CLOSED --(threshold failures)--> OPEN --(timeout elapsed)--> HALF_OPEN
    HALF_OPEN --(success)--> CLOSED
    HALF_OPEN --(failure)--> OPEN (timeout restarts)

Half-open admits one trial call at a time. A trial that never reports back
(served from cache, cancelled) expires after the open timeout and the next
caller gets a fresh one.

Timeouts run on a monotonic clock; the wall-clock failure time is kept only
for the diagnostic listing.

Breakers live as long as the registry; only ``reset_all`` clears them.
Read-modify-write on a component runs under that component's lock, so
overlapping health checks cannot lose failure counts.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_FAILURE_THRESHOLD = 5
DEFAULT_OPEN_TIMEOUT_SECONDS = 60.0


class BreakerState(Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half-open"


@dataclass
class CircuitBreakerState:
    failures: int
    last_failure_at: float
    state: BreakerState
    timeout_seconds: float
    last_failure_wall: float = 0.0
    trial_started_at: Optional[float] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "failures": self.failures,
            "lastFailureAt": self.last_failure_wall,
            "state": self.state.value,
            "timeoutMs": int(self.timeout_seconds * 1000),
        }


class CircuitBreakerRegistry:
    """Failure bookkeeping for every monitored component."""

    def __init__(
        self,
        failure_threshold: int = DEFAULT_FAILURE_THRESHOLD,
        open_timeout_seconds: float = DEFAULT_OPEN_TIMEOUT_SECONDS,
        *,
        clock: Callable[[], float] = time.monotonic,
        wall_clock: Callable[[], float] = time.time,
    ):
        if failure_threshold < 1:
            raise ValueError("failure_threshold must be at least 1")
        self.failure_threshold = failure_threshold
        self.open_timeout_seconds = open_timeout_seconds
        self._clock = clock
        self._wall_clock = wall_clock
        self._breakers: Dict[str, CircuitBreakerState] = {}
        self._locks: Dict[str, asyncio.Lock] = {}

    def _lock_for(self, component: str) -> asyncio.Lock:
        lock = self._locks.get(component)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[component] = lock
        return lock

    async def is_open(self, component: str) -> bool:
        """
        Return True while the breaker blocks calls to ``component``.

        An open breaker whose timeout has elapsed moves to half-open and lets
        exactly one caller through for a trial call; everyone else stays
        blocked until the trial reports back or expires.
        """
        async with self._lock_for(component):
            breaker = self._breakers.get(component)
            if breaker is None or breaker.state is BreakerState.CLOSED:
                return False

            now = self._clock()
            if breaker.state is BreakerState.OPEN:
                if now - breaker.last_failure_at < breaker.timeout_seconds:
                    return True
                breaker.state = BreakerState.HALF_OPEN
                breaker.trial_started_at = now
                logger.info("Circuit breaker for %s is half-open; allowing a trial call", component)
                return False

            if breaker.trial_started_at is not None and now - breaker.trial_started_at < breaker.timeout_seconds:
                return True
            breaker.trial_started_at = now
            logger.info("Trial call for %s never reported back; allowing another", component)
            return False

    async def record_failure(self, component: str) -> CircuitBreakerState:
        async with self._lock_for(component):
            breaker = self._breakers.get(component)
            if breaker is None:
                breaker = CircuitBreakerState(
                    failures=0,
                    last_failure_at=0.0,
                    state=BreakerState.CLOSED,
                    timeout_seconds=self.open_timeout_seconds,
                )
                self._breakers[component] = breaker

            previous_state = breaker.state
            breaker.failures += 1
            breaker.last_failure_at = self._clock()
            breaker.last_failure_wall = self._wall_clock()
            breaker.trial_started_at = None

            if breaker.failures >= self.failure_threshold or previous_state is BreakerState.HALF_OPEN:
                breaker.state = BreakerState.OPEN
                if previous_state is not BreakerState.OPEN:
                    logger.warning(
                        "Circuit breaker for %s opened after %d failure(s)",
                        component,
                        breaker.failures,
                    )
            return replace(breaker)

    async def record_success(self, component: str) -> None:
        async with self._lock_for(component):
            breaker = self._breakers.get(component)
            if breaker is None:
                return
            if breaker.state is not BreakerState.CLOSED:
                logger.info("Circuit breaker for %s closed", component)
            breaker.failures = 0
            breaker.state = BreakerState.CLOSED
            breaker.trial_started_at = None

    def get(self, component: str) -> Optional[CircuitBreakerState]:
        breaker = self._breakers.get(component)
        return replace(breaker) if breaker is not None else None

    def snapshot(self) -> Dict[str, CircuitBreakerState]:
        """Copies of every breaker, safe to hand to monitoring tools."""
        return {component: replace(breaker) for component, breaker in self._breakers.items()}

    def reset_all(self) -> None:
        if self._breakers:
            logger.info("Resetting %d circuit breaker(s)", len(self._breakers))
        self._breakers.clear()


__all__ = [
    "BreakerState",
    "CircuitBreakerRegistry",
    "CircuitBreakerState",
    "DEFAULT_FAILURE_THRESHOLD",
    "DEFAULT_OPEN_TIMEOUT_SECONDS",
]
