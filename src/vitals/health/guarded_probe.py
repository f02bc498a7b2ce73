"""
Guarded execution of dependency probes.

Every probe is wrapped the same way: consult the circuit breaker, then the
result cache, and only then call the dependency under a fixed deadline.
Failures are cached too, so repeated checks inside the TTL fail fast instead
of hitting a broken dependency again.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol

from ..config.errors import ConfigurationError
from ..exceptions import CircuitOpenError, ProbeError, ProbeTimeoutError
from .circuit_breaker import CircuitBreakerRegistry
from .health_types import HealthCheckResult, HealthStatus
from .result_cache import ResultCache

logger = logging.getLogger(__name__)

DEFAULT_PROBE_TIMEOUT_SECONDS = 10.0

# Expected dependency failures. Anything else a probe raises is recorded the same
# way but logged with a traceback.
PROBE_FAILURES = (
    ProbeError,
    ConfigurationError,
    ConnectionError,
    TimeoutError,
    asyncio.TimeoutError,
    OSError,
)


class ComponentProbe(Protocol):
    """A single dependency-specific health check."""

    name: str

    async def check(self) -> HealthCheckResult:
        """Call the dependency and describe its health; raise on connectivity or configuration failure."""


def describe_error(exc: BaseException) -> str:
    message = str(exc)
    return message if message else type(exc).__name__


class GuardedProbe:
    """Breaker, cache and deadline around one ComponentProbe."""

    def __init__(
        self,
        probe: ComponentProbe,
        registry: CircuitBreakerRegistry,
        cache: ResultCache,
        timeout_seconds: float = DEFAULT_PROBE_TIMEOUT_SECONDS,
    ):
        self.probe = probe
        self.registry = registry
        self.cache = cache
        self.timeout_seconds = timeout_seconds

    @property
    def component(self) -> str:
        return self.probe.name

    async def check(self) -> HealthCheckResult:
        component = self.component

        if await self.registry.is_open(component):
            return HealthCheckResult(
                status=HealthStatus.UNHEALTHY,
                component=component,
                error=CircuitOpenError.MESSAGE,
            )

        cached = self.cache.get(component)
        if cached is not None:
            return cached

        try:
            result = await asyncio.wait_for(self.probe.check(), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            error = ProbeTimeoutError(component, self.timeout_seconds)
            return await self._record_failure(component, error)
        except PROBE_FAILURES as exc:
            return await self._record_failure(component, exc)
        except Exception as exc:
            logger.exception("Health probe %s raised an unexpected error", component)
            return await self._record_failure(component, exc)

        await self.registry.record_success(component)
        self.cache.put(component, result)
        return result

    async def _record_failure(self, component: str, exc: BaseException) -> HealthCheckResult:
        breaker = await self.registry.record_failure(component)
        logger.warning(
            "Health probe %s failed (%d consecutive): %s",
            component,
            breaker.failures,
            describe_error(exc),
        )
        result = HealthCheckResult.unhealthy(component, describe_error(exc))
        self.cache.put(component, result)
        return result


__all__ = [
    "ComponentProbe",
    "DEFAULT_PROBE_TIMEOUT_SECONDS",
    "GuardedProbe",
    "PROBE_FAILURES",
    "describe_error",
]
