"""
Health report aggregator - the single source of truth for system status.

Runs every guarded probe concurrently, converts anything that escapes a
probe into an unhealthy result for that component, and rolls the results up
into one SystemHealth report.
"""

import asyncio
import logging
from typing import Dict, List, Optional, Sequence

from .circuit_breaker import CircuitBreakerRegistry, CircuitBreakerState
from .guarded_probe import DEFAULT_PROBE_TIMEOUT_SECONDS, ComponentProbe, GuardedProbe
from .health_aggregator_helpers import ErrorHandler, StatusAggregator, resolve_version
from .health_types import SystemHealth, utc_now
from .result_cache import ResultCache

logger = logging.getLogger(__name__)


class HealthReportAggregator:
    """
    Owns the breaker registry and result cache for a set of probes.

    Component order in every report is the order in which probes were
    registered, independent of which probe finishes first.
    """

    def __init__(
        self,
        probes: Sequence[ComponentProbe],
        *,
        registry: Optional[CircuitBreakerRegistry] = None,
        cache: Optional[ResultCache] = None,
        probe_timeout_seconds: float = DEFAULT_PROBE_TIMEOUT_SECONDS,
        version: Optional[str] = None,
    ):
        names = [probe.name for probe in probes]
        if len(set(names)) != len(names):
            raise ValueError(f"Probe names must be unique, got {names}")

        self.registry = registry or CircuitBreakerRegistry()
        self.cache = cache or ResultCache()
        self.version = resolve_version(version)
        self.error_handler = ErrorHandler()
        self.status_aggregator = StatusAggregator()
        self.guarded_probes: List[GuardedProbe] = [
            GuardedProbe(probe, self.registry, self.cache, probe_timeout_seconds) for probe in probes
        ]

    @property
    def component_names(self) -> List[str]:
        return [guarded.component for guarded in self.guarded_probes]

    async def check_system_health(self) -> SystemHealth:
        """
        Check every dependency concurrently and build the aggregate report.

        Returns:
            SystemHealth with one result per registered probe, in registration order
        """
        outcomes = await asyncio.gather(
            *(guarded.check() for guarded in self.guarded_probes),
            return_exceptions=True,
        )

        components = tuple(
            self.error_handler.ensure_result(guarded.component, outcome)
            for guarded, outcome in zip(self.guarded_probes, outcomes)
        )
        overall = self.status_aggregator.aggregate_status(components)
        logger.debug("System health %s across %d component(s)", overall.value, len(components))

        return SystemHealth(
            overall=overall,
            components=components,
            timestamp=utc_now(),
            version=self.version,
        )

    def reset_circuit_breakers(self) -> None:
        """Administrative recovery: forget every breaker and cached result."""
        self.registry.reset_all()
        self.cache.clear()

    def get_circuit_breaker_states(self) -> Dict[str, CircuitBreakerState]:
        return self.registry.snapshot()

    async def aclose(self) -> None:
        """Release connections held by probes that keep them (the database pool)."""
        for guarded in self.guarded_probes:
            close = getattr(guarded.probe, "close", None)
            if close is not None:
                await close()
