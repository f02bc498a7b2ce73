"""
Dependency health monitoring with failure isolation.

This module separates:
- Circuit breakers (should this dependency be called at all?)
- Result caching (was it checked recently enough?)
- Probes (is the dependency answering, and how fast?)
- Aggregation (single report and overall status for the whole system)
- Exposure (status code and body for the hosting network layer)
"""

from .circuit_breaker import BreakerState, CircuitBreakerRegistry, CircuitBreakerState
from .exposure import HealthEndpoint, HealthResponse
from .guarded_probe import ComponentProbe, GuardedProbe
from .health_aggregator import HealthReportAggregator
from .health_aggregator_factory import build_default_aggregator, build_default_probes
from .health_types import HealthCheckResult, HealthStatus, SystemHealth
from .result_cache import ResultCache

__all__ = [
    "BreakerState",
    "CircuitBreakerRegistry",
    "CircuitBreakerState",
    "ComponentProbe",
    "GuardedProbe",
    "HealthCheckResult",
    "HealthEndpoint",
    "HealthReportAggregator",
    "HealthResponse",
    "HealthStatus",
    "ResultCache",
    "SystemHealth",
    "build_default_aggregator",
    "build_default_probes",
]
