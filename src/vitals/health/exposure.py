"""
Transport-facing health surface.

Maps the aggregate report to an HTTP status and a JSON-ready body. The health
surface must always answer, so nothing raised by the aggregator reaches the
caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict

from .circuit_breaker import CircuitBreakerState
from .guarded_probe import describe_error
from .health_aggregator import HealthReportAggregator
from .health_types import HealthStatus, SystemHealth, utc_now

logger = logging.getLogger(__name__)

HTTP_OK = 200
HTTP_SERVICE_UNAVAILABLE = 503

_STATUS_CODES = {
    HealthStatus.HEALTHY: HTTP_OK,
    HealthStatus.DEGRADED: HTTP_OK,
    HealthStatus.UNHEALTHY: HTTP_SERVICE_UNAVAILABLE,
}


@dataclass(frozen=True)
class HealthResponse:
    status_code: int
    body: Dict[str, Any]
    report: SystemHealth | None = None


def status_code_for(overall: HealthStatus) -> int:
    return _STATUS_CODES[overall]


class HealthEndpoint:
    """Inbound operations for whatever network layer hosts the health check."""

    def __init__(self, aggregator: HealthReportAggregator):
        self.aggregator = aggregator

    async def get_system_health(self) -> HealthResponse:
        try:
            report = await self.aggregator.check_system_health()
            return HealthResponse(status_code=status_code_for(report.overall), body=report.to_dict(), report=report)
        except Exception as exc:
            logger.exception("System health check failed")
            return HealthResponse(
                status_code=HTTP_SERVICE_UNAVAILABLE,
                body={
                    "overall": HealthStatus.UNHEALTHY.value,
                    "error": describe_error(exc),
                    "timestamp": utc_now().isoformat().replace("+00:00", "Z"),
                },
            )

    def reset_circuit_breakers(self) -> None:
        self.aggregator.reset_circuit_breakers()

    def get_circuit_breaker_states(self) -> Dict[str, CircuitBreakerState]:
        return self.aggregator.get_circuit_breaker_states()


__all__ = [
    "HTTP_OK",
    "HTTP_SERVICE_UNAVAILABLE",
    "HealthEndpoint",
    "HealthResponse",
    "status_code_for",
]
