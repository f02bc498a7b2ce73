"""Aggregate component statuses into overall status."""

from __future__ import annotations

from typing import Iterable

from ..health_types import HealthCheckResult, HealthStatus


class StatusAggregator:
    """Worst component wins: any unhealthy makes the system unhealthy, else any degraded degrades it."""

    @staticmethod
    def aggregate_status(components: Iterable[HealthCheckResult]) -> HealthStatus:
        statuses = {result.status for result in components}
        if HealthStatus.UNHEALTHY in statuses:
            return HealthStatus.UNHEALTHY
        if HealthStatus.DEGRADED in statuses:
            return HealthStatus.DEGRADED
        return HealthStatus.HEALTHY
