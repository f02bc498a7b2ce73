"""Wire production probes and the aggregator from HealthSettings."""

from __future__ import annotations

from functools import partial
from typing import List, Optional

from ..config.health import HealthSettings, get_health_settings
from ..redis_utils import create_redis_client
from .circuit_breaker import CircuitBreakerRegistry
from .guarded_probe import ComponentProbe
from .health_aggregator import HealthReportAggregator
from .probes import (
    CacheServiceProbe,
    DatabaseProbe,
    ExternalServicesProbe,
    QueueProbe,
    StorageProbe,
    SystemResourcesProbe,
    default_service_checks,
)
from .result_cache import ResultCache


def build_default_probes(settings: HealthSettings) -> List[ComponentProbe]:
    """Probes in report order: database, cache, external services, system, queues, storage."""
    thresholds = settings.thresholds
    return [
        DatabaseProbe(settings.database_url, degraded_ms=thresholds.database_degraded_ms),
        CacheServiceProbe(partial(create_redis_client, settings.redis), degraded_ms=thresholds.cache_degraded_ms),
        ExternalServicesProbe(default_service_checks(settings.external)),
        SystemResourcesProbe(
            degraded_percent=thresholds.memory_degraded_percent,
            unhealthy_percent=thresholds.memory_unhealthy_percent,
        ),
        QueueProbe(
            partial(create_redis_client, settings.redis, db=settings.redis.queue_db),
            settings.queue_names,
            backlog_threshold=thresholds.queue_backlog_threshold,
        ),
        StorageProbe(settings.storage, degraded_ms=thresholds.storage_degraded_ms),
    ]


def build_default_aggregator(settings: Optional[HealthSettings] = None) -> HealthReportAggregator:
    settings = settings or get_health_settings()
    return HealthReportAggregator(
        build_default_probes(settings),
        registry=CircuitBreakerRegistry(
            settings.breaker.failure_threshold,
            settings.breaker.open_timeout_seconds,
        ),
        cache=ResultCache(settings.cache_ttl_seconds),
        probe_timeout_seconds=settings.probe_timeout_seconds,
        version=settings.version,
    )


__all__ = ["build_default_aggregator", "build_default_probes"]
