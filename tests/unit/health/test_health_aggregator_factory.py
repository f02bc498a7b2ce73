from vitals.config.health import (
    BreakerSettings,
    ExternalServiceSettings,
    HealthSettings,
    RedisSettings,
    ThresholdSettings,
)
from vitals.health.health_aggregator_factory import build_default_aggregator, build_default_probes
from vitals.health.probes import (
    CacheServiceProbe,
    DatabaseProbe,
    ExternalServicesProbe,
    QueueProbe,
    StorageProbe,
    SystemResourcesProbe,
)


def test_default_probes_in_report_order():
    probes = build_default_probes(HealthSettings())

    assert [probe.name for probe in probes] == [
        "database",
        "cache",
        "external-services",
        "system-resources",
        "queues",
        "storage",
    ]
    assert [type(probe) for probe in probes] == [
        DatabaseProbe,
        CacheServiceProbe,
        ExternalServicesProbe,
        SystemResourcesProbe,
        QueueProbe,
        StorageProbe,
    ]


def test_settings_flow_into_probes():
    settings = HealthSettings(
        thresholds=ThresholdSettings(database_degraded_ms=250.0, queue_backlog_threshold=10),
        redis=RedisSettings(host="redis.internal", queue_db=3),
        external=ExternalServiceSettings(resend_api_key="re_123"),
        database_url="postgresql://health@db/app",
        queue_names=("email",),
    )

    database, cache, external, _system, queues, _storage = build_default_probes(settings)

    assert database.database_url == "postgresql://health@db/app"
    assert database.degraded_ms == 250.0
    assert cache.client_factory.args == (settings.redis,)
    assert queues.client_factory.keywords == {"db": 3}
    assert queues.queue_names == ("email",)
    assert queues.backlog_threshold == 10
    assert [check.name for check in external.checks] == ["resend", "stripe", "supabase"]


def test_default_aggregator_uses_breaker_and_cache_settings():
    settings = HealthSettings(
        breaker=BreakerSettings(failure_threshold=3, open_timeout_seconds=15.0),
        cache_ttl_seconds=5.0,
        probe_timeout_seconds=2.5,
        version="7.0.0",
    )

    aggregator = build_default_aggregator(settings)

    assert aggregator.registry.failure_threshold == 3
    assert aggregator.registry.open_timeout_seconds == 15.0
    assert aggregator.cache.ttl_seconds == 5.0
    assert aggregator.version == "7.0.0"
    assert {guarded.timeout_seconds for guarded in aggregator.guarded_probes} == {2.5}
