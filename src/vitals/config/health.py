from __future__ import annotations

"""Health monitoring settings resolved from the environment."""


from dataclasses import dataclass
from functools import lru_cache

from . import ConfigurationError, env_float, env_int, env_list, env_seconds, env_str

DEFAULT_QUEUE_NAMES = ("email", "webhooks", "analytics", "cleanup")


@dataclass(frozen=True)
class BreakerSettings:
    failure_threshold: int = 5
    open_timeout_seconds: float = 60.0


@dataclass(frozen=True)
class ThresholdSettings:
    database_degraded_ms: float = 1000.0
    cache_degraded_ms: float = 500.0
    storage_degraded_ms: float = 2000.0
    memory_degraded_percent: float = 75.0
    memory_unhealthy_percent: float = 90.0
    queue_backlog_threshold: int = 1000


@dataclass(frozen=True)
class RedisSettings:
    host: str = "localhost"
    port: int = 6379
    password: str | None = None
    db: int = 0
    queue_db: int = 1
    socket_connect_timeout: float = 5.0


@dataclass(frozen=True)
class StorageSettings:
    endpoint_url: str | None = None
    region: str = "us-east-1"
    access_key: str | None = None
    secret_key: str | None = None


@dataclass(frozen=True)
class ExternalServiceSettings:
    resend_api_key: str | None = None
    stripe_secret_key: str | None = None
    supabase_url: str | None = None
    resend_health_url: str | None = None
    stripe_health_url: str | None = None


@dataclass(frozen=True)
class HealthSettings:
    breaker: BreakerSettings = BreakerSettings()
    thresholds: ThresholdSettings = ThresholdSettings()
    redis: RedisSettings = RedisSettings()
    storage: StorageSettings = StorageSettings()
    external: ExternalServiceSettings = ExternalServiceSettings()
    cache_ttl_seconds: float = 30.0
    probe_timeout_seconds: float = 10.0
    database_url: str | None = None
    queue_names: tuple[str, ...] = DEFAULT_QUEUE_NAMES
    version: str | None = None


def _positive(name: str, value: float) -> float:
    if value <= 0:
        raise ConfigurationError.invalid_value(name, value, "must be greater than zero")
    return value


def _load_breaker_settings() -> BreakerSettings:
    defaults = BreakerSettings()
    threshold = env_int("HEALTH_BREAKER_THRESHOLD", or_value=defaults.failure_threshold)
    timeout = env_seconds("HEALTH_BREAKER_TIMEOUT_SECONDS", or_value=defaults.open_timeout_seconds)
    return BreakerSettings(
        failure_threshold=int(_positive("HEALTH_BREAKER_THRESHOLD", threshold)),
        open_timeout_seconds=float(timeout),
    )


def _load_threshold_settings() -> ThresholdSettings:
    defaults = ThresholdSettings()
    degraded_percent = env_float("HEALTH_MEMORY_DEGRADED_PERCENT", or_value=defaults.memory_degraded_percent)
    unhealthy_percent = env_float("HEALTH_MEMORY_UNHEALTHY_PERCENT", or_value=defaults.memory_unhealthy_percent)
    if degraded_percent > unhealthy_percent:
        raise ConfigurationError(
            f"HEALTH_MEMORY_DEGRADED_PERCENT ({degraded_percent}) must not exceed HEALTH_MEMORY_UNHEALTHY_PERCENT ({unhealthy_percent})"
        )
    return ThresholdSettings(
        database_degraded_ms=env_float("HEALTH_DATABASE_DEGRADED_MS", or_value=defaults.database_degraded_ms),
        cache_degraded_ms=env_float("HEALTH_CACHE_DEGRADED_MS", or_value=defaults.cache_degraded_ms),
        storage_degraded_ms=env_float("HEALTH_STORAGE_DEGRADED_MS", or_value=defaults.storage_degraded_ms),
        memory_degraded_percent=degraded_percent,
        memory_unhealthy_percent=unhealthy_percent,
        queue_backlog_threshold=env_int("HEALTH_QUEUE_BACKLOG_THRESHOLD", or_value=defaults.queue_backlog_threshold),
    )


def _load_redis_settings() -> RedisSettings:
    defaults = RedisSettings()
    return RedisSettings(
        host=env_str("REDIS_HOST", or_value=defaults.host),
        port=env_int("REDIS_PORT", or_value=defaults.port),
        password=env_str("REDIS_PASSWORD", allow_blank=False),
        db=env_int("REDIS_DB", or_value=defaults.db),
        queue_db=env_int("REDIS_QUEUE_DB", or_value=defaults.queue_db),
        socket_connect_timeout=env_seconds("REDIS_SOCKET_CONNECT_TIMEOUT", or_value=defaults.socket_connect_timeout),
    )


def _load_storage_settings() -> StorageSettings:
    return StorageSettings(
        endpoint_url=env_str("STORAGE_ENDPOINT_URL"),
        region=env_str("STORAGE_REGION", or_value=StorageSettings.region),
        access_key=env_str("STORAGE_ACCESS_KEY"),
        secret_key=env_str("STORAGE_SECRET_KEY"),
    )


def _load_external_settings() -> ExternalServiceSettings:
    return ExternalServiceSettings(
        resend_api_key=env_str("RESEND_API_KEY"),
        stripe_secret_key=env_str("STRIPE_SECRET_KEY"),
        supabase_url=env_str("SUPABASE_URL"),
        resend_health_url=env_str("RESEND_HEALTH_URL"),
        stripe_health_url=env_str("STRIPE_HEALTH_URL"),
    )


@lru_cache(maxsize=1)
def get_health_settings() -> HealthSettings:
    """Resolve health settings once per process; ``cache_clear()`` forces a reload."""

    return HealthSettings(
        breaker=_load_breaker_settings(),
        thresholds=_load_threshold_settings(),
        redis=_load_redis_settings(),
        storage=_load_storage_settings(),
        external=_load_external_settings(),
        cache_ttl_seconds=env_seconds("HEALTH_CACHE_TTL_SECONDS", or_value=30.0),
        probe_timeout_seconds=_positive(
            "HEALTH_PROBE_TIMEOUT_SECONDS", env_seconds("HEALTH_PROBE_TIMEOUT_SECONDS", or_value=10.0)
        ),
        database_url=env_str("DATABASE_URL"),
        queue_names=env_list("HEALTH_QUEUE_NAMES", or_value=DEFAULT_QUEUE_NAMES),
        version=env_str("VITALS_VERSION"),
    )


__all__ = [
    "BreakerSettings",
    "ExternalServiceSettings",
    "HealthSettings",
    "RedisSettings",
    "StorageSettings",
    "ThresholdSettings",
    "get_health_settings",
]
