import pytest

from vitals.config.errors import ConfigurationError
from vitals.config.health import DEFAULT_QUEUE_NAMES, get_health_settings


def test_defaults(monkeypatch):
    for name in ("DATABASE_URL", "REDIS_HOST", "HEALTH_QUEUE_NAMES", "VITALS_VERSION", "RESEND_API_KEY"):
        monkeypatch.delenv(name, raising=False)

    settings = get_health_settings()

    assert settings.breaker.failure_threshold == 5
    assert settings.breaker.open_timeout_seconds == 60.0
    assert settings.cache_ttl_seconds == 30.0
    assert settings.probe_timeout_seconds == 10.0
    assert settings.thresholds.database_degraded_ms == 1000.0
    assert settings.thresholds.cache_degraded_ms == 500.0
    assert settings.thresholds.storage_degraded_ms == 2000.0
    assert settings.thresholds.memory_degraded_percent == 75.0
    assert settings.thresholds.memory_unhealthy_percent == 90.0
    assert settings.redis.queue_db == 1
    assert settings.queue_names == DEFAULT_QUEUE_NAMES
    assert settings.database_url is None
    assert settings.version is None


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("HEALTH_BREAKER_THRESHOLD", "3")
    monkeypatch.setenv("HEALTH_BREAKER_TIMEOUT_SECONDS", "15")
    monkeypatch.setenv("HEALTH_CACHE_TTL_SECONDS", "5")
    monkeypatch.setenv("HEALTH_QUEUE_NAMES", "email,webhooks")
    monkeypatch.setenv("REDIS_HOST", "redis.internal")
    monkeypatch.setenv("REDIS_PORT", "6380")
    monkeypatch.setenv("STORAGE_ENDPOINT_URL", "http://minio:9000")
    monkeypatch.setenv("STRIPE_SECRET_KEY", "sk_test")
    monkeypatch.setenv("DATABASE_URL", "postgresql://health@db/app")

    settings = get_health_settings()

    assert settings.breaker.failure_threshold == 3
    assert settings.breaker.open_timeout_seconds == 15.0
    assert settings.cache_ttl_seconds == 5.0
    assert settings.queue_names == ("email", "webhooks")
    assert settings.redis.host == "redis.internal"
    assert settings.redis.port == 6380
    assert settings.storage.endpoint_url == "http://minio:9000"
    assert settings.storage.region == "us-east-1"
    assert settings.external.stripe_secret_key == "sk_test"
    assert settings.database_url == "postgresql://health@db/app"


def test_settings_are_cached_until_cleared(monkeypatch):
    first = get_health_settings()
    monkeypatch.setenv("HEALTH_CACHE_TTL_SECONDS", "99")

    assert get_health_settings() is first
    get_health_settings.cache_clear()
    assert get_health_settings().cache_ttl_seconds == 99.0


def test_dotenv_file_supplies_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv("HEALTH_PROBE_TIMEOUT_SECONDS", raising=False)
    (tmp_path / ".env").write_text("HEALTH_PROBE_TIMEOUT_SECONDS=4\n")

    assert get_health_settings().probe_timeout_seconds == 4.0


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("HEALTH_BREAKER_THRESHOLD", "0"),
        ("HEALTH_PROBE_TIMEOUT_SECONDS", "0"),
        ("HEALTH_CACHE_TTL_SECONDS", "-1"),
        ("REDIS_PORT", "not-a-port"),
    ],
)
def test_invalid_values_rejected(monkeypatch, name, value):
    monkeypatch.setenv(name, value)

    with pytest.raises(ConfigurationError):
        get_health_settings()


def test_memory_thresholds_must_be_ordered(monkeypatch):
    monkeypatch.setenv("HEALTH_MEMORY_DEGRADED_PERCENT", "95")
    monkeypatch.setenv("HEALTH_MEMORY_UNHEALTHY_PERCENT", "90")

    with pytest.raises(ConfigurationError, match="must not exceed"):
        get_health_settings()


def test_blank_queue_names_disable_queue_monitoring(monkeypatch):
    monkeypatch.setenv("HEALTH_QUEUE_NAMES", "")

    assert get_health_settings().queue_names == ()
