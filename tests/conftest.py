"""Root pytest configuration and shared fixtures."""

import pytest

from tests.helpers.health_fakes import FakeClock
from vitals.config.health import get_health_settings
from vitals.config.runtime import reset_default_values


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture(autouse=True)
def _isolate_settings(monkeypatch, tmp_path):
    """Keep repository .env files and cached settings out of every test."""
    monkeypatch.chdir(tmp_path)
    reset_default_values()
    get_health_settings.cache_clear()
    yield
    reset_default_values()
    get_health_settings.cache_clear()
