from vitals.health.health_aggregator_helpers.status_aggregator import StatusAggregator
from vitals.health.health_types import HealthCheckResult, HealthStatus


def results(*statuses):
    return [HealthCheckResult(status=status, component=f"c{index}") for index, status in enumerate(statuses)]


def test_all_healthy():
    assert StatusAggregator.aggregate_status(results(HealthStatus.HEALTHY, HealthStatus.HEALTHY)) is HealthStatus.HEALTHY


def test_degraded_beats_healthy():
    statuses = results(HealthStatus.HEALTHY, HealthStatus.DEGRADED, HealthStatus.HEALTHY)
    assert StatusAggregator.aggregate_status(statuses) is HealthStatus.DEGRADED


def test_unhealthy_beats_everything():
    statuses = results(HealthStatus.DEGRADED, HealthStatus.UNHEALTHY, HealthStatus.HEALTHY)
    assert StatusAggregator.aggregate_status(statuses) is HealthStatus.UNHEALTHY


def test_empty_is_healthy():
    assert StatusAggregator.aggregate_status([]) is HealthStatus.HEALTHY
