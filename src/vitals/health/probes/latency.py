"""Latency measurement shared by the round-trip probes."""

import time

from ..health_types import HealthStatus


def start_timer() -> float:
    return time.perf_counter()


def elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000.0


def classify_latency(latency_ms: float, degraded_ms: float) -> HealthStatus:
    """A reachable dependency is degraded once it answers slower than ``degraded_ms``."""
    if latency_ms > degraded_ms:
        return HealthStatus.DEGRADED
    return HealthStatus.HEALTHY
