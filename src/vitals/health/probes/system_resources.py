"""System resources probe: memory pressure, cpu time and uptime of this process."""

from __future__ import annotations

import logging
import platform
import sys
import time
from dataclasses import dataclass
from typing import Callable, Optional

import psutil

from ...exceptions import ProbeError
from ..health_types import HealthCheckResult, HealthStatus, MemorySnapshot, SystemResourcesMetadata

logger = logging.getLogger(__name__)

COMPONENT = "system-resources"
DEFAULT_DEGRADED_PERCENT = 75.0
DEFAULT_UNHEALTHY_PERCENT = 90.0

PSUTIL_ERRORS = (psutil.Error, OSError)


@dataclass(frozen=True)
class ResourceSample:
    memory: MemorySnapshot
    cpu_user_seconds: float
    cpu_system_seconds: float
    uptime_seconds: float


class MetricsReader:
    """Reads memory, cpu and uptime figures for one process through psutil."""

    def __init__(self, process: Optional[psutil.Process] = None):
        self.process = process or psutil.Process()

    def sample(self) -> ResourceSample:
        virtual = psutil.virtual_memory()
        memory_info = self.process.memory_info()
        cpu_times = self.process.cpu_times()
        return ResourceSample(
            memory=MemorySnapshot(
                used_bytes=int(virtual.total - virtual.available),
                total_bytes=int(virtual.total),
                process_rss_bytes=int(memory_info.rss),
            ),
            cpu_user_seconds=cpu_times.user,
            cpu_system_seconds=cpu_times.system,
            uptime_seconds=max(time.time() - self.process.create_time(), 0.0),
        )


def classify_memory(usage_percent: float, degraded_percent: float, unhealthy_percent: float) -> HealthStatus:
    if usage_percent > unhealthy_percent:
        return HealthStatus.UNHEALTHY
    if usage_percent > degraded_percent:
        return HealthStatus.DEGRADED
    return HealthStatus.HEALTHY


class SystemResourcesProbe:
    name = COMPONENT

    def __init__(
        self,
        sampler: Optional[Callable[[], ResourceSample]] = None,
        *,
        degraded_percent: float = DEFAULT_DEGRADED_PERCENT,
        unhealthy_percent: float = DEFAULT_UNHEALTHY_PERCENT,
    ):
        self.sampler = sampler or MetricsReader().sample
        self.degraded_percent = degraded_percent
        self.unhealthy_percent = unhealthy_percent

    async def check(self) -> HealthCheckResult:
        try:
            sample = self.sampler()
        except PSUTIL_ERRORS as exc:
            raise ProbeError(f"Failed to read system resources: {exc}", component=COMPONENT) from exc

        status = classify_memory(sample.memory.usage_percent, self.degraded_percent, self.unhealthy_percent)
        if status is not HealthStatus.HEALTHY:
            logger.warning("Memory usage at %.1f%% (%s)", sample.memory.usage_percent, status.value)

        return HealthCheckResult(
            status=status,
            component=COMPONENT,
            metadata=SystemResourcesMetadata(
                memory=sample.memory,
                cpu_user_seconds=sample.cpu_user_seconds,
                cpu_system_seconds=sample.cpu_system_seconds,
                uptime_seconds=sample.uptime_seconds,
                python_version=platform.python_version(),
                platform=sys.platform,
            ),
        )


__all__ = ["MetricsReader", "ResourceSample", "SystemResourcesProbe", "classify_memory"]
