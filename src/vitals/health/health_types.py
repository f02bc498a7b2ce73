"""Data types for dependency health checks and the aggregate report."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional, Protocol, Tuple, Union


class HealthStatus(Enum):
    """Health of a single dependency or of the whole system"""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _isoformat(moment: datetime) -> str:
    return moment.isoformat().replace("+00:00", "Z")


class ComponentMetadata(Protocol):
    def to_dict(self) -> dict[str, Any]: ...


@dataclass(frozen=True)
class ConnectionPoolStats:
    active: int
    idle: int
    total: int
    max_size: int

    def to_dict(self) -> dict[str, Any]:
        return {"active": self.active, "idle": self.idle, "total": self.total, "max": self.max_size}


@dataclass(frozen=True)
class DatabaseMetadata:
    connection_pool: ConnectionPoolStats

    def to_dict(self) -> dict[str, Any]:
        return {"connectionPool": self.connection_pool.to_dict()}


@dataclass(frozen=True)
class CacheServiceMetadata:
    used_memory: str
    version: str

    def to_dict(self) -> dict[str, Any]:
        return {"usedMemory": self.used_memory, "version": self.version}


@dataclass(frozen=True)
class ExternalServicesMetadata:
    """Per-service breakdown; the only probe whose detail is open-ended."""

    checks: Mapping[str, str]
    success_count: int
    total_count: int
    errors: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "checks", MappingProxyType(dict(self.checks)))
        object.__setattr__(self, "errors", MappingProxyType(dict(self.errors)))

    @property
    def success_rate(self) -> str:
        return f"{self.success_count}/{self.total_count}"

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"checks": dict(self.checks), "successRate": self.success_rate}
        if self.errors:
            payload["errors"] = dict(self.errors)
        return payload


@dataclass(frozen=True)
class MemorySnapshot:
    used_bytes: int
    total_bytes: int
    process_rss_bytes: int

    @property
    def usage_percent(self) -> float:
        if self.total_bytes <= 0:
            return 0.0
        return self.used_bytes / self.total_bytes * 100.0


@dataclass(frozen=True)
class SystemResourcesMetadata:
    memory: MemorySnapshot
    cpu_user_seconds: float
    cpu_system_seconds: float
    uptime_seconds: float
    python_version: str
    platform: str

    def to_dict(self) -> dict[str, Any]:
        mb = 1024 * 1024
        return {
            "memory": {
                "used": f"{round(self.memory.used_bytes / mb)}MB",
                "total": f"{round(self.memory.total_bytes / mb)}MB",
                "usagePercent": f"{round(self.memory.usage_percent)}%",
                "rss": f"{round(self.memory.process_rss_bytes / mb)}MB",
            },
            "cpu": {
                "user": f"{round(self.cpu_user_seconds * 1000)}ms",
                "system": f"{round(self.cpu_system_seconds * 1000)}ms",
            },
            "uptime": f"{round(self.uptime_seconds)}s",
            "pythonVersion": self.python_version,
            "platform": self.platform,
        }


@dataclass(frozen=True)
class QueueDepth:
    waiting: int
    active: int
    delayed: int
    failed: int

    def to_dict(self) -> dict[str, int]:
        return {"waiting": self.waiting, "active": self.active, "delayed": self.delayed, "failed": self.failed}


@dataclass(frozen=True)
class QueueMetadata:
    queues: Mapping[str, QueueDepth]
    monitored: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "queues", MappingProxyType(dict(self.queues)))

    def to_dict(self) -> dict[str, Any]:
        return {
            "monitored": self.monitored,
            "queues": {name: depth.to_dict() for name, depth in self.queues.items()},
        }


@dataclass(frozen=True)
class StorageMetadata:
    buckets_count: int

    def to_dict(self) -> dict[str, Any]:
        return {"bucketsCount": self.buckets_count}


MetadataType = Union[
    DatabaseMetadata,
    CacheServiceMetadata,
    ExternalServicesMetadata,
    SystemResourcesMetadata,
    QueueMetadata,
    StorageMetadata,
]


@dataclass(frozen=True)
class HealthCheckResult:
    """Outcome of one dependency probe. Immutable once produced."""

    status: HealthStatus
    component: str
    latency_ms: Optional[float] = None
    error: Optional[str] = None
    metadata: Optional[MetadataType] = None
    last_checked: datetime = field(default_factory=utc_now)

    @classmethod
    def unhealthy(cls, component: str, error: str) -> "HealthCheckResult":
        return cls(status=HealthStatus.UNHEALTHY, component=component, error=error)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "status": self.status.value,
            "component": self.component,
            "lastChecked": _isoformat(self.last_checked),
        }
        if self.latency_ms is not None:
            payload["latencyMs"] = round(self.latency_ms, 2)
        if self.error is not None:
            payload["error"] = self.error
        if self.metadata is not None:
            payload["metadata"] = self.metadata.to_dict()
        return payload


@dataclass(frozen=True)
class SystemHealth:
    """Aggregate report built fresh on every check."""

    overall: HealthStatus
    components: Tuple[HealthCheckResult, ...]
    timestamp: datetime
    version: str

    def component(self, name: str) -> HealthCheckResult:
        for result in self.components:
            if result.component == name:
                return result
        raise KeyError(name)

    def to_dict(self) -> dict[str, Any]:
        return {
            "overall": self.overall.value,
            "components": [result.to_dict() for result in self.components],
            "timestamp": _isoformat(self.timestamp),
            "version": self.version,
        }


__all__ = [
    "CacheServiceMetadata",
    "ComponentMetadata",
    "ConnectionPoolStats",
    "DatabaseMetadata",
    "ExternalServicesMetadata",
    "HealthCheckResult",
    "HealthStatus",
    "MemorySnapshot",
    "MetadataType",
    "QueueDepth",
    "QueueMetadata",
    "StorageMetadata",
    "SystemHealth",
    "SystemResourcesMetadata",
    "utc_now",
]
