"""One probe per monitored dependency."""

from .cache_service import CacheServiceProbe
from .database import DatabaseProbe
from .external_services import ConfiguredServiceCheck, ExternalServicesProbe, default_service_checks
from .queues import QueueProbe
from .storage import StorageProbe
from .system_resources import MetricsReader, ResourceSample, SystemResourcesProbe

__all__ = [
    "CacheServiceProbe",
    "ConfiguredServiceCheck",
    "DatabaseProbe",
    "ExternalServicesProbe",
    "MetricsReader",
    "QueueProbe",
    "ResourceSample",
    "StorageProbe",
    "SystemResourcesProbe",
    "default_service_checks",
]
