"""Helper modules for HealthReportAggregator."""

from .error_handler import ErrorHandler
from .status_aggregator import StatusAggregator
from .version import resolve_version

__all__ = [
    "ErrorHandler",
    "StatusAggregator",
    "resolve_version",
]
