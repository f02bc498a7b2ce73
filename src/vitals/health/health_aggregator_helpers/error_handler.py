"""Handle errors escaping guarded probes."""

import logging

from ..guarded_probe import describe_error
from ..health_types import HealthCheckResult

logger = logging.getLogger(__name__)

FALLBACK_ERROR = "Health check failed"


class ErrorHandler:
    """Turn whatever a probe task produced into a well-formed result."""

    @staticmethod
    def ensure_result(component: str, result: HealthCheckResult | BaseException) -> HealthCheckResult:
        """
        Ensure a probe task result is valid.

        Args:
            component: Component registered at this position
            result: Result from the guarded probe or the exception it raised

        Returns:
            The result itself, or an unhealthy result carrying the raw error text
        """
        if isinstance(result, HealthCheckResult):
            return result
        logger.error("Health check for %s raised outside its guard: %r", component, result)
        error_text = describe_error(result) if isinstance(result, BaseException) else FALLBACK_ERROR
        return HealthCheckResult.unhealthy(component, error_text)
