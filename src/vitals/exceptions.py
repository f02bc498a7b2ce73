"""Common exception classes for the application.

All custom exceptions should inherit from these base classes to maintain
a consistent exception hierarchy across the codebase.

Exception classes support two patterns:
1. No-argument raise: raise ConnectivityError()
2. Contextual attributes: err = ConnectivityError(component="cache", latency_ms=12.5); raise err
"""

from typing import Any

from .config.errors import ConfigurationError


class ApplicationError(Exception):
    """Base exception for all application errors.

    Supports keyword arguments that are stored as attributes for debugging.
    """

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        if not message:
            message = self.__class__.__doc__ or "Application error occurred"
        super().__init__(message)
        for key, value in kwargs.items():
            setattr(self, key, value)


class ProbeError(ApplicationError):
    """Dependency probe failed."""

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        if not message:
            message = "Dependency probe failed"
        super().__init__(message, **kwargs)


class ConnectivityError(ProbeError):
    """Dependency is unreachable or the call failed."""

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        if not message:
            message = "Dependency is unreachable"
        super().__init__(message, **kwargs)


class ProbeTimeoutError(ConnectivityError):
    """Probe exceeded its execution deadline."""

    def __init__(self, component: str = "", timeout_seconds: float | None = None, **kwargs: Any) -> None:
        if component and timeout_seconds is not None:
            message = f"{component} check timed out after {timeout_seconds:g}s"
        else:
            message = "Probe exceeded its execution deadline"
        super().__init__(message, component=component, timeout_seconds=timeout_seconds, **kwargs)


class CircuitOpenError(ProbeError):
    """Circuit breaker is open; the dependency call was skipped."""

    MESSAGE = "circuit breaker open"

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        super().__init__(message or self.MESSAGE, **kwargs)


__all__ = [
    "ApplicationError",
    "CircuitOpenError",
    "ConfigurationError",
    "ConnectivityError",
    "ProbeError",
    "ProbeTimeoutError",
]
