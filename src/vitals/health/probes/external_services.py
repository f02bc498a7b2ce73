"""
External services probe.

Fans out to independent sub-checks for third-party providers (email,
payments, identity). A sub-check fails when its credential is missing or,
when a reachability URL is configured, when that URL does not answer.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Optional, Protocol, Sequence

import aiohttp
from aiohttp import ClientError, ClientTimeout

from ...config.errors import ConfigurationError
from ...config.health import ExternalServiceSettings
from ...exceptions import ConnectivityError
from ..guarded_probe import describe_error
from ..health_types import ExternalServicesMetadata, HealthCheckResult, HealthStatus

logger = logging.getLogger(__name__)

COMPONENT = "external-services"
DEFAULT_REQUEST_TIMEOUT_SECONDS = 5.0
_SERVER_ERROR = 500


class ServiceCheck(Protocol):
    name: str

    async def run(self, session: aiohttp.ClientSession) -> None:
        """Return normally when the service is usable; raise otherwise."""


@dataclass(frozen=True)
class ConfiguredServiceCheck:
    """Credential presence plus an optional HTTP reachability probe."""

    name: str
    credential: Optional[str]
    setting: str
    health_url: Optional[str] = None
    request_timeout_seconds: float = DEFAULT_REQUEST_TIMEOUT_SECONDS

    async def run(self, session: aiohttp.ClientSession) -> None:
        if not self.credential:
            raise ConfigurationError.not_configured(self.name, self.setting)
        if not self.health_url:
            return

        timeout = ClientTimeout(total=self.request_timeout_seconds)
        try:
            async with session.get(self.health_url, timeout=timeout) as response:
                if response.status >= _SERVER_ERROR:
                    raise ConnectivityError(f"{self.name} answered HTTP {response.status}", component=self.name)
        except (ClientError, asyncio.TimeoutError, OSError) as exc:
            raise ConnectivityError(f"{self.name} unreachable: {describe_error(exc)}", component=self.name) from exc


def default_service_checks(settings: ExternalServiceSettings) -> list[ConfiguredServiceCheck]:
    identity_health_url = None
    if settings.supabase_url:
        identity_health_url = f"{settings.supabase_url.rstrip('/')}/auth/v1/health"

    return [
        ConfiguredServiceCheck("resend", settings.resend_api_key, "RESEND_API_KEY", settings.resend_health_url),
        ConfiguredServiceCheck("stripe", settings.stripe_secret_key, "STRIPE_SECRET_KEY", settings.stripe_health_url),
        ConfiguredServiceCheck("supabase", settings.supabase_url, "SUPABASE_URL", identity_health_url),
    ]


class ExternalServicesProbe:
    """Healthy when every sub-check passes, degraded when some do, unhealthy when none do."""

    name = COMPONENT

    def __init__(
        self,
        checks: Sequence[ServiceCheck],
        *,
        session_factory: Callable[[], aiohttp.ClientSession] = aiohttp.ClientSession,
    ):
        if not checks:
            raise ValueError("ExternalServicesProbe needs at least one service check")
        self.checks = list(checks)
        self.session_factory = session_factory

    async def check(self) -> HealthCheckResult:
        async with self.session_factory() as session:
            outcomes = await asyncio.gather(*(check.run(session) for check in self.checks), return_exceptions=True)

        breakdown: dict[str, str] = {}
        errors: dict[str, str] = {}
        for service_check, outcome in zip(self.checks, outcomes):
            if isinstance(outcome, BaseException):
                logger.info("External service %s check failed: %s", service_check.name, describe_error(outcome))
                breakdown[service_check.name] = "failed"
                errors[service_check.name] = describe_error(outcome)
            else:
                breakdown[service_check.name] = "healthy"

        success_count = len(breakdown) - len(errors)
        total_count = len(breakdown)
        if success_count == total_count:
            status = HealthStatus.HEALTHY
        elif success_count > 0:
            status = HealthStatus.DEGRADED
        else:
            status = HealthStatus.UNHEALTHY

        return HealthCheckResult(
            status=status,
            component=COMPONENT,
            metadata=ExternalServicesMetadata(
                checks=breakdown,
                success_count=success_count,
                total_count=total_count,
                errors=errors,
            ),
        )


__all__ = [
    "ConfiguredServiceCheck",
    "ExternalServicesProbe",
    "ServiceCheck",
    "default_service_checks",
]
