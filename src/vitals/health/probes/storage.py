"""Object storage probe: S3 ``list_buckets`` round trip through aioboto3."""

from __future__ import annotations

import logging
from typing import Any, Optional

import aioboto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from ...config.health import StorageSettings
from ...exceptions import ConnectivityError
from ..health_types import HealthCheckResult, StorageMetadata
from .latency import classify_latency, elapsed_ms, start_timer

logger = logging.getLogger(__name__)

COMPONENT = "storage"
DEFAULT_DEGRADED_MS = 2000.0

STORAGE_ERRORS = (BotoCoreError, ClientError, OSError)


def build_client_kwargs(settings: StorageSettings) -> dict[str, Any]:
    client_kwargs: dict[str, Any] = {
        "service_name": "s3",
        "region_name": settings.region,
        "config": Config(
            signature_version="s3v4",
            s3={"addressing_style": "path"},
            retries={"max_attempts": 1},
        ),
    }
    if settings.access_key:
        client_kwargs["aws_access_key_id"] = settings.access_key
    if settings.secret_key:
        client_kwargs["aws_secret_access_key"] = settings.secret_key
    if settings.endpoint_url:
        client_kwargs["endpoint_url"] = settings.endpoint_url
    return client_kwargs


class StorageProbe:
    name = COMPONENT

    def __init__(
        self,
        settings: Optional[StorageSettings] = None,
        *,
        session: Optional[aioboto3.Session] = None,
        degraded_ms: float = DEFAULT_DEGRADED_MS,
    ):
        self.settings = settings or StorageSettings()
        self.session = session or aioboto3.Session()
        self.degraded_ms = degraded_ms

    async def check(self) -> HealthCheckResult:
        started = start_timer()
        try:
            async with self.session.client(**build_client_kwargs(self.settings)) as client:
                response = await client.list_buckets()
        except STORAGE_ERRORS as exc:
            raise ConnectivityError(f"Object storage call failed: {exc}", component=COMPONENT) from exc
        latency_ms = elapsed_ms(started)

        buckets = response.get("Buckets") or []
        return HealthCheckResult(
            status=classify_latency(latency_ms, self.degraded_ms),
            component=COMPONENT,
            latency_ms=latency_ms,
            metadata=StorageMetadata(buckets_count=len(buckets)),
        )


__all__ = ["STORAGE_ERRORS", "StorageProbe", "build_client_kwargs"]
