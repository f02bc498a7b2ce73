"""Resolve the build version stamped on health reports."""

from importlib import metadata
from typing import Optional

DEFAULT_VERSION = "1.0.0"
DISTRIBUTION_NAME = "vitals"


def resolve_version(configured: Optional[str] = None) -> str:
    if configured:
        return configured
    try:
        return metadata.version(DISTRIBUTION_NAME)
    except metadata.PackageNotFoundError:
        return DEFAULT_VERSION
