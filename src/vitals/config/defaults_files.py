"""Readers for the optional files that supply environment defaults."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import orjson

from .errors import ConfigurationError


def read_dotenv(path: Path) -> Dict[str, str]:
    """``KEY=value`` lines; blank lines, comments and ``export`` prefixes are tolerated."""
    if not path.exists():
        return {}
    try:
        lines = path.read_text().splitlines()
    except OSError as exc:
        raise ConfigurationError(f"Failed to read {path}") from exc

    values: Dict[str, str] = {}
    for line in lines:
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        if line.startswith("export "):
            line = line[len("export ") :]
        key, _, raw = line.partition("=")
        key = key.strip()
        if key:
            values[key] = raw.strip().strip("'\"")
    return values


def _as_env_string(path: Path, key: str, value: Any) -> str:
    if isinstance(value, (dict, list)):
        raise ConfigurationError(f"{path}: {key} must be a scalar, not {type(value).__name__}")
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def read_json_defaults(path: Path) -> Dict[str, str]:
    """Flat ``{"ENV_NAME": scalar}`` object, stringified the way real environment values are."""
    if not path.exists():
        return {}
    try:
        payload = orjson.loads(path.read_bytes())
    except orjson.JSONDecodeError as exc:
        raise ConfigurationError(f"Invalid JSON in {path}") from exc
    except OSError as exc:
        raise ConfigurationError(f"Failed to read {path}") from exc

    if not isinstance(payload, dict):
        raise ConfigurationError(f"{path} must hold a JSON object")
    return {str(key): _as_env_string(path, str(key), value) for key, value in payload.items()}


__all__ = ["read_dotenv", "read_json_defaults"]
