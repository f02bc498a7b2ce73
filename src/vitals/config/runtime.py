"""
Environment lookups for health settings.

A variable set in the process environment wins. Otherwise the first of
``.env`` and ``config/runtime_env.json`` that defines it supplies a default,
and only then does the caller's fallback apply.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, Optional, Sequence, TypeVar

from .defaults_files import read_dotenv, read_json_defaults
from .errors import ConfigurationError

T = TypeVar("T")

_TRUE_VALUES = frozenset({"1", "true", "t", "yes", "y", "on"})
_FALSE_VALUES = frozenset({"0", "false", "f", "no", "n", "off"})

_DOTENV_CANDIDATES = (Path(".env"),)
_JSON_ENV_CANDIDATES = (Path("config/runtime_env.json"),)

_DEFAULT_VALUES: dict[str, str] | None = None


def _load_default_values() -> dict[str, str]:
    global _DEFAULT_VALUES
    if _DEFAULT_VALUES is None:
        sources = [read_dotenv(path) for path in _DOTENV_CANDIDATES]
        sources += [read_json_defaults(path) for path in _JSON_ENV_CANDIDATES]
        defaults: dict[str, str] = {}
        for source in sources:
            for key, value in source.items():
                defaults.setdefault(key, value)
        _DEFAULT_VALUES = defaults
    return _DEFAULT_VALUES


def reset_default_values() -> None:
    """Forget cached file defaults so the next lookup re-reads them."""
    global _DEFAULT_VALUES
    _DEFAULT_VALUES = None


def _lookup(name: str, *, strip: bool = True, allow_blank: bool = False) -> Optional[str]:
    for candidate in (os.getenv(name), _load_default_values().get(name)):
        if candidate is None:
            continue
        value = candidate.strip() if strip else candidate
        if value or allow_blank:
            return value
    return None


def env_str(
    name: str,
    or_value: str | None = None,
    *,
    required: bool = False,
    strip: bool = True,
    allow_blank: bool = False,
) -> str | None:
    value = _lookup(name, strip=strip, allow_blank=allow_blank)
    if value is None:
        if required:
            raise ConfigurationError.required(name)
        return or_value
    return value


def _env_parsed(name: str, or_value: T | None, required: bool, kind: str, parse: Callable[[str], T]) -> T | None:
    raw = _lookup(name)
    if raw is None:
        if required and or_value is None:
            raise ConfigurationError.required(name)
        return or_value
    try:
        return parse(raw)
    except ValueError as exc:
        raise ConfigurationError.not_parseable(name, raw, kind) from exc


def _parse_bool(raw: str) -> bool:
    lowered = raw.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(raw)


def env_int(name: str, or_value: int | None = None, *, required: bool = False) -> int | None:
    return _env_parsed(name, or_value, required, "an integer", int)


def env_float(name: str, or_value: float | None = None, *, required: bool = False) -> float | None:
    return _env_parsed(name, or_value, required, "a number", float)


def env_bool(name: str, or_value: bool | None = None, *, required: bool = False) -> bool | None:
    return _env_parsed(name, or_value, required, "a boolean", _parse_bool)


def env_list(
    name: str,
    *,
    or_value: Sequence[str] | None = None,
    separator: str = ",",
    unique: bool = True,
    required: bool = False,
) -> tuple[str, ...] | None:
    """
    Delimited values with blanks dropped and, by default, duplicates removed in order.

    A variable that is set but blank yields an empty tuple, so a list can be
    switched off explicitly instead of falling back to ``or_value``.
    """
    raw = _lookup(name, allow_blank=True)
    if raw is None:
        if required and not or_value:
            raise ConfigurationError.required(name)
        return None if or_value is None else tuple(or_value)

    items = [item.strip() for item in raw.split(separator)]
    items = [item for item in items if item]
    if unique:
        items = list(dict.fromkeys(items))
    if required and not items:
        raise ConfigurationError.invalid_value(name, raw, "at least one value is required")
    return tuple(items)


def env_seconds(name: str, or_value: float | None = None, *, required: bool = False) -> float | None:
    """A non-negative duration in seconds."""
    value = env_float(name, or_value=or_value, required=required)
    if value is not None and value < 0:
        raise ConfigurationError.invalid_value(name, value, "durations cannot be negative")
    return value
