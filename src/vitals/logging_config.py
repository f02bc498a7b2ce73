"""
Centralized logging configuration for the health service.

Provides a single setup_logging function that configures logging with:
- Console output (quiet mode for CLI output)
- File output to logs/{service_name}.log when a service name is given
- Fresh log file on each start unless LOG_APPEND=1
"""

import logging
import logging.handlers
import sys
import threading
from pathlib import Path
from typing import Optional

from .config import env_bool, env_str

_config_lock = threading.Lock()
_MODULE_LOGGER = logging.getLogger(__name__)
_TECHNICAL_FORMAT = "%(asctime)s.%(msecs)03d - %(name)s - %(levelname)s - %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_NOISY_LOGGERS = (
    "asyncio",
    "aiohttp",
    "aiohttp.access",
    "asyncpg",
    "redis",
    "redis.asyncio",
    "botocore",
    "aiobotocore",
    "aioboto3",
    "urllib3",
)


def _close_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        try:
            handler.close()
        except OSError as exc:
            _MODULE_LOGGER.debug("Handler close failed: %s", exc)
    logger.handlers = []


def _build_console_handler(quiet: bool) -> logging.Handler:
    if quiet:
        formatter = logging.Formatter("%(message)s")
    else:
        formatter = logging.Formatter(_TECHNICAL_FORMAT, _DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(logging.WARNING if quiet else logging.DEBUG)
    return console_handler


def _build_file_handler(service_name: Optional[str], log_directory: Optional[Path]) -> Optional[logging.Handler]:
    if not service_name:
        return None

    logs_dir = log_directory or Path(env_str("LOG_DIRECTORY", or_value="logs"))
    logs_dir.mkdir(parents=True, exist_ok=True)
    file_mode = "a" if env_bool("LOG_APPEND", or_value=False) else "w"

    file_handler = logging.handlers.WatchedFileHandler(logs_dir / f"{service_name}.log", mode=file_mode)
    file_handler.setFormatter(logging.Formatter(_TECHNICAL_FORMAT, _DATE_FORMAT))
    file_handler.setLevel(logging.INFO)
    return file_handler


def _suppress_noisy_third_parties() -> None:
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def setup_logging(
    service_name: Optional[str] = None,
    *,
    quiet: bool = False,
    log_directory: Optional[Path] = None,
) -> None:
    """Configure the root logger; calling again replaces the previous handlers."""

    with _config_lock:
        root_logger = logging.getLogger()
        _close_handlers(root_logger)

        root_logger.addHandler(_build_console_handler(quiet))
        file_handler = _build_file_handler(service_name, log_directory)
        if file_handler:
            root_logger.addHandler(file_handler)

        level_name = env_str("LOG_LEVEL", or_value="INFO").upper()
        root_logger.setLevel(getattr(logging, level_name, logging.INFO))
        _suppress_noisy_third_parties()
