"""Command line entry point for one-shot checks and the HTTP health server.

Usage:
    vitals-health check [--pretty]
    vitals-health serve [--host 0.0.0.0] [--port 8085]
"""

import argparse
import asyncio
import logging
import sys
from typing import Optional, Sequence

import orjson
from aiohttp import web

from .config.errors import ConfigurationError
from .config.health import get_health_settings
from .health.exposure import HTTP_OK, HealthEndpoint
from .health.health_aggregator_factory import build_default_aggregator
from .health.http_app import create_health_app
from .logging_config import setup_logging

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_UNHEALTHY = 1
EXIT_CONFIGURATION = 2


async def run_check(pretty: bool = False) -> int:
    """Run one aggregate check, print the JSON body, and map the status code to an exit code."""
    aggregator = build_default_aggregator(get_health_settings())
    try:
        response = await HealthEndpoint(aggregator).get_system_health()
    finally:
        await aggregator.aclose()

    option = orjson.OPT_INDENT_2 if pretty else 0
    sys.stdout.write(orjson.dumps(response.body, option=option).decode() + "\n")
    return EXIT_OK if response.status_code == HTTP_OK else EXIT_UNHEALTHY


def run_server(host: str, port: int) -> int:
    aggregator = build_default_aggregator(get_health_settings())
    app = create_health_app(HealthEndpoint(aggregator))

    async def _close_probes(_app: web.Application) -> None:
        await aggregator.aclose()

    app.on_cleanup.append(_close_probes)
    logger.info("Serving health checks on %s:%d", host, port)
    web.run_app(app, host=host, port=port, print=None)
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="vitals-health", description="Dependency health checks")
    subparsers = parser.add_subparsers(dest="command", required=True)

    check_parser = subparsers.add_parser("check", help="Run one health check and print the report")
    check_parser.add_argument("--pretty", action="store_true", help="Indent the JSON output")

    serve_parser = subparsers.add_parser("serve", help="Serve /health over HTTP")
    serve_parser.add_argument("--host", default="0.0.0.0")
    serve_parser.add_argument("--port", type=int, default=8085)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        if args.command == "check":
            setup_logging(quiet=True)
            return asyncio.run(run_check(pretty=args.pretty))
        setup_logging("health")
        return run_server(args.host, args.port)
    except ConfigurationError as exc:
        logger.error("Invalid configuration: %s", exc)
        return EXIT_CONFIGURATION


if __name__ == "__main__":
    sys.exit(main())
