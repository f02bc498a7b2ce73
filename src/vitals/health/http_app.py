"""aiohttp application serving the health endpoint and breaker administration."""

from __future__ import annotations

import logging
from typing import Any

import orjson
from aiohttp import web

from .exposure import HTTP_OK, HealthEndpoint

logger = logging.getLogger(__name__)

ENDPOINT_KEY = web.AppKey("health_endpoint", HealthEndpoint)


def json_response(data: Any, status: int = HTTP_OK) -> web.Response:
    return web.Response(body=orjson.dumps(data), status=status, content_type="application/json")


async def get_health(request: web.Request) -> web.Response:
    """GET /health"""
    response = await request.app[ENDPOINT_KEY].get_system_health()
    return json_response(response.body, status=response.status_code)


async def get_circuit_breakers(request: web.Request) -> web.Response:
    """GET /health/circuit-breakers"""
    states = request.app[ENDPOINT_KEY].get_circuit_breaker_states()
    return json_response({component: state.to_dict() for component, state in states.items()})


async def reset_circuit_breakers(request: web.Request) -> web.Response:
    """POST /health/circuit-breakers/reset"""
    request.app[ENDPOINT_KEY].reset_circuit_breakers()
    logger.info("Circuit breakers reset via %s", request.remote)
    return json_response({"reset": True})


def create_health_app(endpoint: HealthEndpoint) -> web.Application:
    app = web.Application()
    app[ENDPOINT_KEY] = endpoint
    app.router.add_get("/health", get_health)
    app.router.add_get("/health/circuit-breakers", get_circuit_breakers)
    app.router.add_post("/health/circuit-breakers/reset", reset_circuit_breakers)
    return app


__all__ = ["create_health_app", "json_response"]
