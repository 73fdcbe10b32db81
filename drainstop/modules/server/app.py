"""aiohttp application served while the process is accepting."""

import asyncio
import time
from typing import Any, Dict, Optional

import aiohttp
from aiohttp import web

from ..config import ServerConfig
from ..lifecycle import LifecycleState, ShutdownController
from ..logging import BaseLogger
from .client import AioSessionCache
from .errors import Errors, error_response

CONFIG_KEY = web.AppKey("config", ServerConfig)
LOGGER_KEY = web.AppKey("logger", BaseLogger)
CONTROLLER_KEY = web.AppKey("controller", ShutdownController)
CLIENT_CACHE_KEY = web.AppKey("client_cache", AioSessionCache)

TRUTHY = ("1", "true", "yes")


@web.middleware
async def access_log_middleware(request: web.Request, handler) -> web.StreamResponse:
    logger = request.app[LOGGER_KEY]
    started = time.perf_counter()
    try:
        response = await handler(request)
    except web.HTTPException as e:
        logger.log_request(request.method, request.path, e.status, (time.perf_counter() - started) * 1000)
        raise
    logger.log_request(request.method, request.path, response.status, (time.perf_counter() - started) * 1000)
    return response


@web.middleware
async def error_middleware(request: web.Request, handler) -> web.StreamResponse:
    config = request.app[CONFIG_KEY]
    context = f"{request.method} {request.path}"
    try:
        return await handler(request)
    except web.HTTPException as e:
        if e.status < 400:
            raise
        code = e.reason.upper().replace(" ", "_")
        return web.json_response({"message": e.reason, "code": code}, status=e.status)
    except Exception as e:
        return error_response(e, context, request.app[LOGGER_KEY], config.is_production)


@web.middleware
async def drain_guard_middleware(request: web.Request, handler) -> web.StreamResponse:
    """Turn away requests that reach us after draining started."""
    controller = request.app[CONTROLLER_KEY]
    if controller.state is not LifecycleState.ACCEPTING:
        error = Errors.shutting_down()
        response = web.json_response(
            {"message": error.message, "code": error.code, "state": controller.state.value},
            status=error.status_code
        )
        response.force_close()
        return response
    return await handler(request)


async def _probe_upstream(session: aiohttp.ClientSession, url: str) -> Dict[str, Any]:
    try:
        async with session.get(url) as response:
            return {
                "status": "ok" if response.status < 400 else "down",
                "http_status": response.status,
            }
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        return {"status": "down", "error": str(e) or e.__class__.__name__}


async def health(request: web.Request) -> web.Response:
    controller = request.app[CONTROLLER_KEY]
    config = request.app[CONFIG_KEY]
    body: Dict[str, Any] = {"status": "ok", "state": controller.state.value}
    status = 200

    if request.query.get("deep", "").lower() in TRUTHY and config.upstreams:
        session = await request.app[CLIENT_CACHE_KEY].get_session()
        names = sorted(config.upstreams)
        results = await asyncio.gather(
            *(_probe_upstream(session, config.upstreams[name]) for name in names)
        )
        body["upstreams"] = dict(zip(names, results))
        if any(result["status"] != "ok" for result in results):
            body["status"] = "degraded"
            status = 503

    return web.json_response(body, status=status)


def create_app(
    config: ServerConfig,
    logger: BaseLogger,
    controller: ShutdownController,
    client_cache: Optional[AioSessionCache] = None
) -> web.Application:
    """
    Build the HTTP application.

    Args:
        config: Server configuration
        logger: Logger for access and error lines
        controller: Shutdown controller whose state gates incoming requests
        client_cache: Shared outbound client used by deep health checks
    """
    app = web.Application(middlewares=[
        access_log_middleware,
        error_middleware,
        drain_guard_middleware,
    ])
    app[CONFIG_KEY] = config
    app[LOGGER_KEY] = logger
    app[CONTROLLER_KEY] = controller
    app[CLIENT_CACHE_KEY] = client_cache or AioSessionCache()
    app.router.add_get("/api/health", health)
    return app
