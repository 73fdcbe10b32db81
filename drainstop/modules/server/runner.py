from typing import Optional

from aiohttp import web

from ..config import ServerConfig
from ..lifecycle import (
    AiohttpRunnerListener,
    LifecycleState,
    ShutdownController,
    ShutdownControllerFactory,
)
from ..logging import BaseLogger
from .app import create_app
from .client import AioSessionCache


async def serve(config: ServerConfig, logger: BaseLogger, controller: Optional[ShutdownController] = None) -> int:
    """
    Serve the HTTP application until the shutdown controller terminates.

    Args:
        config: Server configuration
        logger: Logger instance
        controller: Controller to use; the process-wide default when omitted

    Returns:
        The exit code chosen by the controller. With the default exit
        function the process ends before this returns.
    """
    if controller is None:
        controller = ShutdownControllerFactory.get_instance().create_controller(
            logger, shutdown_timeout=config.shutdown_timeout
        )

    client_cache = AioSessionCache()
    app = create_app(config, logger, controller, client_cache)
    runner = web.AppRunner(app, access_log=None, shutdown_timeout=config.shutdown_timeout)
    await runner.setup()

    site = web.TCPSite(runner, config.host, config.port)
    try:
        await site.start()
    except OSError:
        await runner.cleanup()
        raise

    controller.resources.register("outbound HTTP client", client_cache.close)
    controller.register_shutdown_handlers(AiohttpRunnerListener(runner))
    logger.log_lifecycle(
        LifecycleState.ACCEPTING.value,
        f"Serving on http://{config.host}:{config.port} ({config.environment.value})"
    )

    await controller.wait_terminated()
    return int(controller.exit_code)
