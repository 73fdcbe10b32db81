"""Process lifecycle management: draining a listener and its resources on shutdown."""

from ..logging import BaseLogger
from .controller import (
    DEFAULT_SHUTDOWN_TIMEOUT,
    UNCAUGHT_EXCEPTION,
    UNHANDLED_REJECTION,
    ExitCode,
    ShutdownController,
    terminate_process,
)
from .errors import LifecycleError, TeardownError
from .factory import ShutdownControllerFactory
from .listener import AiohttpRunnerListener, AsyncioServerListener, Listener
from .resources import DependentResource, ResourceRegistry
from .state import LifecycleState, LifecycleStateCell


def register_shutdown_handlers(
    listener: Listener,
    logger: BaseLogger,
    shutdown_timeout: float = DEFAULT_SHUTDOWN_TIMEOUT
) -> None:
    """Install shutdown triggers on the process-wide default controller."""
    controller = ShutdownControllerFactory.get_instance().create_controller(
        logger, shutdown_timeout=shutdown_timeout
    )
    controller.register_shutdown_handlers(listener)


async def graceful_shutdown(listener: Listener, reason: str, logger: BaseLogger) -> None:
    """Run the drain-and-exit sequence on the process-wide default controller."""
    controller = ShutdownControllerFactory.get_instance().create_controller(logger)
    await controller.graceful_shutdown(listener, reason)


__all__ = [
    'DEFAULT_SHUTDOWN_TIMEOUT',
    'UNCAUGHT_EXCEPTION',
    'UNHANDLED_REJECTION',
    'ExitCode',
    'ShutdownController',
    'ShutdownControllerFactory',
    'terminate_process',
    'LifecycleError',
    'TeardownError',
    'Listener',
    'AsyncioServerListener',
    'AiohttpRunnerListener',
    'DependentResource',
    'ResourceRegistry',
    'LifecycleState',
    'LifecycleStateCell',
    'register_shutdown_handlers',
    'graceful_shutdown',
]
