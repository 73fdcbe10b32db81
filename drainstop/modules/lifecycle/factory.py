"""Process-wide registry of named shutdown controllers."""

from typing import Callable, Dict, Optional

from ..logging import BaseLogger
from .controller import DEFAULT_SHUTDOWN_TIMEOUT, ShutdownController


class ShutdownControllerFactory:
    """Hands out one controller per name, so every part of a process shares it."""

    _instance = None

    def __init__(self):
        self._controllers: Dict[str, ShutdownController] = {}

    @classmethod
    def get_instance(cls) -> 'ShutdownControllerFactory':
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def create_controller(
        self,
        logger: BaseLogger,
        name: str = "default",
        shutdown_timeout: float = DEFAULT_SHUTDOWN_TIMEOUT,
        exit_process: Optional[Callable[[int], None]] = None
    ) -> ShutdownController:
        """
        Look up the controller registered under ``name``, building it on
        first use.

        The timeout and exit function only take effect when the controller
        is built; a later call with different values gets the controller
        that is already there.

        Args:
            logger: Receives the controller's lifecycle events
            name: Registry key, "default" for the process-wide controller
            shutdown_timeout: Seconds before a drain is forced
            exit_process: Replacement for ending the process
        """
        if name not in self._controllers:
            self._controllers[name] = ShutdownController(
                logger,
                shutdown_timeout=shutdown_timeout,
                exit_process=exit_process
            )

        return self._controllers[name]

    def get_controller(self, name: str = "default") -> Optional[ShutdownController]:
        """Controller registered under ``name``, or None when nothing built it yet."""
        return self._controllers.get(name)

    def reset(self) -> None:
        """Forget every controller, restoring any handlers they installed."""
        for controller in self._controllers.values():
            controller.restore_handlers()
        self._controllers.clear()
