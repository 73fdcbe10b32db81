"""Registry of dependent resources released during shutdown."""

import asyncio
import inspect
from dataclasses import dataclass
from typing import Any, Callable, List, Tuple

from ..logging import BaseLogger
from .errors import TeardownError


@dataclass
class DependentResource:
    """A handle that must be released before the process exits."""
    name: str
    close: Callable[[], Any]
    priority: int = 0


class ResourceRegistry:
    """Keeps dependent resources ordered by priority and closes them on demand."""

    def __init__(self, logger: BaseLogger):
        self.logger = logger
        self._resources: List[DependentResource] = []

    @property
    def resources(self) -> List[DependentResource]:
        return list(self._resources)

    def register(self, name: str, close: Callable[[], Any], priority: int = 0) -> None:
        """Register a resource.
        
        Args:
            name: Name of the resource, used in log lines
            close: Callable releasing the resource; may return an awaitable.
                Plain callables run in a worker thread.
            priority: Priority of the resource (lower numbers close first)
        """
        for existing in self._resources:
            if existing.name == name:
                existing.close = close
                existing.priority = priority
                self._resources.sort(key=lambda r: r.priority)
                return

        self._resources.append(DependentResource(name, close, priority))
        # list.sort is stable, so equal priorities keep registration order
        self._resources.sort(key=lambda r: r.priority)

    def unregister(self, name: str) -> bool:
        before = len(self._resources)
        self._resources = [r for r in self._resources if r.name != name]
        return len(self._resources) != before

    async def close_all(self) -> None:
        """
        Close every registered resource in priority order.

        A failing resource does not stop the others from being closed.
        Nothing is retried.

        Raises:
            TeardownError: If one or more resources failed to close
        """
        failures: List[Tuple[str, BaseException]] = []

        for resource in self.resources:
            try:
                if inspect.iscoroutinefunction(resource.close):
                    result = resource.close()
                else:
                    # Plain callables may block, keep them off the event loop
                    result = await asyncio.to_thread(resource.close)
                if inspect.isawaitable(result):
                    await result
                self.logger.log_info(f"Closed resource: {resource.name}")
            except Exception as e:
                self.logger.log_error(f"Error closing resource {resource.name}: {str(e)}")
                failures.append((resource.name, e))

        if failures:
            raise TeardownError(failures)
