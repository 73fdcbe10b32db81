"""Adapters for the network listeners a shutdown controller can drain."""

import asyncio
from abc import ABC, abstractmethod

from aiohttp import web


class Listener(ABC):
    """A network listener that can stop accepting and drain in-flight work."""

    name: str = "listener"

    @abstractmethod
    async def close(self) -> None:
        """Stop accepting new connections and return once in-flight ones are done.

        Must be safe to call more than once.
        """
        pass


class AsyncioServerListener(Listener):
    """Wraps a server returned by ``asyncio.start_server``/``loop.create_server``."""

    def __init__(self, server: asyncio.AbstractServer, name: str = "TCP server"):
        self.server = server
        self.name = name

    async def close(self) -> None:
        self.server.close()
        await self.server.wait_closed()


class AiohttpRunnerListener(Listener):
    """Wraps an aiohttp runner.

    ``runner.cleanup()`` stops every site, lets in-flight handlers finish
    (bounded by the runner's own ``shutdown_timeout``) and then runs the
    application's cleanup hooks.
    """

    def __init__(self, runner: web.BaseRunner, name: str = "HTTP server"):
        self.runner = runner
        self.name = name
        self._closed = False

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self.runner.cleanup()
