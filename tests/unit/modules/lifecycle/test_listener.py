"""Tests for the listener adapters."""

import asyncio
import pytest
from unittest.mock import AsyncMock, MagicMock
from aiohttp import web

from drainstop.modules.lifecycle.listener import AiohttpRunnerListener, AsyncioServerListener


@pytest.mark.asyncio
async def test_asyncio_server_listener_stops_serving():
    async def on_connect(reader, writer):
        writer.close()

    server = await asyncio.start_server(on_connect, "127.0.0.1", 0)
    listener = AsyncioServerListener(server)
    assert server.is_serving()

    await listener.close()
    assert not server.is_serving()

    # Closing again is harmless
    await listener.close()


@pytest.mark.asyncio
async def test_aiohttp_runner_listener_cleans_up_once():
    runner = MagicMock(spec=web.AppRunner)
    runner.cleanup = AsyncMock()
    listener = AiohttpRunnerListener(runner)

    await listener.close()
    await listener.close()

    runner.cleanup.assert_awaited_once()
    assert listener.name == "HTTP server"


@pytest.mark.asyncio
async def test_aiohttp_runner_listener_stops_sites():
    runner = web.AppRunner(web.Application())
    await runner.setup()
    site = web.TCPSite(runner, "127.0.0.1", 0)
    await site.start()
    assert runner.sites

    await AiohttpRunnerListener(runner).close()

    assert not runner.sites
