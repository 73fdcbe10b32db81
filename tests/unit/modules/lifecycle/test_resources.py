"""Tests for the dependent resource registry."""

import threading
import pytest
from unittest.mock import AsyncMock, Mock

from drainstop.modules.lifecycle.errors import TeardownError
from drainstop.modules.lifecycle.resources import ResourceRegistry


@pytest.mark.asyncio
async def test_close_all_in_priority_order(mock_logger):
    registry = ResourceRegistry(mock_logger)
    closed = []

    registry.register("cache", lambda: closed.append("cache"), priority=2)
    registry.register("database", lambda: closed.append("database"), priority=1)
    registry.register("queue", lambda: closed.append("queue"), priority=2)

    await registry.close_all()

    # Equal priorities keep registration order
    assert closed == ["database", "cache", "queue"]
    mock_logger.log_info.assert_any_call("Closed resource: database")
    mock_logger.log_info.assert_any_call("Closed resource: cache")
    mock_logger.log_info.assert_any_call("Closed resource: queue")


@pytest.mark.asyncio
async def test_async_and_sync_close(mock_logger):
    registry = ResourceRegistry(mock_logger)
    async_close = AsyncMock()
    sync_close = Mock(return_value=None)

    registry.register("pool", async_close)
    registry.register("client", sync_close)

    await registry.close_all()

    async_close.assert_awaited_once()
    sync_close.assert_called_once()


def test_register_replaces_existing_name(mock_logger):
    registry = ResourceRegistry(mock_logger)
    first = Mock()
    second = Mock()

    registry.register("database", first, priority=5)
    registry.register("cache", Mock(), priority=1)
    registry.register("database", second, priority=0)

    names = [r.name for r in registry.resources]
    assert names == ["database", "cache"]
    assert registry.resources[0].close is second


def test_unregister(mock_logger):
    registry = ResourceRegistry(mock_logger)
    registry.register("database", Mock())

    assert registry.unregister("database") is True
    assert registry.unregister("database") is False
    assert registry.resources == []


@pytest.mark.asyncio
async def test_failure_is_aggregated_and_others_still_close(mock_logger):
    registry = ResourceRegistry(mock_logger)
    healthy = AsyncMock()

    def broken():
        raise ConnectionError("pool already gone")

    registry.register("database", broken, priority=0)
    registry.register("cache", healthy, priority=1)

    with pytest.raises(TeardownError) as exc_info:
        await registry.close_all()

    healthy.assert_awaited_once()
    assert [name for name, _ in exc_info.value.failures] == ["database"]
    assert "database: pool already gone" in str(exc_info.value)
    mock_logger.log_error.assert_called_once_with(
        "Error closing resource database: pool already gone"
    )


@pytest.mark.asyncio
async def test_empty_registry_closes_cleanly(mock_logger):
    registry = ResourceRegistry(mock_logger)
    await registry.close_all()
    mock_logger.log_error.assert_not_called()


@pytest.mark.asyncio
async def test_plain_close_runs_off_the_event_loop_thread(mock_logger):
    registry = ResourceRegistry(mock_logger)
    threads = []

    registry.register("database", lambda: threads.append(threading.get_ident()))

    await registry.close_all()

    assert threads and threads[0] != threading.get_ident()
    mock_logger.log_info.assert_called_once_with("Closed resource: database")
