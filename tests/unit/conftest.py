import pytest
from unittest.mock import Mock

from drainstop.modules.lifecycle import ShutdownControllerFactory
from tests.utils.test_logger import create_test_logger


@pytest.fixture
def mock_logger():
    """Create a mock logger."""
    logger = Mock()
    logger.log_info = Mock()
    logger.log_error = Mock()
    logger.log_warning = Mock()
    logger.log_debug = Mock()
    logger.log_lifecycle = Mock()
    logger.log_request = Mock()
    return logger


@pytest.fixture
def test_logger():
    """Logger that records every line it is given."""
    return create_test_logger()


@pytest.fixture
def exit_process():
    """Stands in for process exit so tests can observe the exit code."""
    return Mock()


@pytest.fixture(autouse=True)
def reset_controller_factory():
    """Keep the process-wide controller registry clean between tests."""
    yield
    if ShutdownControllerFactory._instance is not None:
        ShutdownControllerFactory._instance.reset()
    ShutdownControllerFactory._instance = None
