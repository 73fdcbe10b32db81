from typing import List
from drainstop.modules.logging.base import BaseLogger


class _TestLogger(BaseLogger):
    """Test logger that captures all logs."""
    def __init__(self):
        self.logs: List[str] = []
    
    def log_lifecycle(self, state: str, message: str) -> None:
        self.logs.append(f"{state.upper()}: {message}")

    def log_request(self, method: str, path: str, status_code: int, duration_ms: float) -> None:
        self.logs.append(f"REQUEST: {method} {path} {status_code}")

    def log_info(self, message: str) -> None:
        self.logs.append(f"INFO: {message}")
    
    def log_error(self, message: str) -> None:
        self.logs.append(f"ERROR: {message}")

    def log_warning(self, message: str) -> None:
        self.logs.append(f"WARNING: {message}")

    def log_debug(self, message: str) -> None:
        self.logs.append(f"DEBUG: {message}")
    
    def get_logs(self) -> List[str]:
        """Get all captured logs."""
        return self.logs


def create_test_logger() -> BaseLogger:
    """Create a test logger instance."""
    return _TestLogger()
