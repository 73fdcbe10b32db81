import sys
from .base import BaseLogger


class JsonLogger(BaseLogger):
    """Logger that outputs JSON for machine parsing.

    Structured fields are bound onto the record, so they show up under
    ``record.extra`` in the serialized output.
    """
    
    def __init__(self, log_level: str = "INFO"):
        super().__init__(log_level)
        self.logger.configure(
            handlers=[{
                "sink": sys.stdout,
                "serialize": True,
                "format": "{time} | {level} | {message}",
                "level": log_level
            }]
        )
    
    def log_lifecycle(self, state: str, message: str):
        self.logger.bind(type="lifecycle", state=state).info(message)

    def log_request(self, method: str, path: str, status_code: int, duration_ms: float):
        self.logger.bind(
            type="request",
            method=method,
            path=path,
            status=status_code,
            duration_ms=round(duration_ms, 3)
        ).info(f"{method} {path} {status_code}")

    def log_error(self, message: str):
        self.logger.bind(type="error").error(message)

    def log_warning(self, message: str):
        self.logger.bind(type="warning").warning(message)

    def log_info(self, message: str):
        self.logger.bind(type="info").info(message)

    def log_debug(self, message: str):
        self.logger.bind(type="debug").debug(message)
