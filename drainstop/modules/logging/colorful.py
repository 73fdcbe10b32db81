import click
from .base import BaseLogger
import sys


class ColorfulLogger(BaseLogger):
    """Logger that outputs colorful text for CLI usage."""

    STATE_COLORS = {
        "accepting": "green",
        "draining": "yellow",
        "terminated": "magenta",
    }
    
    def __init__(self, log_level: str = "INFO"):
        super().__init__(log_level)
        self.logger.configure(
            handlers=[{
                "sink": sys.stdout,
                "colorize": True,
                "format": "<cyan>{time:YYYY-MM-DD HH:mm:ss.SSS}</cyan> | "
                         "<level>{level: <8}</level> | "
                         "<white>{message}</white>",
                "level": log_level
            }]
        )
    
    def log_lifecycle(self, state: str, message: str):
        color = self.STATE_COLORS.get(state, "white")
        label = click.style(f"[{state.upper()}]", fg=color, bold=True)
        self.logger.info(f"{label} {click.style(message, fg='white')}")

    def log_request(self, method: str, path: str, status_code: int, duration_ms: float):
        if status_code >= 500:
            color = "red"
        elif status_code >= 400:
            color = "yellow"
        elif status_code >= 300:
            color = "blue"
        else:
            color = "green"

        self.logger.info(
            click.style(f"{method} {path} ", fg="white")
            + click.style(str(status_code), fg=color, bold=True)
            + click.style(f" {duration_ms:.1f}ms", fg="cyan")
        )

    def log_error(self, message: str):
        self.logger.error(click.style(message, fg="red", bold=True))

    def log_warning(self, message: str):
        self.logger.warning(click.style(message, fg="yellow", bold=True))

    def log_info(self, message: str):
        self.logger.info(click.style(message, fg="white"))

    def log_debug(self, message: str):
        self.logger.debug(click.style(message, fg="blue"))
