import sys
from typing import Optional, TextIO

from ...logging import BaseLogger
from ..config import ServerConfig, config_summary
from ..loader import load_config_file


class ShowConfigCommand:
    """Validate the effective configuration and log its summary."""

    def __init__(self, logger: BaseLogger):
        self.logger = logger

    def run(self, config_file: Optional[TextIO]) -> None:
        try:
            if config_file is not None:
                config = load_config_file(config_file.read())
            else:
                config = ServerConfig.from_env()
        except ValueError as err:
            self.logger.log_error(str(err))
            sys.exit(1)

        self.logger.log_info("Configuration Summary:")
        for line in config_summary(config):
            self.logger.log_info(f"  {line}")
