import asyncio
import sys
from typing import Optional, TextIO

from ...config import ServerConfig, load_config_file
from ...logging import BaseLogger
from ..runner import serve


class ServeCommand:
    """Command class for running the HTTP server."""

    def __init__(self, logger: BaseLogger):
        """
        Initialize the serve command.

        Args:
            logger: Logger instance
        """
        self.logger = logger

    def build_config(self, config_file: Optional[TextIO], overrides: dict) -> ServerConfig:
        """Environment, then the YAML file, then command line flags."""
        if config_file is not None:
            config = load_config_file(config_file.read())
        else:
            config = ServerConfig.from_env()
        return config.merged(overrides)

    def run(self, config_file: Optional[TextIO], overrides: dict) -> None:
        try:
            config = self.build_config(config_file, overrides)
        except ValueError as err:
            self.logger.log_error(str(err))
            sys.exit(1)

        exit_code = asyncio.run(serve(config, self.logger))
        sys.exit(exit_code)
