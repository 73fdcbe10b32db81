"""Server configuration loaded from the environment or YAML."""

from .config import Environment, ServerConfig, config_summary
from .loader import load_config_file

__all__ = ['Environment', 'ServerConfig', 'config_summary', 'load_config_file']
