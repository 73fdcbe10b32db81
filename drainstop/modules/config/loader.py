from typing import Optional, Mapping
import yaml

from .config import ServerConfig


def load_config_file(yaml_content: str, environ: Optional[Mapping[str, str]] = None) -> ServerConfig:
    """
    Load server configuration from YAML on top of the environment.

    Values in the file win over environment variables.

    Args:
        yaml_content: The YAML content to parse
        environ: Environment to read defaults from (os.environ if omitted)

    Returns:
        ServerConfig: The validated configuration

    Raises:
        ValueError: If the YAML content or any value is invalid
    """
    try:
        data = yaml.safe_load(yaml_content) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML format: {str(e)}")

    if not isinstance(data, dict):
        raise ValueError("Invalid config format: top level must be a mapping")

    base = ServerConfig.from_env(environ)
    return base.merged(data)
