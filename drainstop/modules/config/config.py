from enum import Enum
from typing import Dict, List, Mapping, Optional
import os

from pydantic import BaseModel, ValidationError, model_validator

# Environment variable -> ServerConfig field
ENV_VARS: Dict[str, str] = {
    "HOST": "host",
    "PORT": "port",
    "APP_ENV": "environment",
    "SHUTDOWN_TIMEOUT": "shutdown_timeout",
}

class Environment(str, Enum):
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TEST = "test"

class ServerConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 5000
    environment: Environment = Environment.DEVELOPMENT
    shutdown_timeout: float = 30.0  # hard ceiling for graceful shutdown in seconds
    upstreams: Optional[Dict[str, str]] = None  # name -> health URL probed by deep health checks

    @model_validator(mode='after')
    def validate_values(self) -> 'ServerConfig':
        if not 0 <= self.port <= 65535:
            raise ValueError("port must be between 0 and 65535")
        if self.shutdown_timeout <= 0:
            raise ValueError("shutdown_timeout must be a positive number")
        return self

    @property
    def is_production(self) -> bool:
        return self.environment == Environment.PRODUCTION

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'ServerConfig':
        """
        Build a configuration from environment variables.

        Unset or empty variables keep their defaults.

        Raises:
            ValueError: If any variable holds an invalid value
        """
        environ = os.environ if environ is None else environ
        data = {
            field: environ[var]
            for var, field in ENV_VARS.items()
            if environ.get(var)
        }
        return cls.load(data)

    @classmethod
    def load(cls, data: dict) -> 'ServerConfig':
        """Validate a mapping, raising ValueError with every offending field."""
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ValueError(build_validation_error_message(e))

    def merged(self, overrides: dict) -> 'ServerConfig':
        """Return a validated copy with the non-None overrides applied."""
        data = self.model_dump()
        data.update({k: v for k, v in overrides.items() if v is not None})
        return self.load(data)


def build_validation_error_message(error: ValidationError) -> str:
    messages = []
    for detail in error.errors():
        field_path = " -> ".join(str(loc) for loc in detail['loc']) or "config"
        messages.append(f"Error in field '{field_path}': {detail['msg']}")
    return "Configuration validation failed:\n" + "\n".join(f"  - {m}" for m in messages)


def config_summary(config: ServerConfig) -> List[str]:
    """Operator-facing summary lines; contains no secrets."""
    upstreams = ", ".join(sorted(config.upstreams)) if config.upstreams else "None configured"
    return [
        f"Environment: {config.environment.value}",
        f"Listen: {config.host}:{config.port}",
        f"Shutdown timeout: {config.shutdown_timeout:g}s",
        f"Upstreams: {upstreams}",
    ]
