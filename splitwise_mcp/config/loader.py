"""Configuration loading with fail-fast behavior.

Settings come from three layers, later layers winning:
1. Model defaults (see ``ServerConfig``)
2. Environment variables (a ``.env`` file in the working directory is loaded first)
3. Explicit overrides, typically from CLI flags
"""

import logging
import os
from collections.abc import Mapping
from typing import Any

from dotenv import find_dotenv, load_dotenv
from pydantic import ValidationError

from splitwise_mcp.config.schema import ServerConfig
from splitwise_mcp.core.errors import ConfigError

logger = logging.getLogger(__name__)

# Environment variable -> ServerConfig field
ENV_VARS: dict[str, str] = {
    "SPLITWISE_ACCESS_TOKEN": "access_token",
    "SPLITWISE_API_BASE_URL": "api_base_url",
    "SPLITWISE_REQUEST_TIMEOUT": "request_timeout",
    "PORT": "port",
    "WS_BACKEND_URL": "ws_backend_url",
    "SPLITWISE_MCP_LOG_LEVEL": "log_level",
}


def load_config(
    environ: Mapping[str, str] | None = None,
    *,
    load_env_file: bool = True,
    **overrides: Any,
) -> ServerConfig:
    """Build and validate the server configuration.

    Args:
        environ: Environment mapping to read. Defaults to ``os.environ``.
        load_env_file: Load ``.env`` into the process environment first.
            Only meaningful when ``environ`` is None.
        **overrides: Field values that take precedence over the environment.
            None values are ignored so unset CLI flags fall through.

    Returns:
        Validated ServerConfig.

    Raises:
        ConfigError: If any value fails validation.
    """
    if environ is None:
        if load_env_file and load_dotenv(find_dotenv(usecwd=True)):
            logger.debug("Loaded environment from .env")
        environ = os.environ

    data: dict[str, Any] = {}
    for env_name, field_name in ENV_VARS.items():
        value = environ.get(env_name)
        if value is not None and value != "":
            data[field_name] = value

    data.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return ServerConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Configuration validation failed: {e}") from e
