"""Configuration loading and validation."""

from splitwise_mcp.config.loader import ENV_VARS, load_config
from splitwise_mcp.config.schema import (
    DEFAULT_API_BASE_URL,
    DEFAULT_HTTP_PORT,
    DEFAULT_WEBSOCKET_PORT,
    DEFAULT_WS_BACKEND_URL,
    SUPPORTED_PROTOCOL_VERSIONS,
    ServerConfig,
)

__all__ = [
    "DEFAULT_API_BASE_URL",
    "DEFAULT_HTTP_PORT",
    "DEFAULT_WEBSOCKET_PORT",
    "DEFAULT_WS_BACKEND_URL",
    "ENV_VARS",
    "SUPPORTED_PROTOCOL_VERSIONS",
    "ServerConfig",
    "load_config",
]
