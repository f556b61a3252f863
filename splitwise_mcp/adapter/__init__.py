"""HTTP-to-WebSocket adapter for the Splitwise MCP server."""

from splitwise_mcp.adapter.backend import (
    BackendClient,
    BackendError,
    BackendProtocolError,
    BackendTimeoutError,
    BackendUnavailableError,
)
from splitwise_mcp.adapter.cache import CACHE_TTL, ToolsCache
from splitwise_mcp.adapter.server import create_adapter_app

__all__ = [
    "BackendClient",
    "BackendError",
    "BackendProtocolError",
    "BackendTimeoutError",
    "BackendUnavailableError",
    "CACHE_TTL",
    "ToolsCache",
    "create_adapter_app",
]
