"""Transport bindings: stdio framing, WebSocket, and stateless HTTP."""

from splitwise_mcp.transport.http import McpHttpHandler, create_http_app
from splitwise_mcp.transport.runner import ServerStartError, serve_app
from splitwise_mcp.transport.sse import NotificationHub, format_sse_comment, format_sse_event
from splitwise_mcp.transport.stdio import Framing, StdioServer, read_message, run_stdio
from splitwise_mcp.transport.websocket import ConnectionSession, create_websocket_app

__all__ = [
    "ConnectionSession",
    "Framing",
    "McpHttpHandler",
    "NotificationHub",
    "ServerStartError",
    "StdioServer",
    "create_http_app",
    "create_websocket_app",
    "format_sse_comment",
    "format_sse_event",
    "read_message",
    "run_stdio",
    "serve_app",
]
