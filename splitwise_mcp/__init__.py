"""Splitwise MCP server.

Exposes the Splitwise REST API as Model Context Protocol tools over stdio,
WebSocket and stateless HTTP transports.

Usage:
    splitwise-mcp-server --stdio        # Content-Length framed stdio
    splitwise-mcp-server --http         # POST/GET /mcp on port 4000
    splitwise-mcp-server                # WebSocket + HTTP on port 4001
"""

__version__ = "1.0.0"

SERVER_NAME = "splitwise-mcp-server"

__all__ = ["SERVER_NAME", "__version__"]
