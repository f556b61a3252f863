"""Argument parsing for the splitwise-mcp-server CLI."""

import argparse
from pathlib import Path

from splitwise_mcp.config.schema import DEFAULT_HTTP_PORT, DEFAULT_WEBSOCKET_PORT


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Modes are mutually exclusive; without a mode flag the WebSocket server
    (with its HTTP status routes) is started.
    """
    parser = argparse.ArgumentParser(
        prog="splitwise-mcp-server",
        description="Model Context Protocol server for the Splitwise API",
    )
    parser.add_argument(
        "--version", "-v",
        action="store_true",
        help="Print version and exit",
    )

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--stdio",
        dest="mode",
        action="store_const",
        const="stdio",
        help="Serve over stdin/stdout (Content-Length framed)",
    )
    mode.add_argument(
        "--http",
        dest="mode",
        action="store_const",
        const="http",
        help=f"Serve stateless HTTP on /mcp (default port {DEFAULT_HTTP_PORT})",
    )
    mode.add_argument(
        "--websocket",
        dest="mode",
        action="store_const",
        const="websocket",
        help=f"Serve WebSocket + status routes (default port {DEFAULT_WEBSOCKET_PORT})",
    )
    parser.set_defaults(mode="websocket")

    parser.add_argument(
        "--port", "-p",
        type=int,
        default=None,
        help="Listen port (default: $PORT, else the mode's default)",
    )
    parser.add_argument(
        "--host",
        default=None,
        help="Interface to bind (default: 127.0.0.1)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--log-file",
        dest="log_file",
        type=Path,
        default=None,
        help="Also write logs to this rotating file",
    )
    return parser.parse_args(argv)
