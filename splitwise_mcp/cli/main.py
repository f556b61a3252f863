"""Entry point for ``splitwise-mcp-server``.

Selects the transport binding from the command line:

    splitwise-mcp-server --stdio
    splitwise-mcp-server --http [--port 4000]
    splitwise-mcp-server [--websocket] [--port 4001]
"""

from __future__ import annotations

import asyncio
import logging

from splitwise_mcp import SERVER_NAME, __version__
from splitwise_mcp.cli.arg_parser import parse_args
from splitwise_mcp.config.loader import load_config
from splitwise_mcp.config.schema import DEFAULT_HTTP_PORT, DEFAULT_WEBSOCKET_PORT, ServerConfig
from splitwise_mcp.core.errors import ConfigError
from splitwise_mcp.rpc.bootstrap import build_dispatcher, configure_server_logging
from splitwise_mcp.rpc.dispatcher import Dispatcher
from splitwise_mcp.transport.http import create_http_app
from splitwise_mcp.transport.runner import ServerStartError, serve_app
from splitwise_mcp.transport.sse import NotificationHub
from splitwise_mcp.transport.stdio import run_stdio
from splitwise_mcp.transport.websocket import create_websocket_app

logger = logging.getLogger(__name__)


async def run_server(mode: str, config: ServerConfig, dispatcher: Dispatcher) -> None:
    """Run the selected binding until it finishes or is interrupted.

    Raises:
        ServerStartError: If a network listener cannot bind.
    """
    try:
        if mode == "stdio":
            logger.debug("Starting in stdio mode")
            await run_stdio(dispatcher)
        elif mode == "http":
            port = config.resolve_port(DEFAULT_HTTP_PORT)
            app = create_http_app(dispatcher, config, NotificationHub())
            logger.info(
                "Splitwise MCP server (HTTP) listening on http://%s:%d/mcp", config.host, port
            )
            await serve_app(app, config.host, port)
        else:
            port = config.resolve_port(DEFAULT_WEBSOCKET_PORT)
            app = create_websocket_app(dispatcher)
            logger.info("Splitwise MCP server listening on ws://%s:%d", config.host, port)
            await serve_app(app, config.host, port)
    finally:
        await dispatcher.catalog.client.aclose()


def main(argv: list[str] | None = None) -> None:
    """Entry point for the splitwise-mcp-server CLI."""
    args = parse_args(argv)

    if args.version:
        print(f"{SERVER_NAME} version {__version__}")
        raise SystemExit(0)

    try:
        config = load_config(
            port=args.port,
            host=args.host,
            log_level="DEBUG" if args.verbose else None,
        )
        configure_server_logging(config.log_level, args.log_file)
        dispatcher = build_dispatcher(config)
    except ConfigError as e:
        configure_server_logging(log_file=args.log_file)
        logger.error("%s", e.message)
        raise SystemExit(1) from e

    try:
        asyncio.run(run_server(args.mode, config, dispatcher))
    except ServerStartError as e:
        logger.error("%s", e.message)
        raise SystemExit(1) from e
    except KeyboardInterrupt:
        pass
    except Exception as e:
        logger.exception("Server error: %s", e)
        raise SystemExit(1) from e
