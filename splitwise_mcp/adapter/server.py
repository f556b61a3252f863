"""HTTP front-end that forwards to a WebSocket MCP backend.

Each inbound call opens its own short-lived backend connection. The tool
list is cached for 60 seconds.

Routes:
    GET  /           -> adapter status
    GET  /health     -> {"status": "ok"}
    GET  /status     -> adapter, backend and cache state
    GET  /listTools  -> cached or freshly fetched tool list
    POST /rpc        -> forward one JSON-RPC message
    POST /           -> same as /rpc
    WebSocket upgrade on any path -> bidirectional proxy

Usage:
    splitwise-mcp-adapter [--host 127.0.0.1] [--port 4000] [--backend-url ws://localhost:4001]

The adapter binds to loopback by default. Pass ``--host 0.0.0.0`` when other
machines or containers must reach it.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from datetime import datetime, timezone
from typing import Any

import websockets
from aiohttp import WSMsgType, web

from splitwise_mcp import __version__
from splitwise_mcp.adapter.backend import (
    BackendClient,
    BackendError,
    BackendProtocolError,
    BackendTimeoutError,
    BackendUnavailableError,
)
from splitwise_mcp.adapter.cache import ToolsCache
from splitwise_mcp.config.loader import load_config
from splitwise_mcp.config.schema import DEFAULT_HTTP_PORT, ServerConfig
from splitwise_mcp.core.errors import ConfigError
from splitwise_mcp.rpc.bootstrap import configure_server_logging
from splitwise_mcp.transport.runner import ServerStartError, serve_app

logger = logging.getLogger(__name__)

BACKEND_KEY = web.AppKey("backend", BackendClient)
PORT_KEY = web.AppKey("port", int)


def _is_websocket_upgrade(request: web.Request) -> bool:
    return request.headers.get("Upgrade", "").lower() == "websocket"


def _backend_error_response(error: BackendError) -> web.Response:
    if isinstance(error, BackendTimeoutError):
        return web.json_response({"error": "Backend timeout"}, status=504)
    if isinstance(error, BackendProtocolError):
        return web.json_response({"error": "Invalid response from backend"}, status=500)
    return web.json_response(
        {"error": "Backend connection failed", "message": error.message},
        status=503,
    )


async def handle_root(request: web.Request) -> web.StreamResponse:
    if _is_websocket_upgrade(request):
        return await proxy_websocket(request)
    return web.json_response({"status": "ok", "type": "mcp-adapter", "version": __version__})


async def handle_health(request: web.Request) -> web.StreamResponse:
    if _is_websocket_upgrade(request):
        return await proxy_websocket(request)
    return web.json_response({"status": "ok"})


async def handle_status(request: web.Request) -> web.Response:
    backend = request.app[BACKEND_KEY]
    cache = backend.cache

    if cache.is_stale() and not cache.tools:
        try:
            await backend.fetch_tools()
        except BackendError as e:
            logger.warning("Failed to refresh tools cache: %s", e.message)

    return web.json_response({
        "status": "ok",
        "adapter": {"version": __version__, "port": request.app[PORT_KEY]},
        "backend": {
            "url": backend.url,
            "connected": cache.backend_connected,
            "lastCheck": datetime.fromtimestamp(cache.timestamp, tz=timezone.utc).isoformat(),
        },
        "tools": {
            "cached": len(cache.tools),
            "list": [
                {"name": tool.get("name"), "description": tool.get("description")}
                for tool in cache.tools
            ],
        },
    })


async def handle_list_tools(request: web.Request) -> web.Response:
    backend = request.app[BACKEND_KEY]
    if backend.cache.is_fresh():
        logger.debug("Returning cached tools")
        return web.json_response({"tools": backend.cache.tools})

    try:
        tools = await backend.fetch_tools()
    except BackendError as e:
        logger.warning("Error fetching tools: %s", e.message)
        return web.json_response(
            {"error": "Backend unavailable", "message": e.message},
            status=503,
        )
    return web.json_response({"tools": tools})


async def handle_rpc(request: web.Request) -> web.Response:
    """Forward one JSON-RPC message and relay the backend's reply."""
    backend = request.app[BACKEND_KEY]
    try:
        message: Any = await request.json()
    except ValueError as e:
        return web.json_response({"error": f"Invalid JSON: {e}"}, status=400)

    logger.debug("POST %s: %s", request.path, json.dumps(message)[:100])
    try:
        reply = await backend.forward(message)
    except BackendError as e:
        return _backend_error_response(e)

    if reply is None:
        return web.Response(status=202)
    return web.json_response(reply)


async def handle_any_path(request: web.Request) -> web.StreamResponse:
    if _is_websocket_upgrade(request):
        return await proxy_websocket(request)
    raise web.HTTPNotFound()


async def proxy_websocket(request: web.Request) -> web.StreamResponse:
    """Bridge an upgraded client connection to a new backend connection.

    Frames are relayed in both directions; either side closing closes the
    other.
    """
    backend = request.app[BACKEND_KEY]
    logger.info("Upgrade request for path: %s", request.path)
    try:
        backend_ws = await websockets.connect(backend.url)
    except (OSError, websockets.exceptions.WebSocketException) as e:
        backend.cache.backend_connected = False
        logger.warning("Backend connection failed: %s", e)
        return web.json_response(
            {"error": "Backend connection failed", "message": str(e)},
            status=503,
        )
    backend.cache.backend_connected = True

    client_ws = web.WebSocketResponse()
    await client_ws.prepare(request)

    async def client_to_backend() -> None:
        async for msg in client_ws:
            if msg.type in (WSMsgType.TEXT, WSMsgType.BINARY):
                await backend_ws.send(msg.data)
            elif msg.type == WSMsgType.ERROR:
                logger.warning("Client error: %s", client_ws.exception())
                break
        logger.debug("Client disconnected")

    async def backend_to_client() -> None:
        try:
            async for data in backend_ws:
                if isinstance(data, bytes):
                    await client_ws.send_bytes(data)
                else:
                    await client_ws.send_str(data)
        except websockets.exceptions.ConnectionClosed:
            pass
        backend.cache.backend_connected = False
        logger.debug("Backend disconnected")

    tasks = [
        asyncio.create_task(client_to_backend()),
        asyncio.create_task(backend_to_client()),
    ]
    try:
        await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        await backend_ws.close()
        await client_ws.close()
    return client_ws


def create_adapter_app(
    config: ServerConfig,
    cache: ToolsCache | None = None,
    port: int | None = None,
) -> web.Application:
    """Build the adapter application.

    Args:
        config: Configuration providing ``ws_backend_url``.
        cache: Tool cache to use; a new one is created if omitted.
        port: Port reported by /status.
    """
    app = web.Application()
    app[BACKEND_KEY] = BackendClient(config.ws_backend_url, cache or ToolsCache())
    app[PORT_KEY] = port if port is not None else config.resolve_port(DEFAULT_HTTP_PORT)
    app.router.add_get("/", handle_root)
    app.router.add_post("/", handle_rpc)
    app.router.add_get("/health", handle_health)
    app.router.add_get("/status", handle_status)
    app.router.add_get("/listTools", handle_list_tools)
    app.router.add_post("/rpc", handle_rpc)
    app.router.add_get("/{tail:.*}", handle_any_path)
    return app


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="splitwise-mcp-adapter",
        description="HTTP adapter forwarding to a WebSocket Splitwise MCP server",
    )
    parser.add_argument(
        "--port", "-p",
        type=int,
        default=None,
        help=f"HTTP port (default: $PORT or {DEFAULT_HTTP_PORT})",
    )
    parser.add_argument("--host", default=None, help="Interface to bind (default: 127.0.0.1)")
    parser.add_argument(
        "--backend-url",
        dest="backend_url",
        default=None,
        help="WebSocket backend URL (default: $WS_BACKEND_URL or ws://localhost:4001)",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Entry point for ``splitwise-mcp-adapter``."""
    args = parse_args(argv)
    try:
        config = load_config(
            port=args.port,
            host=args.host,
            ws_backend_url=args.backend_url,
            log_level="DEBUG" if args.verbose else None,
        )
    except ConfigError as e:
        configure_server_logging()
        logger.error("%s", e.message)
        raise SystemExit(1) from e

    configure_server_logging(config.log_level)
    port = config.resolve_port(DEFAULT_HTTP_PORT)
    app = create_adapter_app(config, port=port)

    logger.info("HTTP adapter listening on http://%s:%d", config.host, port)
    logger.info("Proxying to WebSocket backend at %s", config.ws_backend_url)
    try:
        asyncio.run(serve_app(app, config.host, port))
    except ServerStartError as e:
        logger.error("%s", e.message)
        raise SystemExit(1) from e
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
