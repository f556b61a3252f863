"""WebSocket binding plus the status routes served on the same port.

One text message is one JSON-RPC message; replies go back on the same
connection in order. The per-connection ``initialized`` flag is recorded
but not enforced: requests sent before ``initialize`` are still served.

Routes:
    GET  /        -> {"status": "ok", "type": "mcp-server", "version": ...}
    POST /        -> same body
    GET  /health  -> {"status": "ok", "version": ...}
    WebSocket upgrade on any path
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from aiohttp import WSMsgType, web

from splitwise_mcp import __version__
from splitwise_mcp.rpc.dispatcher import Dispatcher
from splitwise_mcp.rpc.protocol import (
    InvalidRequestError,
    ParseError,
    decode_message,
    error_response_for,
    parse_request,
    serialize_response,
)
from splitwise_mcp.rpc.types import Response

logger = logging.getLogger(__name__)

DISPATCHER_KEY = web.AppKey("dispatcher", Dispatcher)


@dataclass
class ConnectionSession:
    """State for one WebSocket connection; discarded when it closes."""

    remote: str | None = None
    initialized: bool = False
    messages: int = 0


def _server_status() -> dict[str, str]:
    return {"status": "ok", "type": "mcp-server", "version": __version__}


async def handle_root(request: web.Request) -> web.StreamResponse:
    if _is_websocket_upgrade(request):
        return await handle_websocket(request)
    return web.json_response(_server_status())


async def handle_root_post(request: web.Request) -> web.Response:
    return web.json_response(_server_status())


async def handle_health(request: web.Request) -> web.StreamResponse:
    if _is_websocket_upgrade(request):
        return await handle_websocket(request)
    return web.json_response({"status": "ok", "version": __version__})


async def handle_any_path(request: web.Request) -> web.StreamResponse:
    if _is_websocket_upgrade(request):
        return await handle_websocket(request)
    raise web.HTTPNotFound()


def _is_websocket_upgrade(request: web.Request) -> bool:
    return request.headers.get("Upgrade", "").lower() == "websocket"


async def handle_websocket(request: web.Request) -> web.WebSocketResponse:
    """Serve one WebSocket connection until either side closes it."""
    dispatcher = request.app[DISPATCHER_KEY]
    ws = web.WebSocketResponse()
    await ws.prepare(request)

    session = ConnectionSession(remote=request.remote)
    logger.info("WebSocket client connected (%s, path %s)", session.remote, request.path)

    try:
        async for msg in ws:
            if msg.type in (WSMsgType.TEXT, WSMsgType.BINARY):
                session.messages += 1
                response = await _handle_frame(dispatcher, session, msg.data)
                if response is not None:
                    await ws.send_str(serialize_response(response))
            elif msg.type == WSMsgType.ERROR:
                logger.warning("WebSocket error: %s", ws.exception())
                break
    finally:
        logger.info(
            "WebSocket client disconnected (%s, %d messages)", session.remote, session.messages
        )
    return ws


async def _handle_frame(
    dispatcher: Dispatcher,
    session: ConnectionSession,
    raw: str | bytes,
) -> Response | None:
    try:
        rpc_request = parse_request(decode_message(raw))
    except (ParseError, InvalidRequestError) as e:
        logger.warning("Rejected WebSocket message: %s", e.message)
        return error_response_for(e)

    if rpc_request.method == "initialize":
        session.initialized = True
    elif not session.initialized:
        logger.debug("%s received before initialize; serving anyway", rpc_request.method)
    return await dispatcher.dispatch(rpc_request)


def create_websocket_app(dispatcher: Dispatcher) -> web.Application:
    """Build the hybrid WebSocket + status-route application."""
    app = web.Application()
    app[DISPATCHER_KEY] = dispatcher
    app.router.add_get("/", handle_root)
    app.router.add_post("/", handle_root_post)
    app.router.add_get("/health", handle_health)
    app.router.add_get("/{tail:.*}", handle_any_path)
    return app
