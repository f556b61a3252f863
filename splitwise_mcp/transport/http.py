"""Stateless HTTP binding (MCP streamable HTTP).

Routes:
    POST /mcp     -> one JSON-RPC message per request
    GET  /mcp     -> SSE stream of server-pushed notifications
    GET  /healthz -> {"status": "healthy", "app": "initialized"}

POST /mcp processing order:
    1. MCP-Protocol-Version header, if present, must be supported (else 400)
    2. Body must be valid JSON (else 400 + PARSE_ERROR)
    3. Body must be a JSON-RPC request (else 400 + INVALID_REQUEST)
    4. Notifications: 202 immediately, dispatched in the background
    5. Requests: 200 + JSON reply, or 202 when the method has no reply
"""

from __future__ import annotations

import asyncio
import logging

from aiohttp import web

from splitwise_mcp.config.schema import ServerConfig
from splitwise_mcp.rpc.dispatcher import Dispatcher
from splitwise_mcp.rpc.protocol import (
    INVALID_REQUEST,
    InvalidRequestError,
    ParseError,
    decode_message,
    error_response_for,
    make_error_response,
    parse_request,
    response_to_dict,
)
from splitwise_mcp.rpc.types import Request
from splitwise_mcp.transport.sse import NotificationHub, format_sse_comment, format_sse_event

logger = logging.getLogger(__name__)

PROTOCOL_VERSION_HEADER = "MCP-Protocol-Version"


class McpHttpHandler:
    """Request handlers for the stateless HTTP binding."""

    def __init__(
        self,
        dispatcher: Dispatcher,
        config: ServerConfig,
        hub: NotificationHub | None = None,
    ) -> None:
        self._dispatcher = dispatcher
        self._supported_versions = frozenset(config.supported_protocol_versions)
        self._keepalive_interval = config.sse_keepalive_interval
        self.hub = hub or NotificationHub()
        # Strong references to in-flight notification tasks
        self._background: set[asyncio.Task[None]] = set()

    async def handle_post(self, request: web.Request) -> web.Response:
        version = request.headers.get(PROTOCOL_VERSION_HEADER)
        if version is not None and version not in self._supported_versions:
            logger.warning("Rejected unsupported protocol version %r", version)
            error = make_error_response(
                None,
                INVALID_REQUEST,
                f"Unsupported MCP protocol version: {version}",
            )
            return web.json_response(response_to_dict(error), status=400)

        body = await request.read()
        try:
            rpc_request = parse_request(decode_message(body))
        except (ParseError, InvalidRequestError) as e:
            logger.warning("Rejected POST /mcp body: %s", e.message)
            return web.json_response(response_to_dict(error_response_for(e)), status=400)

        if rpc_request.is_notification:
            task = asyncio.create_task(self._dispatch_notification(rpc_request))
            self._background.add(task)
            task.add_done_callback(self._background.discard)
            return web.Response(status=202)

        response = await self._dispatcher.dispatch(rpc_request)
        if response is None:
            return web.Response(status=202)
        return web.json_response(response_to_dict(response))

    async def _dispatch_notification(self, rpc_request: Request) -> None:
        try:
            await self._dispatcher.dispatch(rpc_request)
        except Exception:
            logger.exception("Error handling notification %s", rpc_request.method)

    async def handle_stream(self, request: web.Request) -> web.StreamResponse:
        """Hold an SSE stream open, forwarding hub notifications.

        Runs until the client disconnects or the hub drops this subscriber.
        """
        response = web.StreamResponse(
            status=200,
            headers={
                "Content-Type": "text/event-stream",
                "Cache-Control": "no-cache",
                "Connection": "keep-alive",
                "X-Accel-Buffering": "no",  # Disable proxy buffering
            },
        )
        await response.prepare(request)

        queue = self.hub.subscribe()
        logger.debug("SSE subscriber connected (%d total)", self.hub.subscriber_count())
        try:
            while True:
                try:
                    message = await asyncio.wait_for(queue.get(), timeout=self._keepalive_interval)
                except asyncio.TimeoutError:
                    if not self.hub.is_subscribed(queue):
                        logger.debug("SSE subscriber removed (slow client), closing stream")
                        break
                    await response.write(format_sse_comment("keepalive"))
                    continue
                await response.write(format_sse_event(message))
        except ConnectionResetError:
            logger.debug("SSE client disconnected")
        finally:
            self.hub.unsubscribe(queue)
        return response

    async def handle_healthz(self, request: web.Request) -> web.Response:
        return web.json_response({"status": "healthy", "app": "initialized"})


def create_http_app(
    dispatcher: Dispatcher,
    config: ServerConfig,
    hub: NotificationHub | None = None,
) -> web.Application:
    """Build the stateless HTTP application."""
    handler = McpHttpHandler(dispatcher, config, hub)
    app = web.Application()
    app.router.add_post("/mcp", handler.handle_post)
    app.router.add_get("/mcp", handler.handle_stream)
    app.router.add_get("/healthz", handler.handle_healthz)
    return app
