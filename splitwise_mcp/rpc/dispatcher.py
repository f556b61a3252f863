"""Transport-agnostic MCP method dispatcher.

Every binding (stdio, WebSocket, stateless HTTP) routes decoded requests
through one ``Dispatcher``. Handlers return a result value, or None when the
method produces no response body. Errors are translated into JSON-RPC error
objects here and never escape to the transport.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Coroutine
from typing import Any

from splitwise_mcp import SERVER_NAME, __version__
from splitwise_mcp.core.errors import InvalidParamsError, SplitwiseMCPError, UnknownToolError
from splitwise_mcp.rpc.protocol import (
    HTTP_STATUS_ERROR_CODES,
    INTERNAL_ERROR,
    INVALID_PARAMS,
    METHOD_NOT_FOUND,
    InvalidRequestError,
    ParseError,
    decode_message,
    error_response_for,
    make_error_response,
    make_success_response,
    parse_request,
)
from splitwise_mcp.rpc.types import Request, Response
from splitwise_mcp.splitwise.client import SplitwiseAPIError
from splitwise_mcp.tools.catalog import ToolCatalog

logger = logging.getLogger(__name__)

PROTOCOL_VERSION = "2024-11-05"

# Methods answered with no response body, even when the request carries an id
NO_RESPONSE_METHODS = frozenset({"ping", "notifications/initialized"})

# Type alias for handler functions
Handler = Callable[[dict[str, Any]], Coroutine[Any, Any, Any]]


def wrap_tool_result(raw: Any) -> dict[str, Any]:
    """Wrap a raw tool result as MCP text content.

    Results that already carry a ``content`` list pass through unchanged.
    """
    if isinstance(raw, dict) and isinstance(raw.get("content"), list):
        return raw
    return {"content": [{"type": "text", "text": json.dumps(raw, indent=2)}]}


class Dispatcher:
    """Routes JSON-RPC requests to MCP method handlers.

    Handles ``initialize``, ``ping``, ``notifications/initialized``,
    ``tools/list`` and ``tools/call``.
    """

    def __init__(self, catalog: ToolCatalog) -> None:
        """Initialize the dispatcher.

        Args:
            catalog: Tool catalog backing tools/list and tools/call.
        """
        self._catalog = catalog
        self._handlers: dict[str, Handler] = {
            "initialize": self._handle_initialize,
            "ping": self._handle_ping,
            "notifications/initialized": self._handle_initialized,
            "tools/list": self._handle_tools_list,
            "tools/call": self._handle_tools_call,
        }

    @property
    def catalog(self) -> ToolCatalog:
        return self._catalog

    async def handle_message(self, raw: str | bytes) -> Response | None:
        """Decode, validate and dispatch one raw message.

        Used by the stream and connection bindings, which answer shape
        errors in-band rather than with an HTTP status.

        Args:
            raw: Message text as received.

        Returns:
            The response to send back, or None if nothing should be sent.
        """
        try:
            request = parse_request(decode_message(raw))
        except (ParseError, InvalidRequestError) as e:
            logger.warning("Rejected message: %s", e.message)
            return error_response_for(e)

        return await self.dispatch(request)

    async def dispatch(self, request: Request) -> Response | None:
        """Dispatch a request to the appropriate handler.

        Args:
            request: The parsed JSON-RPC request.

        Returns:
            A Response object, or None for notifications and for methods
            that produce no response body.
        """
        logger.debug("Dispatching %s (id=%r)", request.method, request.id)

        handler = self._handlers.get(request.method)
        if handler is None:
            if request.is_notification:
                return None
            return make_error_response(
                request.id,
                METHOD_NOT_FOUND,
                f"Unknown method: {request.method}",
            )

        try:
            result = await handler(request.params or {})
        except InvalidParamsError as e:
            response = make_error_response(request.id, INVALID_PARAMS, e.message)
        except UnknownToolError as e:
            response = make_error_response(request.id, INTERNAL_ERROR, e.message)
        except SplitwiseAPIError as e:
            code = HTTP_STATUS_ERROR_CODES.get(e.status_code or 0, INTERNAL_ERROR)
            logger.warning("Upstream error in %s: %s", request.method, e.message)
            response = make_error_response(
                request.id,
                code,
                e.message,
                {"status": e.status_code, "body": e.body},
            )
        except SplitwiseMCPError as e:
            response = make_error_response(request.id, INTERNAL_ERROR, e.message)
        except Exception as e:
            logger.error(
                "Unexpected error dispatching method '%s': %s",
                request.method,
                e,
                exc_info=True,
            )
            response = make_error_response(request.id, INTERNAL_ERROR, str(e))
        else:
            if result is None:
                return None
            response = make_success_response(request.id, result)

        if request.is_notification:
            return None
        return response

    # === Method handlers ===

    async def _handle_initialize(self, params: dict[str, Any]) -> dict[str, Any]:
        client_info = params.get("clientInfo")
        if isinstance(client_info, dict):
            logger.info(
                "Client initialized: %s %s",
                client_info.get("name", "unknown"),
                client_info.get("version", ""),
            )
        return {
            "protocolVersion": PROTOCOL_VERSION,
            "capabilities": {"tools": {}},
            "serverInfo": {"name": SERVER_NAME, "version": __version__},
        }

    async def _handle_ping(self, params: dict[str, Any]) -> None:
        return None

    async def _handle_initialized(self, params: dict[str, Any]) -> None:
        logger.debug("Client sent notifications/initialized")
        return None

    async def _handle_tools_list(self, params: dict[str, Any]) -> dict[str, Any]:
        return {"tools": [tool.to_dict() for tool in self._catalog.list_tools()]}

    async def _handle_tools_call(self, params: dict[str, Any]) -> dict[str, Any]:
        name = params.get("name")
        if not isinstance(name, str) or not name:
            raise InvalidParamsError("Missing required parameter: name")

        arguments = params.get("arguments")
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, dict):
            raise InvalidParamsError(
                f"arguments must be an object, got: {type(arguments).__name__}"
            )

        raw = await self._catalog.call(name, arguments)
        return wrap_tool_result(raw)
