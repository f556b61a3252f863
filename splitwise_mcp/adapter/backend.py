"""Short-lived WebSocket exchanges with the backend MCP server.

Every call opens a fresh connection, sends exactly one message, waits for
at most one reply, and closes. There is no pooling or multiplexing.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

import websockets

from splitwise_mcp.adapter.cache import ToolsCache
from splitwise_mcp.core.errors import SplitwiseMCPError
from splitwise_mcp.rpc.dispatcher import NO_RESPONSE_METHODS

logger = logging.getLogger(__name__)

TOOLS_FETCH_TIMEOUT = 5.0
RPC_FORWARD_TIMEOUT = 30.0


class BackendError(SplitwiseMCPError):
    """Base class for failures talking to the backend."""


class BackendUnavailableError(BackendError):
    """The backend connection could not be opened or was lost (HTTP 503)."""


class BackendTimeoutError(BackendError):
    """The backend did not answer in time (HTTP 504)."""


class BackendProtocolError(BackendError):
    """The backend answered with something that is not usable JSON (HTTP 500)."""


class BackendClient:
    """Forwards single JSON-RPC messages to a WebSocket backend.

    Attributes:
        url: Backend WebSocket URL (e.g. ``ws://localhost:4001``).
        cache: Tool cache updated with connection outcomes and tool lists.
    """

    def __init__(self, url: str, cache: ToolsCache) -> None:
        self.url = url
        self.cache = cache

    async def _exchange(self, payload: str, expect_reply: bool) -> str | bytes | None:
        async with websockets.connect(self.url) as ws:
            self.cache.backend_connected = True
            await ws.send(payload)
            if not expect_reply:
                return None
            return await ws.recv()

    async def forward(
        self,
        message: Any,
        timeout: float = RPC_FORWARD_TIMEOUT,
    ) -> Any | None:
        """Send one message and return the decoded reply.

        A message without an ``id`` member is a notification: it is sent and
        None is returned without waiting for a reply. Methods the backend
        never answers (``ping``, ``notifications/initialized``) are treated
        the same way.

        Args:
            message: Decoded JSON-RPC message.
            timeout: Seconds to wait for connect plus reply.

        Returns:
            The decoded backend reply, or None when no reply is expected.

        Raises:
            BackendUnavailableError: If the connection fails.
            BackendTimeoutError: If the backend does not answer in time.
            BackendProtocolError: If the reply is not valid JSON.
        """
        expect_reply = True
        if isinstance(message, dict):
            method = message.get("method")
            no_body = isinstance(method, str) and method in NO_RESPONSE_METHODS
            expect_reply = "id" in message and not no_body
        payload = json.dumps(message, separators=(",", ":"))

        try:
            raw = await asyncio.wait_for(self._exchange(payload, expect_reply), timeout)
        except asyncio.TimeoutError as e:
            self.cache.backend_connected = False
            raise BackendTimeoutError("Backend timeout") from e
        except (OSError, websockets.exceptions.WebSocketException) as e:
            self.cache.backend_connected = False
            logger.warning("Backend connection error (%s): %s", self.url, e)
            raise BackendUnavailableError(str(e) or type(e).__name__) from e

        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError as e:
            raise BackendProtocolError("Invalid response from backend") from e

    async def fetch_tools(self, timeout: float = TOOLS_FETCH_TIMEOUT) -> list[dict[str, Any]]:
        """Refresh the cache from the backend's tools/list.

        Raises:
            BackendError: If the backend is unreachable, slow, or its reply
                carries no tool list.
        """
        reply = await self.forward(
            {"jsonrpc": "2.0", "id": 1, "method": "tools/list"},
            timeout=timeout,
        )
        result = reply.get("result") if isinstance(reply, dict) else None
        tools = result.get("tools") if isinstance(result, dict) else None
        if not isinstance(tools, list):
            raise BackendProtocolError("Invalid tools response")

        self.cache.replace(tools)
        logger.info("Cached %d tools", len(tools))
        return self.cache.tools
