"""Async client for the Splitwise REST API (v3.0).

Every endpoint method goes through ``_request``, which normalizes failures
into a single ``SplitwiseAPIError``. The error keeps the HTTP status code
as a typed field so callers can classify failures without inspecting the
message text.

Example:
    client = SplitwiseClient(load_config())
    user = await client.get_current_user()
    await client.aclose()
"""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from splitwise_mcp.config.schema import ServerConfig
from splitwise_mcp.core.errors import ConfigError, SplitwiseMCPError

logger = logging.getLogger(__name__)

# Cap on how much of an error body is kept in the error message
MAX_ERROR_BODY_SIZE: int = 10 * 1024  # 10 KB


class SplitwiseAPIError(SplitwiseMCPError):
    """Raised for any failed Splitwise API call.

    Attributes:
        status_code: HTTP status of the failed response, or None when the
            request never got a response (DNS, connect, timeout).
        body: Decoded response body (JSON value or text), if any.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body: Any = None,
    ) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class SplitwiseClient:
    """Thin typed wrapper around the Splitwise REST API.

    The underlying httpx.AsyncClient is created lazily on first request and
    reused afterwards. Configuration is read-only after construction.
    """

    def __init__(
        self,
        config: ServerConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Server configuration holding the token and base URL.
            transport: Optional httpx transport (used by tests).

        Raises:
            ConfigError: If no access token is configured.
        """
        if not config.access_token:
            raise ConfigError("SPLITWISE_ACCESS_TOKEN environment variable is required")

        self._access_token = config.access_token
        self._base_url = config.api_base_url
        self._timeout = config.request_timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def base_url(self) -> str:
        return self._base_url

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                headers={
                    "Authorization": f"Bearer {self._access_token}",
                    "Content-Type": "application/json",
                },
                transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        """Close the HTTP client. Safe to call multiple times."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json_body: dict[str, Any] | None = None,
    ) -> Any:
        """Issue one API request and return the decoded JSON body.

        Args:
            method: HTTP method ("GET" or "POST").
            path: Endpoint path relative to the base URL (e.g. "/get_groups").
            params: Query parameters; None values are dropped.
            json_body: JSON request body.

        Returns:
            The decoded response body.

        Raises:
            SplitwiseAPIError: On any HTTP error status or network failure.
        """
        client = self._ensure_client()
        if params is not None:
            params = {k: v for k, v in params.items() if v is not None}

        logger.debug("Splitwise %s %s", method, path)
        try:
            response = await client.request(method, path, params=params, json=json_body)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            body = _decode_error_body(e.response)
            detail = json.dumps(body) if not isinstance(body, str) else body
            raise SplitwiseAPIError(
                f"Splitwise API Error: {status} - {detail}",
                status_code=status,
                body=body,
            ) from e
        except httpx.HTTPError as e:
            raise SplitwiseAPIError(f"Splitwise API Error: {e}") from e

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise SplitwiseAPIError(
                f"Splitwise API Error: invalid JSON in response from {path}",
                status_code=response.status_code,
                body=response.text[:MAX_ERROR_BODY_SIZE],
            ) from e

    # === User endpoints ===

    async def get_current_user(self) -> Any:
        return await self._request("GET", "/get_current_user")

    async def get_user(self, user_id: int) -> Any:
        return await self._request("GET", f"/get_user/{user_id}")

    async def update_user(self, user_id: int, data: dict[str, Any]) -> Any:
        return await self._request("POST", f"/update_user/{user_id}", json_body=data)

    # === Group endpoints ===

    async def get_groups(self) -> Any:
        return await self._request("GET", "/get_groups")

    async def get_group(self, group_id: int) -> Any:
        return await self._request("GET", f"/get_group/{group_id}")

    async def create_group(self, data: dict[str, Any]) -> Any:
        """Create a group. ``data`` may contain flattened ``users__N__prop`` keys."""
        return await self._request("POST", "/create_group", json_body=data)

    async def delete_group(self, group_id: int) -> Any:
        return await self._request("POST", f"/delete_group/{group_id}")

    async def undelete_group(self, group_id: int) -> Any:
        return await self._request("POST", f"/undelete_group/{group_id}")

    async def add_user_to_group(self, data: dict[str, Any]) -> Any:
        return await self._request("POST", "/add_user_to_group", json_body=data)

    async def remove_user_from_group(self, data: dict[str, Any]) -> Any:
        return await self._request("POST", "/remove_user_from_group", json_body=data)

    # === Friend endpoints ===

    async def get_friends(self) -> Any:
        return await self._request("GET", "/get_friends")

    async def get_friend(self, friend_id: int) -> Any:
        return await self._request("GET", f"/get_friend/{friend_id}")

    async def create_friend(self, data: dict[str, Any]) -> Any:
        return await self._request("POST", "/create_friend", json_body=data)

    async def create_friends(self, data: dict[str, Any]) -> Any:
        """Add several friends. ``data`` holds flattened ``users__N__prop`` keys."""
        return await self._request("POST", "/create_friends", json_body=data)

    async def delete_friend(self, friend_id: int) -> Any:
        return await self._request("POST", f"/delete_friend/{friend_id}")

    # === Expense endpoints ===

    async def get_expenses(self, params: dict[str, Any] | None = None) -> Any:
        """List expenses.

        Args:
            params: Optional filters (group_id, friend_id, dated_after,
                dated_before, updated_after, updated_before, limit, offset).
        """
        return await self._request("GET", "/get_expenses", params=params or {})

    async def get_expense(self, expense_id: int) -> Any:
        return await self._request("GET", f"/get_expense/{expense_id}")

    async def create_expense(self, data: dict[str, Any]) -> Any:
        return await self._request("POST", "/create_expense", json_body=data)

    async def update_expense(self, expense_id: int, data: dict[str, Any]) -> Any:
        return await self._request("POST", f"/update_expense/{expense_id}", json_body=data)

    async def delete_expense(self, expense_id: int) -> Any:
        return await self._request("POST", f"/delete_expense/{expense_id}")

    async def undelete_expense(self, expense_id: int) -> Any:
        return await self._request("POST", f"/undelete_expense/{expense_id}")

    # === Comment endpoints ===

    async def get_comments(self, expense_id: int) -> Any:
        return await self._request("GET", "/get_comments", params={"expense_id": expense_id})

    async def create_comment(self, data: dict[str, Any]) -> Any:
        return await self._request("POST", "/create_comment", json_body=data)

    async def delete_comment(self, comment_id: int) -> Any:
        return await self._request("POST", f"/delete_comment/{comment_id}")

    # === Notification endpoints ===

    async def get_notifications(self, params: dict[str, Any] | None = None) -> Any:
        return await self._request("GET", "/get_notifications", params=params or {})

    # === Utility endpoints ===

    async def get_currencies(self) -> Any:
        return await self._request("GET", "/get_currencies")

    async def get_categories(self) -> Any:
        return await self._request("GET", "/get_categories")


def _decode_error_body(response: httpx.Response) -> Any:
    """Decode an error response body, preferring JSON, bounded in size."""
    content = response.content[:MAX_ERROR_BODY_SIZE]
    try:
        return json.loads(content)
    except ValueError:
        return content.decode(errors="replace")
