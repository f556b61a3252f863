"""Tests for SplitwiseClient using httpx.MockTransport."""

import json

import httpx
import pytest

from splitwise_mcp.config.schema import ServerConfig
from splitwise_mcp.core.errors import ConfigError
from splitwise_mcp.splitwise.client import MAX_ERROR_BODY_SIZE, SplitwiseAPIError, SplitwiseClient

BASE_URL = "https://api.test/v3.0"


class Recorder:
    """Mock transport handler that records requests and replays one response."""

    def __init__(self, response: httpx.Response | None = None, exc: Exception | None = None):
        self.requests: list[httpx.Request] = []
        self._response = response or httpx.Response(200, json={"ok": True})
        self._exc = exc

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self._exc is not None:
            raise self._exc
        return httpx.Response(
            self._response.status_code,
            headers=self._response.headers,
            content=self._response.content,
        )

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


def make_client(recorder: Recorder) -> SplitwiseClient:
    config = ServerConfig(access_token="secret", api_base_url=BASE_URL)
    return SplitwiseClient(config, transport=httpx.MockTransport(recorder))


class TestConstruction:
    def test_missing_token_rejected(self) -> None:
        with pytest.raises(ConfigError, match="SPLITWISE_ACCESS_TOKEN"):
            SplitwiseClient(ServerConfig())

    def test_base_url_exposed(self) -> None:
        assert make_client(Recorder()).base_url == BASE_URL


class TestRequests:
    @pytest.mark.asyncio
    async def test_auth_and_content_type_headers(self) -> None:
        recorder = Recorder()
        client = make_client(recorder)
        try:
            await client.get_current_user()
        finally:
            await client.aclose()

        request = recorder.last
        assert request.method == "GET"
        assert request.url.path == "/v3.0/get_current_user"
        assert request.headers["Authorization"] == "Bearer secret"
        assert request.headers["Content-Type"] == "application/json"

    @pytest.mark.asyncio
    async def test_returns_decoded_json(self) -> None:
        recorder = Recorder(httpx.Response(200, json={"groups": [{"id": 1}]}))
        client = make_client(recorder)
        try:
            assert await client.get_groups() == {"groups": [{"id": 1}]}
        finally:
            await client.aclose()

    @pytest.mark.asyncio
    async def test_post_sends_json_body(self) -> None:
        recorder = Recorder()
        client = make_client(recorder)
        try:
            await client.update_expense(12, {"cost": "5.00", "users__0__user_id": 1})
        finally:
            await client.aclose()

        request = recorder.last
        assert request.method == "POST"
        assert request.url.path == "/v3.0/update_expense/12"
        assert json.loads(request.content) == {"cost": "5.00", "users__0__user_id": 1}

    @pytest.mark.asyncio
    async def test_query_params_drop_none(self) -> None:
        recorder = Recorder()
        client = make_client(recorder)
        try:
            await client.get_expenses({"group_id": 3, "friend_id": None, "limit": 0})
        finally:
            await client.aclose()

        params = recorder.last.url.params
        assert params["group_id"] == "3"
        assert params["limit"] == "0"
        assert "friend_id" not in params

    @pytest.mark.asyncio
    async def test_comments_use_query_parameter(self) -> None:
        recorder = Recorder()
        client = make_client(recorder)
        try:
            await client.get_comments(77)
        finally:
            await client.aclose()

        assert recorder.last.url.path == "/v3.0/get_comments"
        assert recorder.last.url.params["expense_id"] == "77"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("call", "method", "path"),
        [
            (lambda c: c.get_user(5), "GET", "/v3.0/get_user/5"),
            (lambda c: c.get_group(5), "GET", "/v3.0/get_group/5"),
            (lambda c: c.delete_group(5), "POST", "/v3.0/delete_group/5"),
            (lambda c: c.undelete_group(5), "POST", "/v3.0/undelete_group/5"),
            (lambda c: c.get_friend(5), "GET", "/v3.0/get_friend/5"),
            (lambda c: c.delete_friend(5), "POST", "/v3.0/delete_friend/5"),
            (lambda c: c.get_expense(5), "GET", "/v3.0/get_expense/5"),
            (lambda c: c.delete_expense(5), "POST", "/v3.0/delete_expense/5"),
            (lambda c: c.undelete_expense(5), "POST", "/v3.0/undelete_expense/5"),
            (lambda c: c.delete_comment(5), "POST", "/v3.0/delete_comment/5"),
            (lambda c: c.create_friends({}), "POST", "/v3.0/create_friends"),
            (lambda c: c.get_notifications(), "GET", "/v3.0/get_notifications"),
            (lambda c: c.get_currencies(), "GET", "/v3.0/get_currencies"),
            (lambda c: c.get_categories(), "GET", "/v3.0/get_categories"),
        ],
    )
    async def test_endpoint_paths(self, call, method: str, path: str) -> None:
        recorder = Recorder()
        client = make_client(recorder)
        try:
            await call(client)
        finally:
            await client.aclose()

        assert recorder.last.method == method
        assert recorder.last.url.path == path

    @pytest.mark.asyncio
    async def test_empty_body_returns_none(self) -> None:
        recorder = Recorder(httpx.Response(200, content=b""))
        client = make_client(recorder)
        try:
            assert await client.delete_group(1) is None
        finally:
            await client.aclose()


class TestErrors:
    @pytest.mark.asyncio
    async def test_status_error_keeps_status_and_body(self) -> None:
        recorder = Recorder(httpx.Response(401, json={"error": "Invalid API Request"}))
        client = make_client(recorder)
        try:
            with pytest.raises(SplitwiseAPIError) as exc_info:
                await client.get_current_user()
        finally:
            await client.aclose()

        error = exc_info.value
        assert error.status_code == 401
        assert error.body == {"error": "Invalid API Request"}
        assert error.message == 'Splitwise API Error: 401 - {"error": "Invalid API Request"}'

    @pytest.mark.asyncio
    async def test_text_error_body(self) -> None:
        recorder = Recorder(httpx.Response(500, text="upstream down"))
        client = make_client(recorder)
        try:
            with pytest.raises(SplitwiseAPIError) as exc_info:
                await client.get_groups()
        finally:
            await client.aclose()

        assert exc_info.value.status_code == 500
        assert exc_info.value.body == "upstream down"
        assert exc_info.value.message == "Splitwise API Error: 500 - upstream down"

    @pytest.mark.asyncio
    async def test_error_body_is_capped(self) -> None:
        recorder = Recorder(httpx.Response(404, text="x" * (MAX_ERROR_BODY_SIZE * 2)))
        client = make_client(recorder)
        try:
            with pytest.raises(SplitwiseAPIError) as exc_info:
                await client.get_group(1)
        finally:
            await client.aclose()

        assert len(exc_info.value.body) == MAX_ERROR_BODY_SIZE

    @pytest.mark.asyncio
    async def test_network_error_has_no_status(self) -> None:
        recorder = Recorder(exc=httpx.ConnectError("connection refused"))
        client = make_client(recorder)
        try:
            with pytest.raises(SplitwiseAPIError) as exc_info:
                await client.get_groups()
        finally:
            await client.aclose()

        assert exc_info.value.status_code is None
        assert "connection refused" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_invalid_json_response(self) -> None:
        recorder = Recorder(httpx.Response(200, content=b"<html>"))
        client = make_client(recorder)
        try:
            with pytest.raises(SplitwiseAPIError, match="invalid JSON"):
                await client.get_groups()
        finally:
            await client.aclose()


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_client_reused_across_requests(self) -> None:
        recorder = Recorder()
        client = make_client(recorder)
        try:
            await client.get_groups()
            first = client._client
            await client.get_friends()
            assert client._client is first
        finally:
            await client.aclose()

    @pytest.mark.asyncio
    async def test_aclose_idempotent(self) -> None:
        client = make_client(Recorder())
        await client.get_groups()
        await client.aclose()
        await client.aclose()
        assert client._client is None
