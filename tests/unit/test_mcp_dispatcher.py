"""Tests for the transport-agnostic MCP dispatcher."""

import json
from unittest.mock import MagicMock

import pytest

from splitwise_mcp.rpc.dispatcher import PROTOCOL_VERSION, Dispatcher, wrap_tool_result
from splitwise_mcp.rpc.protocol import (
    AUTHENTICATION_ERROR,
    FORBIDDEN_ERROR,
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    NOT_FOUND_ERROR,
    PARSE_ERROR,
    response_to_dict,
)
from splitwise_mcp.rpc.types import Request
from splitwise_mcp.splitwise.client import SplitwiseAPIError


def call_request(name: str, arguments: object = None, request_id: int | None = 1) -> Request:
    params: dict = {"name": name}
    if arguments is not None:
        params["arguments"] = arguments
    return Request(jsonrpc="2.0", method="tools/call", params=params, id=request_id)


class TestLifecycleMethods:
    @pytest.mark.asyncio
    async def test_initialize(self, dispatcher: Dispatcher) -> None:
        response = await dispatcher.dispatch(
            Request(jsonrpc="2.0", method="initialize", params={}, id=1)
        )
        assert response is not None
        assert response.error is None
        assert response.result == {
            "protocolVersion": PROTOCOL_VERSION,
            "capabilities": {"tools": {}},
            "serverInfo": {"name": "splitwise-mcp-server", "version": "1.0.0"},
        }

    @pytest.mark.asyncio
    async def test_ping_has_no_response_body(self, dispatcher: Dispatcher) -> None:
        response = await dispatcher.dispatch(Request(jsonrpc="2.0", method="ping", id=1))
        assert response is None

    @pytest.mark.asyncio
    async def test_initialized_notification(self, dispatcher: Dispatcher) -> None:
        response = await dispatcher.dispatch(
            Request(jsonrpc="2.0", method="notifications/initialized", is_notification=True)
        )
        assert response is None

    @pytest.mark.asyncio
    async def test_unknown_method(self, dispatcher: Dispatcher) -> None:
        response = await dispatcher.dispatch(Request(jsonrpc="2.0", method="resources/list", id=4))
        assert response is not None
        assert response.error == {
            "code": METHOD_NOT_FOUND,
            "message": "Unknown method: resources/list",
        }

    @pytest.mark.asyncio
    async def test_unknown_method_notification_is_silent(self, dispatcher: Dispatcher) -> None:
        response = await dispatcher.dispatch(
            Request(jsonrpc="2.0", method="nope", is_notification=True)
        )
        assert response is None


class TestToolsList:
    @pytest.mark.asyncio
    async def test_lists_all_tools_in_order(self, dispatcher: Dispatcher) -> None:
        response = await dispatcher.dispatch(Request(jsonrpc="2.0", method="tools/list", id=1))
        assert response is not None
        tools = response.result["tools"]
        assert len(tools) == 27
        assert tools[0]["name"] == "splitwise_get_current_user"
        assert tools[-1]["name"] == "splitwise_get_categories"
        assert set(tools[0]) == {"name", "description", "inputSchema"}

    @pytest.mark.asyncio
    async def test_order_is_stable(self, dispatcher: Dispatcher) -> None:
        request = Request(jsonrpc="2.0", method="tools/list", id=1)
        first = await dispatcher.dispatch(request)
        second = await dispatcher.dispatch(request)
        assert first is not None and second is not None
        assert [t["name"] for t in first.result["tools"]] == [
            t["name"] for t in second.result["tools"]
        ]


class TestToolsCall:
    @pytest.mark.asyncio
    async def test_result_wrapped_as_text_content(
        self, dispatcher: Dispatcher, fake_client: MagicMock
    ) -> None:
        response = await dispatcher.dispatch(call_request("splitwise_get_current_user"))
        assert response is not None
        assert response.error is None
        content = response.result["content"]
        assert content[0]["type"] == "text"
        assert json.loads(content[0]["text"]) == fake_client.get_current_user.return_value

    @pytest.mark.asyncio
    async def test_arguments_default_to_empty(
        self, dispatcher: Dispatcher, fake_client: MagicMock
    ) -> None:
        fake_client.get_groups.return_value = {"groups": []}
        response = await dispatcher.dispatch(call_request("splitwise_get_groups"))
        assert response is not None
        assert response.error is None
        fake_client.get_groups.assert_awaited_once_with()

    @pytest.mark.asyncio
    async def test_content_result_passed_through(
        self, dispatcher: Dispatcher, fake_client: MagicMock
    ) -> None:
        already_wrapped = {"content": [{"type": "text", "text": "hi"}]}
        fake_client.get_groups.return_value = already_wrapped
        response = await dispatcher.dispatch(call_request("splitwise_get_groups", {}))
        assert response is not None
        assert response.result == already_wrapped

    @pytest.mark.asyncio
    async def test_unknown_tool_is_internal_error(self, dispatcher: Dispatcher) -> None:
        response = await dispatcher.dispatch(call_request("splitwise_make_coffee", {}))
        assert response is not None
        assert response.error is not None
        assert response.error["code"] == INTERNAL_ERROR
        assert "splitwise_make_coffee" in response.error["message"]

    @pytest.mark.asyncio
    async def test_missing_name_is_invalid_params(self, dispatcher: Dispatcher) -> None:
        response = await dispatcher.dispatch(
            Request(jsonrpc="2.0", method="tools/call", params={}, id=1)
        )
        assert response is not None
        assert response.error["code"] == INVALID_PARAMS

    @pytest.mark.asyncio
    async def test_non_object_arguments_rejected(self, dispatcher: Dispatcher) -> None:
        response = await dispatcher.dispatch(call_request("splitwise_get_user", [1]))
        assert response is not None
        assert response.error["code"] == INVALID_PARAMS

    @pytest.mark.asyncio
    async def test_schema_violation_is_invalid_params(
        self, dispatcher: Dispatcher, fake_client: MagicMock
    ) -> None:
        response = await dispatcher.dispatch(call_request("splitwise_get_user", {}))
        assert response is not None
        assert response.error["code"] == INVALID_PARAMS
        fake_client.get_user.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unexpected_property_rejected(self, dispatcher: Dispatcher) -> None:
        response = await dispatcher.dispatch(
            call_request("splitwise_get_user", {"id": 1, "nickname": "x"})
        )
        assert response is not None
        assert response.error["code"] == INVALID_PARAMS
        assert "nickname" in response.error["message"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("status", "code"),
        [
            (401, AUTHENTICATION_ERROR),
            (403, FORBIDDEN_ERROR),
            (404, NOT_FOUND_ERROR),
            (500, INTERNAL_ERROR),
            (None, INTERNAL_ERROR),
        ],
    )
    async def test_upstream_errors_classified_by_status(
        self,
        dispatcher: Dispatcher,
        fake_client: MagicMock,
        status: int | None,
        code: int,
    ) -> None:
        body = {"errors": {"base": ["nope"]}}
        fake_client.get_user.side_effect = SplitwiseAPIError(
            f"Splitwise API Error: {status} - nope", status_code=status, body=body
        )
        response = await dispatcher.dispatch(call_request("splitwise_get_user", {"id": 3}))
        assert response is not None
        assert response.error["code"] == code
        assert response.error["message"].startswith("Splitwise API Error")
        assert response.error["data"] == {"status": status, "body": body}

    @pytest.mark.asyncio
    async def test_unexpected_exception_message_only(
        self, dispatcher: Dispatcher, fake_client: MagicMock
    ) -> None:
        fake_client.get_groups.side_effect = RuntimeError("boom")
        response = await dispatcher.dispatch(call_request("splitwise_get_groups", {}))
        assert response is not None
        assert response.error == {"code": INTERNAL_ERROR, "message": "boom"}

    @pytest.mark.asyncio
    async def test_exactly_one_of_result_or_error(
        self, dispatcher: Dispatcher, fake_client: MagicMock
    ) -> None:
        fake_client.get_groups.side_effect = RuntimeError("boom")
        for name in ("splitwise_get_current_user", "splitwise_get_groups"):
            response = await dispatcher.dispatch(call_request(name, {}))
            assert response is not None
            wire = response_to_dict(response)
            assert ("result" in wire) != ("error" in wire)

    @pytest.mark.asyncio
    async def test_notification_call_runs_but_returns_nothing(
        self, dispatcher: Dispatcher, fake_client: MagicMock
    ) -> None:
        request = call_request("splitwise_get_current_user", {}, request_id=None)
        request.is_notification = True
        assert await dispatcher.dispatch(request) is None
        fake_client.get_current_user.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_failing_notification_returns_nothing(self, dispatcher: Dispatcher) -> None:
        request = call_request("splitwise_unknown", {}, request_id=None)
        request.is_notification = True
        assert await dispatcher.dispatch(request) is None


class TestHandleMessage:
    @pytest.mark.asyncio
    async def test_invalid_json(self, dispatcher: Dispatcher) -> None:
        response = await dispatcher.handle_message("{oops")
        assert response is not None
        assert response.id is None
        assert response.error["code"] == PARSE_ERROR

    @pytest.mark.asyncio
    async def test_invalid_shape(self, dispatcher: Dispatcher) -> None:
        response = await dispatcher.handle_message('{"jsonrpc": "2.0", "id": 3}')
        assert response is not None
        assert response.id == 3
        assert response.error["code"] == INVALID_REQUEST

    @pytest.mark.asyncio
    async def test_valid_request(self, dispatcher: Dispatcher) -> None:
        response = await dispatcher.handle_message(
            '{"jsonrpc": "2.0", "id": "a", "method": "initialize", "params": {}}'
        )
        assert response is not None
        assert response.id == "a"
        assert response.result["protocolVersion"] == PROTOCOL_VERSION


class TestWrapToolResult:
    def test_plain_value(self) -> None:
        wrapped = wrap_tool_result([1, 2])
        assert json.loads(wrapped["content"][0]["text"]) == [1, 2]

    def test_pretty_printed(self) -> None:
        wrapped = wrap_tool_result({"a": 1})
        assert wrapped["content"][0]["text"] == '{\n  "a": 1\n}'

    def test_content_that_is_not_a_list_gets_wrapped(self) -> None:
        wrapped = wrap_tool_result({"content": "text"})
        assert json.loads(wrapped["content"][0]["text"]) == {"content": "text"}
