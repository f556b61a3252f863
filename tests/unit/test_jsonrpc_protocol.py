"""Tests for JSON-RPC message parsing and serialization."""

import json

import pytest

from splitwise_mcp.rpc.protocol import (
    INVALID_REQUEST,
    PARSE_ERROR,
    InvalidRequestError,
    ParseError,
    decode_message,
    error_response_for,
    make_error_response,
    make_success_response,
    parse_request,
    serialize_response,
)


class TestDecodeMessage:
    def test_valid_json(self) -> None:
        assert decode_message('{"a": 1}') == {"a": 1}

    def test_bytes_accepted(self) -> None:
        assert decode_message(b'{"a": 1}') == {"a": 1}

    def test_invalid_json_raises_parse_error(self) -> None:
        with pytest.raises(ParseError):
            decode_message("{not json")


class TestParseRequest:
    """Tests for request shape validation."""

    def test_request_with_id(self) -> None:
        request = parse_request({"jsonrpc": "2.0", "id": 7, "method": "ping"})
        assert request.method == "ping"
        assert request.id == 7
        assert request.is_notification is False

    def test_missing_id_is_notification(self) -> None:
        request = parse_request({"jsonrpc": "2.0", "method": "notifications/initialized"})
        assert request.is_notification is True
        assert request.id is None

    def test_null_id_is_a_request(self) -> None:
        """An explicit null id still expects a response."""
        request = parse_request({"jsonrpc": "2.0", "id": None, "method": "ping"})
        assert request.is_notification is False
        assert request.id is None

    def test_string_id(self) -> None:
        request = parse_request({"jsonrpc": "2.0", "id": "abc", "method": "tools/list"})
        assert request.id == "abc"

    def test_fractional_id(self) -> None:
        request = parse_request({"jsonrpc": "2.0", "id": 1.5, "method": "tools/list"})
        assert request.id == 1.5
        assert request.is_notification is False

    def test_params_kept(self) -> None:
        request = parse_request(
            {"jsonrpc": "2.0", "id": 1, "method": "tools/call", "params": {"name": "x"}}
        )
        assert request.params == {"name": "x"}

    def test_non_object_rejected(self) -> None:
        with pytest.raises(InvalidRequestError):
            parse_request([1, 2, 3])

    def test_wrong_version_echoes_id(self) -> None:
        with pytest.raises(InvalidRequestError) as exc_info:
            parse_request({"jsonrpc": "1.0", "id": 5, "method": "ping"})
        assert exc_info.value.request_id == 5

    def test_missing_method_rejected(self) -> None:
        with pytest.raises(InvalidRequestError, match="method"):
            parse_request({"jsonrpc": "2.0", "id": 1})

    def test_positional_params_rejected(self) -> None:
        with pytest.raises(InvalidRequestError, match="params"):
            parse_request({"jsonrpc": "2.0", "id": 1, "method": "ping", "params": [1]})

    def test_boolean_id_rejected(self) -> None:
        with pytest.raises(InvalidRequestError, match="id"):
            parse_request({"jsonrpc": "2.0", "id": True, "method": "ping"})


class TestSerializeResponse:
    def test_success_has_result_only(self) -> None:
        data = json.loads(serialize_response(make_success_response(1, {"ok": True})))
        assert data == {"jsonrpc": "2.0", "id": 1, "result": {"ok": True}}

    def test_error_has_error_only(self) -> None:
        data = json.loads(serialize_response(make_error_response(2, -32603, "boom")))
        assert "result" not in data
        assert data["error"] == {"code": -32603, "message": "boom"}

    def test_error_data_included_when_present(self) -> None:
        response = make_error_response(3, -32001, "denied", {"status": 401, "body": "no"})
        data = json.loads(serialize_response(response))
        assert data["error"]["data"] == {"status": 401, "body": "no"}


class TestErrorResponseFor:
    def test_parse_error_has_null_id(self) -> None:
        response = error_response_for(ParseError("bad"))
        assert response.id is None
        assert response.error is not None
        assert response.error["code"] == PARSE_ERROR

    def test_invalid_request_keeps_id(self) -> None:
        response = error_response_for(InvalidRequestError("bad shape", request_id=9))
        assert response.id == 9
        assert response.error is not None
        assert response.error["code"] == INVALID_REQUEST
