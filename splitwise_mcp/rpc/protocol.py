"""JSON-RPC 2.0 protocol parsing and serialization."""

from __future__ import annotations

import json
from typing import Any

from splitwise_mcp.core.errors import SplitwiseMCPError
from splitwise_mcp.rpc.types import Request, Response


class ParseError(SplitwiseMCPError):
    """Raised when a message is not valid JSON."""


class InvalidRequestError(SplitwiseMCPError):
    """Raised when valid JSON is not a well-formed JSON-RPC 2.0 request.

    Attributes:
        request_id: The id recovered from the message, if it had a usable one.
    """

    def __init__(self, message: str, request_id: str | int | float | None = None) -> None:
        self.request_id = request_id
        super().__init__(message)


# JSON-RPC 2.0 error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

# Server error range (-32000 to -32099), used for classified upstream failures
AUTHENTICATION_ERROR = -32001
FORBIDDEN_ERROR = -32002
NOT_FOUND_ERROR = -32003

# Upstream HTTP status -> JSON-RPC error code
HTTP_STATUS_ERROR_CODES: dict[int, int] = {
    401: AUTHENTICATION_ERROR,
    403: FORBIDDEN_ERROR,
    404: NOT_FOUND_ERROR,
}


def decode_message(raw: str | bytes) -> Any:
    """Decode raw message text into a JSON value.

    Raises:
        ParseError: If the text is not valid JSON.
    """
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ParseError(f"Parse error: {e}") from e


def _usable_id(data: dict[str, Any]) -> str | int | float | None:
    request_id = data.get("id")
    if isinstance(request_id, (str, int, float)) and not isinstance(request_id, bool):
        return request_id
    return None


def parse_request(data: Any) -> Request:
    """Validate a decoded JSON value as a JSON-RPC 2.0 request.

    A message without an ``id`` member is a notification. An explicit
    ``"id": null`` is a request with a null id.

    Args:
        data: Decoded JSON value.

    Returns:
        A parsed Request object.

    Raises:
        InvalidRequestError: If the structure is not a valid request.
    """
    if not isinstance(data, dict):
        raise InvalidRequestError("Invalid Request: expected a JSON object")

    request_id = _usable_id(data)

    # Validate jsonrpc version
    jsonrpc = data.get("jsonrpc")
    if jsonrpc != "2.0":
        raise InvalidRequestError(
            f"Invalid Request: jsonrpc must be '2.0', got: {jsonrpc!r}", request_id
        )

    method = data.get("method")
    if not isinstance(method, str):
        raise InvalidRequestError(
            f"Invalid Request: method must be a string, got: {type(method).__name__}",
            request_id,
        )

    params = data.get("params")
    if params is not None and not isinstance(params, dict):
        raise InvalidRequestError(
            f"Invalid Request: params must be an object, got: {type(params).__name__}",
            request_id,
        )

    is_notification = "id" not in data
    raw_id = data.get("id")
    if raw_id is not None and request_id is None:
        raise InvalidRequestError(
            f"Invalid Request: id must be string, number, or null, got: {type(raw_id).__name__}"
        )

    return Request(
        jsonrpc=jsonrpc,
        method=method,
        params=params,
        id=request_id,
        is_notification=is_notification,
    )


def response_to_dict(response: Response) -> dict[str, Any]:
    """Build the wire form of a Response. Exactly one of result/error is set."""
    data: dict[str, Any] = {
        "jsonrpc": response.jsonrpc,
        "id": response.id,
    }

    if response.error is not None:
        data["error"] = response.error
    else:
        data["result"] = response.result

    return data


def serialize_response(response: Response) -> str:
    """Serialize a Response to compact JSON text (no trailing newline)."""
    return json.dumps(response_to_dict(response), separators=(",", ":"))


def make_error_response(
    request_id: str | int | float | None,
    code: int,
    message: str,
    data: Any = None,
) -> Response:
    """Create an error response.

    Args:
        request_id: The id from the original request.
        code: JSON-RPC error code.
        message: Human-readable error message.
        data: Optional additional error data.

    Returns:
        A Response with the error field populated.
    """
    error: dict[str, Any] = {
        "code": code,
        "message": message,
    }
    if data is not None:
        error["data"] = data

    return Response(
        jsonrpc="2.0",
        id=request_id,
        error=error,
    )


def make_success_response(request_id: str | int | float | None, result: Any) -> Response:
    """Create a success response.

    Args:
        request_id: The id from the original request.
        result: The result of the method call.

    Returns:
        A Response with the result field populated.
    """
    return Response(
        jsonrpc="2.0",
        id=request_id,
        result=result,
    )


def error_response_for(exc: ParseError | InvalidRequestError) -> Response:
    """Build the in-band error reply for a message that failed decoding."""
    if isinstance(exc, ParseError):
        return make_error_response(None, PARSE_ERROR, "Parse error", exc.message)
    return make_error_response(exc.request_id, INVALID_REQUEST, exc.message)
