"""JSON-RPC 2.0 core shared by every transport binding."""

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
    InvalidRequestError,
    ParseError,
    decode_message,
    error_response_for,
    make_error_response,
    make_success_response,
    parse_request,
    response_to_dict,
    serialize_response,
)
from splitwise_mcp.rpc.types import Request, Response

__all__ = [
    "AUTHENTICATION_ERROR",
    "Dispatcher",
    "FORBIDDEN_ERROR",
    "INTERNAL_ERROR",
    "INVALID_PARAMS",
    "INVALID_REQUEST",
    "InvalidRequestError",
    "METHOD_NOT_FOUND",
    "NOT_FOUND_ERROR",
    "PARSE_ERROR",
    "PROTOCOL_VERSION",
    "ParseError",
    "Request",
    "Response",
    "decode_message",
    "error_response_for",
    "make_error_response",
    "make_success_response",
    "parse_request",
    "response_to_dict",
    "serialize_response",
    "wrap_tool_result",
]
