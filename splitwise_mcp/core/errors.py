"""Typed exception hierarchy for the Splitwise MCP server."""

from __future__ import annotations


class SplitwiseMCPError(Exception):
    """Base class for all Splitwise MCP errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConfigError(SplitwiseMCPError):
    """Raised for configuration issues (missing credential, invalid settings)."""


class InvalidParamsError(SplitwiseMCPError):
    """Raised when JSON-RPC method parameters are invalid."""


class ToolArgumentError(InvalidParamsError):
    """Raised when tool arguments do not match the tool's input schema."""

    def __init__(self, tool_name: str, message: str) -> None:
        self.tool_name = tool_name
        super().__init__(message)


class UnknownToolError(SplitwiseMCPError):
    """Raised when a tools/call names a tool that is not in the catalog.

    Surfaces as INTERNAL_ERROR on the wire, not INVALID_PARAMS.
    """

    def __init__(self, tool_name: str) -> None:
        self.tool_name = tool_name
        super().__init__(f"Unknown tool: {tool_name}")
