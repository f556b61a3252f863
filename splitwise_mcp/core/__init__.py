"""Shared primitives: the typed exception hierarchy and argument validation."""

from splitwise_mcp.core.errors import (
    ConfigError,
    InvalidParamsError,
    SplitwiseMCPError,
    ToolArgumentError,
    UnknownToolError,
)

__all__ = [
    "ConfigError",
    "InvalidParamsError",
    "SplitwiseMCPError",
    "ToolArgumentError",
    "UnknownToolError",
]
