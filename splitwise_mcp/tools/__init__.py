"""Splitwise tools exposed over MCP."""

from splitwise_mcp.tools.catalog import ToolCatalog
from splitwise_mcp.tools.definitions import ALL_TOOLS, ToolDescriptor, get_all_tools
from splitwise_mcp.tools.handlers import TOOL_HANDLERS, flatten_users

__all__ = [
    "ALL_TOOLS",
    "TOOL_HANDLERS",
    "ToolCatalog",
    "ToolDescriptor",
    "flatten_users",
    "get_all_tools",
]
