"""Tool catalog: descriptor lookup, argument validation and dispatch.

Example:
    catalog = ToolCatalog(SplitwiseClient(config))
    names = [tool.name for tool in catalog.list_tools()]
    groups = await catalog.call("splitwise_get_groups", {})
"""

from __future__ import annotations

import logging
from typing import Any

from splitwise_mcp.core.errors import UnknownToolError
from splitwise_mcp.core.validation import validate_tool_arguments
from splitwise_mcp.splitwise.client import SplitwiseClient
from splitwise_mcp.tools.definitions import ALL_TOOLS, ToolDescriptor
from splitwise_mcp.tools.handlers import TOOL_HANDLERS, ToolHandler

logger = logging.getLogger(__name__)


class ToolCatalog:
    """Registry of the Splitwise tools bound to one API client.

    Attributes:
        client: The injected Splitwise client every tool call goes through.
    """

    def __init__(
        self,
        client: SplitwiseClient,
        tools: tuple[ToolDescriptor, ...] = ALL_TOOLS,
        handlers: dict[str, ToolHandler] | None = None,
    ) -> None:
        self.client = client
        self._tools = tools
        self._by_name = {tool.name: tool for tool in tools}
        self._handlers = handlers if handlers is not None else TOOL_HANDLERS

    def list_tools(self) -> list[ToolDescriptor]:
        """Return all descriptors in catalog order."""
        return list(self._tools)

    def get(self, name: str) -> ToolDescriptor | None:
        return self._by_name.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __len__(self) -> int:
        return len(self._tools)

    async def call(self, name: str, arguments: dict[str, Any]) -> Any:
        """Validate arguments and invoke the named tool.

        Args:
            name: Tool name.
            arguments: Tool arguments from the tools/call request.

        Returns:
            The raw result from the Splitwise API.

        Raises:
            UnknownToolError: If no tool with this name is registered.
            ToolArgumentError: If the arguments fail schema validation.
            SplitwiseAPIError: If the upstream call fails.
        """
        tool = self._by_name.get(name)
        handler = self._handlers.get(name)
        if tool is None or handler is None:
            raise UnknownToolError(name)

        validate_tool_arguments(name, arguments, tool.input_schema)
        logger.debug("Calling tool %s", name)
        return await handler(self.client, arguments)
