"""Tool argument validation.

Arguments arriving in a tools/call request are untyped JSON. They are
checked against the tool's input schema before any upstream call is made,
so malformed shapes are rejected with INVALID_PARAMS instead of reaching
the Splitwise API.
"""

from __future__ import annotations

from typing import Any

import jsonschema

from splitwise_mcp.core.errors import ToolArgumentError


def validate_tool_arguments(
    tool_name: str,
    arguments: dict[str, Any],
    schema: dict[str, Any],
) -> dict[str, Any]:
    """Validate tool arguments against the tool's JSON schema.

    Checks required fields, types and enums, then rejects any top-level
    property the schema does not declare.

    Args:
        tool_name: Name of the tool, used in error messages.
        arguments: The arguments from the tools/call request.
        schema: The tool's input schema.

    Returns:
        The arguments, unchanged.

    Raises:
        ToolArgumentError: If validation fails or unknown properties are present.
    """
    try:
        jsonschema.validate(arguments, schema)
    except jsonschema.ValidationError as e:
        raise ToolArgumentError(tool_name, _format_validation_error(e, tool_name)) from e

    schema_props = set(schema.get("properties", {}).keys())
    extras = set(arguments.keys()) - schema_props
    if extras:
        raise ToolArgumentError(
            tool_name,
            f"{tool_name}: Unexpected parameters: {sorted(extras)}",
        )

    return arguments


def _format_validation_error(error: jsonschema.ValidationError, tool_name: str) -> str:
    """Format a jsonschema ValidationError into a readable message."""
    path = ".".join(str(p) for p in error.absolute_path) if error.absolute_path else ""
    validator = error.validator

    if validator == "required":
        # error.message is like "'id' is a required property"
        if path:
            return f"{tool_name}: Parameter '{path}': {error.message}"
        return f"{tool_name}: {error.message}"

    if validator == "type":
        if path:
            return f"{tool_name}: Parameter '{path}' has wrong type - {error.message}"
        return f"{tool_name}: {error.message}"

    if validator == "enum":
        if path:
            return f"{tool_name}: Parameter '{path}' must be one of {error.validator_value}"
        return f"{tool_name}: Value must be one of {error.validator_value}"

    if path:
        return f"{tool_name}: Parameter '{path}' - {error.message}"
    return f"{tool_name}: {error.message}"
