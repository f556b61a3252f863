"""Splitwise REST API client."""

from splitwise_mcp.splitwise.client import SplitwiseAPIError, SplitwiseClient

__all__ = ["SplitwiseAPIError", "SplitwiseClient"]
