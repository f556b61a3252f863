"""Shared pytest fixtures and configuration."""

import logging
from unittest.mock import AsyncMock, MagicMock

import pytest

from splitwise_mcp.config.schema import ServerConfig
from splitwise_mcp.rpc.dispatcher import Dispatcher
from splitwise_mcp.splitwise.client import SplitwiseClient
from splitwise_mcp.tools.catalog import ToolCatalog

CURRENT_USER = {"user": {"id": 42, "first_name": "Ada", "default_currency": "USD"}}


@pytest.fixture(autouse=True)
def reset_app_logger():
    """Undo configure_server_logging() so tests don't leak handlers."""
    yield
    app_logger = logging.getLogger("splitwise_mcp")
    for handler in app_logger.handlers:
        handler.close()
    app_logger.handlers.clear()
    app_logger.propagate = True
    app_logger.setLevel(logging.NOTSET)


@pytest.fixture
def config() -> ServerConfig:
    return ServerConfig(access_token="test-token", sse_keepalive_interval=0.05)


@pytest.fixture
def fake_client() -> MagicMock:
    """SplitwiseClient stand-in; every endpoint method is an AsyncMock."""
    client = MagicMock(spec=SplitwiseClient)
    client.get_current_user = AsyncMock(return_value=CURRENT_USER)
    client.aclose = AsyncMock()
    return client


@pytest.fixture
def catalog(fake_client: MagicMock) -> ToolCatalog:
    return ToolCatalog(fake_client)


@pytest.fixture
def dispatcher(catalog: ToolCatalog) -> Dispatcher:
    return Dispatcher(catalog)
