"""Logging and component wiring shared by every server mode."""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from splitwise_mcp.config.schema import ServerConfig
from splitwise_mcp.rpc.dispatcher import Dispatcher
from splitwise_mcp.splitwise.client import SplitwiseClient
from splitwise_mcp.tools.catalog import ToolCatalog

logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_server_logging(
    level: int | str = logging.INFO,
    log_file: Path | None = None,
) -> None:
    """Configure logging for the splitwise_mcp namespace.

    Console output goes to stderr; stdout is reserved for stdio framing.
    With ``log_file`` set, a rotating file handler (max 5MB per file,
    3 backups) is added as well.

    Args:
        level: Logging level, as an int or a level name.
        log_file: Optional path for a rotating log file. Parent directories
            are created if missing.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(_LOG_FORMAT, datefmt="%H:%M:%S"))

    app_logger = logging.getLogger("splitwise_mcp")
    app_logger.setLevel(level)

    # Remove any existing handlers to avoid duplicates on reconfigure
    app_logger.handlers.clear()
    app_logger.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=5 * 1024 * 1024,  # 5MB
            backupCount=3,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter(_LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
        )
        app_logger.addHandler(file_handler)

    # Don't propagate to root logger
    app_logger.propagate = False

    if log_file is not None:
        logger.info("Server logging configured: %s", log_file)


def build_dispatcher(config: ServerConfig) -> Dispatcher:
    """Create the client, catalog and dispatcher for one server process.

    Raises:
        ConfigError: If no access token is configured.
    """
    client = SplitwiseClient(config)
    catalog = ToolCatalog(client)
    logger.debug("Loaded %d tools", len(catalog))
    return Dispatcher(catalog)
