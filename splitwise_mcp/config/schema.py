"""Pydantic models for server configuration validation."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_API_BASE_URL = "https://secure.splitwise.com/api/v3.0"
DEFAULT_WS_BACKEND_URL = "ws://localhost:4001"
DEFAULT_HTTP_PORT = 4000
DEFAULT_WEBSOCKET_PORT = 4001

# MCP-Protocol-Version header values accepted by the stateless HTTP binding
SUPPORTED_PROTOCOL_VERSIONS = ("2024-11-05", "2025-03-26", "2025-06-18")


class ServerConfig(BaseModel):
    """Runtime configuration, assembled from the environment and CLI flags.

    Example .env:
        SPLITWISE_ACCESS_TOKEN=abc123
        SPLITWISE_API_BASE_URL=https://secure.splitwise.com/api/v3.0
        PORT=4000
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    access_token: str | None = None
    """Bearer token for the Splitwise API (SPLITWISE_ACCESS_TOKEN)."""

    api_base_url: str = DEFAULT_API_BASE_URL
    """Base URL for Splitwise API requests (SPLITWISE_API_BASE_URL)."""

    request_timeout: float = Field(default=30.0, gt=0)
    """Timeout in seconds for each upstream API request."""

    host: str = "127.0.0.1"
    """Interface the network transports bind to."""

    port: int | None = Field(default=None, ge=0, le=65535)
    """Listen port (PORT). None means the transport's own default."""

    ws_backend_url: str = DEFAULT_WS_BACKEND_URL
    """WebSocket backend the HTTP adapter forwards to (WS_BACKEND_URL)."""

    supported_protocol_versions: tuple[str, ...] = SUPPORTED_PROTOCOL_VERSIONS
    """Allow-list for the MCP-Protocol-Version request header."""

    sse_keepalive_interval: float = Field(default=30.0, gt=0)
    """Seconds between keep-alive comments on the GET /mcp event stream."""

    log_level: str = "INFO"
    """Console log level name (SPLITWISE_MCP_LOG_LEVEL)."""

    @field_validator("api_base_url", "ws_backend_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("access_token")
    @classmethod
    def _blank_token_is_missing(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            return None
        return value

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level: {value!r}")
        return level

    def resolve_port(self, default: int) -> int:
        """Return the configured port, or ``default`` if none was set."""
        return self.port if self.port is not None else default
