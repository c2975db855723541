"""Process configuration loaded from environment variables.

Variables:
    MCP_TRANSPORT                  stdio | http (default stdio)
    MCP_HOST / MCP_PORT            HTTP bind address (127.0.0.1:3000)
    MCP_REDIRECT_URL               target of GET / in HTTP mode
    MCP_RATE_LIMIT_WINDOW_SECONDS  rate window length (900)
    MCP_RATE_LIMIT_MAX_REQUESTS    requests per key per window (100)
    MCP_TRUST_PROXY                use X-Forwarded-For for client IPs
    MCP_LOG_LEVEL                  logging level (INFO)
    EUROPARCEL_API_BASE_URL        upstream API root
    EUROPARCEL_API_TIMEOUT         upstream timeout in seconds (30)
    EUROPARCEL_API_KEY             stdio mode only: credential for the process

In HTTP mode the API key always comes from each request's X-API-KEY
header; EUROPARCEL_API_KEY is ignored.
"""

import os
from typing import Literal

from pydantic import BaseModel, Field, ValidationError, field_validator

from src.mcp.europarcel.client import DEFAULT_BASE_URL, DEFAULT_TIMEOUT

DEFAULT_REDIRECT_URL = "https://www.europarcel.com"

_TRUTHY = {"1", "true", "yes", "on"}
_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}

# env var -> ServerConfig field
_ENV_FIELDS = {
    "MCP_TRANSPORT": "transport",
    "MCP_HOST": "host",
    "MCP_PORT": "port",
    "MCP_REDIRECT_URL": "redirect_url",
    "MCP_RATE_LIMIT_WINDOW_SECONDS": "rate_limit_window_seconds",
    "MCP_RATE_LIMIT_MAX_REQUESTS": "rate_limit_max_requests",
    "MCP_TRUST_PROXY": "trust_proxy",
    "MCP_LOG_LEVEL": "log_level",
    "EUROPARCEL_API_BASE_URL": "api_base_url",
    "EUROPARCEL_API_TIMEOUT": "api_timeout",
}


class ServerConfig(BaseModel):
    """Validated server settings."""

    transport: Literal["stdio", "http"] = "stdio"
    host: str = "127.0.0.1"
    port: int = Field(default=3000, ge=1, le=65535)
    redirect_url: str = DEFAULT_REDIRECT_URL
    rate_limit_window_seconds: float = Field(default=900.0, gt=0)
    rate_limit_max_requests: int = Field(default=100, ge=1)
    trust_proxy: bool = False
    log_level: str = "INFO"
    api_base_url: str = DEFAULT_BASE_URL
    api_timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    # Never populated in HTTP mode
    api_key: str | None = Field(default=None, repr=False)

    @field_validator("transport", mode="before")
    @classmethod
    def _normalize_transport(cls, value: object) -> object:
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("trust_proxy", mode="before")
    @classmethod
    def _parse_flag(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower() in _TRUTHY
        return value

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"unknown log level '{value}'")
        return level


def load_config(environ: dict[str, str] | None = None) -> ServerConfig:
    """Build a ServerConfig from environment variables.

    Args:
        environ: Mapping to read instead of os.environ (tests).

    Returns:
        Validated configuration.

    Raises:
        ValueError: If a variable holds an invalid value. The message names
            the offending variable.
    """
    env = os.environ if environ is None else environ
    values: dict[str, object] = {}
    for var, field_name in _ENV_FIELDS.items():
        raw = env.get(var)
        if raw is not None and raw.strip() != "":
            values[field_name] = raw.strip()

    try:
        config = ServerConfig(**values)
    except ValidationError as e:
        field_to_env = {f: v for v, f in _ENV_FIELDS.items()}
        problems = "; ".join(
            f"{field_to_env.get(str(err['loc'][0]), err['loc'][0])}: {err['msg']}"
            for err in e.errors()
        )
        raise ValueError(f"Invalid configuration: {problems}") from e

    if config.transport == "stdio":
        api_key = env.get("EUROPARCEL_API_KEY", "").strip()
        if api_key:
            config = config.model_copy(update={"api_key": api_key})
    return config
