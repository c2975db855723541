"""Shared helpers for Europarcel tool handlers."""

from dataclasses import dataclass

from src.config import ServerConfig
from src.mcp.europarcel.client import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, EuroparcelClient
from src.services.credential_context import get_current_credential

MISSING_API_KEY_MESSAGE = "Error: X-API-KEY header is required"


@dataclass(frozen=True)
class ClientSettings:
    """Connection settings shared by every per-request client."""

    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT


_settings = ClientSettings()


def configure_client(config: ServerConfig) -> None:
    """Apply the server's upstream settings to clients built from now on."""
    global _settings
    _settings = ClientSettings(base_url=config.api_base_url, timeout=config.api_timeout)


def client_for_current_request() -> EuroparcelClient | None:
    """Build a client for the caller of the current request.

    Returns:
        A client bound to the request's API key, or None when no credential
        is in scope. Handlers answer None with MISSING_API_KEY_MESSAGE.
    """
    api_key = get_current_credential()
    if api_key is None:
        return None
    return EuroparcelClient(api_key, base_url=_settings.base_url, timeout=_settings.timeout)
