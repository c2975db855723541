"""Root-level pytest fixtures for all tests.

Provides shared fixtures for:
- Europarcel clients wired to a simulated upstream (httpx.MockTransport)
- Environment isolation for configuration-sensitive code
"""

from collections.abc import Callable

import httpx
import pytest

from src.mcp.europarcel.client import EuroparcelClient
from tests.helpers.upstream import TEST_API_KEY, TEST_BASE_URL, RecordingUpstream


# ============================================================================
# Pytest Markers
# ============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests requiring external services"
    )


# ============================================================================
# Environment
# ============================================================================


@pytest.fixture(autouse=True)
def _isolate_europarcel_env(monkeypatch):
    """Keep developer shell settings from leaking into tests."""
    for var in (
        "EUROPARCEL_API_KEY",
        "EUROPARCEL_API_BASE_URL",
        "EUROPARCEL_API_TIMEOUT",
        "MCP_TRANSPORT",
        "MCP_PORT",
    ):
        monkeypatch.delenv(var, raising=False)


# ============================================================================
# Upstream simulation
# ============================================================================


@pytest.fixture
def make_client() -> Callable[..., tuple[EuroparcelClient, RecordingUpstream]]:
    """Factory returning a client wired to a RecordingUpstream.

    Usage:
        client, upstream = make_client(httpx.Response(200, json=[...]))
    """

    def _make(
        *responses: httpx.Response,
        handler: Callable[[httpx.Request], httpx.Response] | None = None,
    ) -> tuple[EuroparcelClient, RecordingUpstream]:
        upstream = RecordingUpstream(list(responses))
        client = EuroparcelClient(
            TEST_API_KEY,
            base_url=TEST_BASE_URL,
            timeout=5.0,
            transport=httpx.MockTransport(handler or upstream),
        )
        return client, upstream

    return _make
