"""Pytest fixtures for HTTP transport tests.

Provides a deterministic rate limiter, a small echo MCP server that
reports the credential it sees, and httpx clients bound to the ASGI app.
"""

from collections.abc import AsyncGenerator

import anyio
import httpx
import pytest
import pytest_asyncio
from fastmcp import FastMCP

from src.api.main import create_app
from src.api.middleware.rate_limit import RateLimiter
from src.config import ServerConfig
from src.services.credential_context import get_current_credential
from tests.helpers.mcp_requests import FakeClock


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def limiter(clock: FakeClock) -> RateLimiter:
    return RateLimiter(max_requests=100, window_seconds=900, clock=clock)


@pytest.fixture
def server_config() -> ServerConfig:
    return ServerConfig(transport="http", redirect_url="https://www.europarcel.com")


@pytest.fixture
def echo_server() -> FastMCP:
    """MCP server whose only tool echoes the credential bound to the request."""
    server = FastMCP(name="echo")

    async def whoami(delay: float = 0.0) -> str:
        """Return the caller's credential after an optional pause."""
        await anyio.sleep(delay)
        return get_current_credential() or "<none>"

    server.tool(name="whoami")(whoami)
    return server


@pytest_asyncio.fixture
async def echo_client(
    server_config, echo_server, limiter
) -> AsyncGenerator[httpx.AsyncClient, None]:
    """Client for an app exposing the echo server."""
    app = create_app(server_config, server=echo_server, rate_limiter=limiter)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


@pytest_asyncio.fixture
async def europarcel_client(
    server_config, limiter
) -> AsyncGenerator[httpx.AsyncClient, None]:
    """Client for an app exposing the Europarcel tool registry."""
    app = create_app(server_config, rate_limiter=limiter)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client
