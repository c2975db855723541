"""FastAPI application exposing the Europarcel MCP server over HTTP.

Routes:
- GET /        301 redirect to the configured URL (not rate limited)
- POST /       one-shot MCP request (X-API-KEY required, rate limited)
- GET /health  liveness check

The MCP tool registry is process-wide; everything per caller (credential,
protocol endpoint) is created inside the POST handler and discarded with
the request.
"""

import logging

from fastapi import FastAPI
from fastapi.responses import RedirectResponse
from fastmcp import FastMCP
from starlette.routing import Route

from src.api.middleware.rate_limit import RateLimiter
from src.api.transport import StatelessMCPEndpoint
from src.config import ServerConfig, load_config
from src.mcp.europarcel.tools.common import configure_client

logger = logging.getLogger(__name__)


def create_app(
    config: ServerConfig | None = None,
    server: FastMCP | None = None,
    rate_limiter: RateLimiter | None = None,
) -> FastAPI:
    """Build the HTTP application.

    Args:
        config: Server settings. Loaded from the environment when omitted.
        server: MCP server to expose. Defaults to the Europarcel server.
        rate_limiter: Limiter for tool invocations. Built from config when
            omitted.

    Returns:
        Configured FastAPI application.
    """
    config = config or load_config()
    configure_client(config)
    if server is None:
        from src.mcp.europarcel.server import mcp as server
    if rate_limiter is None:
        rate_limiter = RateLimiter(
            max_requests=config.rate_limit_max_requests,
            window_seconds=config.rate_limit_window_seconds,
        )

    app = FastAPI(
        title="Europarcel MCP",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.config = config
    app.state.rate_limiter = rate_limiter

    @app.get("/", include_in_schema=False)
    async def redirect_root() -> RedirectResponse:
        return RedirectResponse(config.redirect_url, status_code=301)

    @app.get("/health", include_in_schema=False)
    async def health() -> dict:
        return {"status": "ok"}

    app.router.routes.append(
        Route(
            "/",
            endpoint=StatelessMCPEndpoint(
                server,
                rate_limiter,
                trust_proxy=config.trust_proxy,
            ),
            methods=["POST"],
        )
    )

    logger.info(
        "HTTP MCP endpoint ready (rate limit %d requests per %gs, redirect %s)",
        config.rate_limit_max_requests,
        config.rate_limit_window_seconds,
        config.redirect_url,
    )
    return app
