"""Process entry point for the Europarcel MCP server.

Selects the transport from MCP_TRANSPORT:
  stdio: one MCP session over stdin/stdout for the process lifetime
  http:  uvicorn serving src.api.main, one isolated session per request

Logs always go to stderr; in stdio mode stdout carries the protocol.
"""

import logging
import sys

from src.config import ServerConfig, load_config
from src.services.credential_context import credential_scope
from src.utils.redaction import mask_credential

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    """Send application logs to stderr."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s:%(name)s:%(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )
    # Request-level httpx logs would repeat every upstream call
    logging.getLogger("httpx").setLevel(logging.WARNING)


def run_stdio(config: ServerConfig) -> None:
    """Serve MCP over stdio.

    The pipe has a single tenant, so the credential is provisioned once from
    EUROPARCEL_API_KEY and bound for the whole server run.
    """
    from src.mcp.europarcel.server import mcp
    from src.mcp.europarcel.tools.common import configure_client

    configure_client(config)
    if not config.api_key:
        logger.warning(
            "EUROPARCEL_API_KEY is not set; tools will report a missing API key"
        )
        mcp.run(transport="stdio")
        return

    logger.info(
        "Starting Europarcel MCP server with stdio transport (key %s)",
        mask_credential(config.api_key),
    )
    with credential_scope(config.api_key):
        mcp.run(transport="stdio")


def run_http(config: ServerConfig) -> None:
    """Serve MCP over HTTP with uvicorn."""
    import uvicorn

    from src.api.main import create_app

    logger.info(
        "Starting Europarcel MCP server with HTTP transport on %s:%d",
        config.host, config.port,
    )
    uvicorn.run(
        create_app(config),
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
    )


def main() -> None:
    """Load configuration and run the selected transport."""
    try:
        config = load_config()
    except ValueError as e:
        configure_logging()
        logger.error("%s", e)
        sys.exit(1)

    configure_logging(config.log_level)
    logger.info("Europarcel API base URL: %s", config.api_base_url)

    if config.transport == "stdio":
        run_stdio(config)
    else:
        run_http(config)


if __name__ == "__main__":
    main()
