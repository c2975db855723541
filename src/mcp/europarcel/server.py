"""FastMCP server for the Europarcel shipping API.

One process-wide server instance holds the tool registry. It is read-only
after import and is shared by both transports:
- stdio: ``mcp.run(transport="stdio")`` attaches it to the process pipe
- http: ``src.api.transport.StatelessMCPEndpoint`` runs one isolated
  protocol session per HTTP request against the same server
"""

from fastmcp import FastMCP

from src.mcp.europarcel.tools import register_tools

SERVER_NAME = "europarcel"

# Create the FastMCP server instance
mcp = FastMCP(
    name=SERVER_NAME,
    instructions="MCP server for Europarcel API - Shipping and logistics services",
)

register_tools(mcp)


if __name__ == "__main__":
    # Run server with stdio transport for MCP communication
    mcp.run(transport="stdio")
