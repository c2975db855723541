"""Europarcel MCP server: typed API client, tools and text formatting."""
