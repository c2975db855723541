"""Test helper utilities shared across test packages."""

from tests.helpers.mcp_requests import (
    MCP_HEADERS,
    FakeClock,
    auth_headers,
    call_tool,
    result_text,
    rpc,
)
from tests.helpers.upstream import RecordingUpstream, paged_response

__all__ = [
    "MCP_HEADERS",
    "FakeClock",
    "RecordingUpstream",
    "auth_headers",
    "call_tool",
    "paged_response",
    "result_text",
    "rpc",
]
