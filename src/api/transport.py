"""One-shot HTTP transport for the MCP server.

Every POST to the service root is an independent protocol session:

1. The caller's API key is read from the X-API-KEY header (401 if absent).
2. The request is counted against the key's rate window (429 on breach).
3. A brand-new ``StreamableHTTPServerTransport`` without a session id is
   created for this request only, and the shared server's protocol loop is
   run against it in a task group owned by the request.
4. All of that runs through ``run_with_credential`` so tool handlers read
   this caller's key, and only this caller's key.
5. Uncaught failures become a generic 500; details go to the log only.

Nothing outlives the request: the transport is terminated, the task group
is cancelled and the credential binding is reset before returning.
"""

from __future__ import annotations

import logging

import anyio
from fastmcp import FastMCP
from mcp.server.streamable_http import StreamableHTTPServerTransport
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.types import Message, Receive, Scope, Send

from src.api.middleware.rate_limit import RateLimiter, get_client_ip, rate_limit_key
from src.errors import ERROR_REGISTRY, AppError, format_error
from src.services.credential_context import run_with_credential
from src.utils.redaction import mask_credential

logger = logging.getLogger(__name__)

API_KEY_HEADER = "X-API-KEY"

# No failure detail in the body; the cause is only logged
INTERNAL_ERROR_BODY = {"error": ERROR_REGISTRY["E-4001"].title}


class _GuardedSend:
    """ASGI ``send`` wrapper for one response.

    Adds rate-limit headers to the response start, remembers whether the
    response has started, and drops any message sent after the final body
    chunk.
    """

    def __init__(self, send: Send, extra_headers: dict[str, str]) -> None:
        self._send = send
        self._extra_headers = [
            (name.lower().encode("latin-1"), value.encode("latin-1"))
            for name, value in extra_headers.items()
        ]
        self.response_started = False
        self.response_finished = False

    async def __call__(self, message: Message) -> None:
        if self.response_finished:
            logger.debug("Discarding %s sent after response completed", message["type"])
            return
        if message["type"] == "http.response.start":
            self.response_started = True
            message = {
                **message,
                "headers": list(message.get("headers", [])) + self._extra_headers,
            }
        elif message["type"] == "http.response.body" and not message.get("more_body", False):
            self.response_finished = True
        await self._send(message)


def error_response(error: AppError, headers: dict[str, str] | None = None) -> JSONResponse:
    """JSON response for an error raised before dispatch."""
    return JSONResponse(
        error.to_response_body(),
        status_code=error.http_status,
        headers=headers,
    )


class StatelessMCPEndpoint:
    """ASGI endpoint serving each request as an isolated MCP session.

    Args:
        server: Process-wide FastMCP server (the tool registry).
        rate_limiter: Limiter shared by all requests of the process.
        trust_proxy: Whether X-Forwarded-For identifies the client.
    """

    def __init__(
        self,
        server: FastMCP,
        rate_limiter: RateLimiter,
        *,
        trust_proxy: bool = False,
    ) -> None:
        self._server = server
        self._rate_limiter = rate_limiter
        self._trust_proxy = trust_proxy

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        request = Request(scope, receive)
        credential = request.headers.get(API_KEY_HEADER, "").strip()
        if not credential:
            error = AppError.from_code("E-5001")
            logger.info("Rejected MCP request: %s", format_error(error, include_remediation=False))
            await error_response(error)(scope, receive, send)
            return

        key = rate_limit_key(credential, get_client_ip(request, self._trust_proxy))
        decision = self._rate_limiter.hit(key)
        if not decision.allowed:
            error = AppError.from_code(
                "E-6001",
                limit=decision.limit,
                window_seconds=f"{decision.window_seconds:g}",
                retry_after=decision.retry_after,
                details={
                    "limit": decision.limit,
                    "window_seconds": decision.window_seconds,
                    "retry_after": decision.retry_after,
                },
            )
            logger.warning(
                "Rejected MCP request for caller %s: %s",
                mask_credential(credential), format_error(error, include_remediation=False),
            )
            await error_response(error, headers=decision.headers())(scope, receive, send)
            return

        guarded_send = _GuardedSend(send, decision.headers())
        try:
            await run_with_credential(
                credential, lambda: self._run_session(scope, receive, guarded_send)
            )
        except Exception:
            logger.exception("MCP request failed for caller %s", mask_credential(credential))
            if guarded_send.response_started:
                return
            response = JSONResponse(INTERNAL_ERROR_BODY, status_code=500)
            await response(scope, receive, guarded_send)

    async def _run_session(self, scope: Scope, receive: Receive, send: Send) -> None:
        """Create a protocol endpoint for this request, serve it, tear it down."""
        protocol_server = self._server._mcp_server
        http_transport = StreamableHTTPServerTransport(
            mcp_session_id=None,  # No session tracking in one-shot mode
            is_json_response_enabled=True,
        )

        async def run_protocol(*, task_status=anyio.TASK_STATUS_IGNORED) -> None:
            async with http_transport.connect() as (read_stream, write_stream):
                task_status.started()
                await protocol_server.run(
                    read_stream,
                    write_stream,
                    protocol_server.create_initialization_options(),
                    stateless=True,
                )

        async with anyio.create_task_group() as tg:
            await tg.start(run_protocol)
            try:
                await http_transport.handle_request(scope, receive, send)
            finally:
                await http_transport.terminate()
                tg.cancel_scope.cancel()
