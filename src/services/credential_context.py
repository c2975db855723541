"""Request-scoped propagation of the caller's Europarcel API key.

Tool handlers are invoked by the MCP dispatcher with a fixed signature, so
the transport cannot pass the caller's credential to them as an argument.
Instead the transport binds it for the dynamic extent of one request with
``credential_scope`` (or ``run_with_credential``) and handlers read it back
with ``get_current_credential``.

The value lives in a ``ContextVar``: every asyncio task created inside the
scope copies the binding, and sibling requests running on the same event
loop each see only their own value.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from typing import TypeVar

T = TypeVar("T")

_current_credential: ContextVar[str | None] = ContextVar(
    "europarcel_api_key", default=None
)


def get_current_credential() -> str | None:
    """Return the credential bound to the current request.

    Returns:
        The caller's API key, or None when no request scope is active.
        None means "not authenticated" and must never be replaced by a
        fallback value.
    """
    return _current_credential.get()


def set_current_credential(credential: str) -> Token[str | None]:
    """Bind a credential in the current context and return the reset token."""
    if not credential:
        raise ValueError("credential must be a non-empty string")
    return _current_credential.set(credential)


def reset_current_credential(token: Token[str | None]) -> None:
    """Restore the binding that was visible before ``set_current_credential``."""
    _current_credential.reset(token)


@contextmanager
def credential_scope(credential: str) -> Iterator[str]:
    """Bind ``credential`` for the body of a ``with`` block.

    The previous binding (usually none) is restored on exit, whether the
    body returns normally or raises.

    Example:
        with credential_scope(api_key):
            await transport.handle_request(scope, receive, send)
    """
    token = set_current_credential(credential)
    try:
        yield credential
    finally:
        reset_current_credential(token)


async def run_with_credential(credential: str, work: Callable[[], Awaitable[T]]) -> T:
    """Await ``work()`` with ``credential`` bound for its whole dynamic extent.

    Args:
        credential: Caller's API key.
        work: Zero-argument coroutine factory. It is called inside the scope
            so every task it spawns inherits the binding.

    Returns:
        Whatever ``work()`` returns.
    """
    with credential_scope(credential):
        return await work()
