"""Error code registry with E-XXXX format codes.

Categories:
- E-3xxx: Europarcel API (upstream) errors
- E-4xxx: System/internal errors
- E-5xxx: Authentication errors
- E-6xxx: Rate limiting errors

Each error includes a code, title, message template, the HTTP status the
transport answers with (when the error is raised before dispatch) and
remediation steps.
"""

from dataclasses import dataclass
from enum import Enum


class ErrorCategory(str, Enum):
    """Categories for error codes."""

    UPSTREAM = "upstream"  # E-3xxx: Europarcel API errors
    SYSTEM = "system"  # E-4xxx: System/internal errors
    AUTH = "auth"  # E-5xxx: Authentication errors
    RATE_LIMIT = "rate_limit"  # E-6xxx: Rate limiting errors


@dataclass
class ErrorCode:
    """Definition of an error code with metadata.

    Attributes:
        code: Error code in E-XXXX format.
        category: Error category for grouping.
        title: Short title, used as the ``error`` field of HTTP bodies.
        message_template: Message with {placeholders} for context.
        remediation: Action the caller should take to resolve.
        http_status: Status code when surfaced by the HTTP transport.
        is_retryable: Whether the operation can be retried without changes.
    """

    code: str
    category: ErrorCategory
    title: str
    message_template: str
    remediation: str
    http_status: int = 500
    is_retryable: bool = False


ERROR_REGISTRY: dict[str, ErrorCode] = {
    # Upstream errors (E-3xxx)
    "E-3001": ErrorCode(
        code="E-3001",
        category=ErrorCategory.UPSTREAM,
        title="Europarcel API Error",
        message_template="Europarcel API returned {status_code}: {reason}",
        remediation="Check the request parameters and the API key permissions.",
        http_status=502,
    ),
    "E-3002": ErrorCode(
        code="E-3002",
        category=ErrorCategory.UPSTREAM,
        title="Europarcel API Timeout",
        message_template="Request to Europarcel API timed out after {timeout}s",
        remediation="Retry later.",
        http_status=504,
        is_retryable=True,
    ),
    "E-3003": ErrorCode(
        code="E-3003",
        category=ErrorCategory.UPSTREAM,
        title="Europarcel API Unreachable",
        message_template="Could not reach Europarcel API: {reason}",
        remediation="Check network connectivity and EUROPARCEL_API_BASE_URL.",
        http_status=502,
        is_retryable=True,
    ),
    "E-3004": ErrorCode(
        code="E-3004",
        category=ErrorCategory.UPSTREAM,
        title="Malformed Europarcel Response",
        message_template="Europarcel API returned an unexpected response: {reason}",
        remediation="Retry later. Contact support if the problem persists.",
        http_status=502,
    ),
    # System errors (E-4xxx)
    "E-4001": ErrorCode(
        code="E-4001",
        category=ErrorCategory.SYSTEM,
        title="Internal server error",
        message_template="An unexpected error occurred while handling the request.",
        remediation="Retry later. Contact support if the problem persists.",
        http_status=500,
    ),
    # Auth errors (E-5xxx)
    "E-5001": ErrorCode(
        code="E-5001",
        category=ErrorCategory.AUTH,
        title="Unauthorized",
        message_template="X-API-KEY header is required",
        remediation="Send your Europarcel API key in the X-API-KEY header.",
        http_status=401,
    ),
    # Rate limit errors (E-6xxx)
    "E-6001": ErrorCode(
        code="E-6001",
        category=ErrorCategory.RATE_LIMIT,
        title="Too many requests",
        message_template="Rate limit of {limit} requests per {window_seconds}s exceeded. Retry in {retry_after}s.",
        remediation="Back off until the RateLimit-Reset header elapses.",
        http_status=429,
        is_retryable=True,
    ),
}


def get_error(code: str) -> ErrorCode | None:
    """Get error definition by code.

    Args:
        code: Error code in E-XXXX format.

    Returns:
        ErrorCode if found, None otherwise.
    """
    return ERROR_REGISTRY.get(code)


def get_errors_by_category(category: ErrorCategory) -> list[ErrorCode]:
    """Get all errors in a category."""
    return [e for e in ERROR_REGISTRY.values() if e.category == category]
