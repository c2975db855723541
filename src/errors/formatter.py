"""Application error type and structured error bodies.

``AppError`` is raised for failures the HTTP transport reports itself
(missing API key, rate limit, internal faults). ``to_response_body``
renders the JSON body sent to the caller.
"""

from dataclasses import dataclass, field

from src.errors.registry import get_error


@dataclass
class AppError(Exception):
    """Application error with code, message, and context.

    Attributes:
        code: Error code in E-XXXX format.
        title: Short title (the ``error`` field of the HTTP body).
        message: Human-readable error message.
        remediation: Action the caller should take to resolve.
        http_status: Status code used by the HTTP transport.
        is_retryable: Whether the operation can be retried without changes.
        details: Extra fields merged into the HTTP body.
    """

    code: str
    title: str
    message: str
    remediation: str = ""
    http_status: int = 500
    is_retryable: bool = False
    details: dict = field(default_factory=dict)

    def __str__(self) -> str:
        """Return string representation of the error."""
        return f"{self.code}: {self.message}"

    @classmethod
    def from_code(cls, code: str, **kwargs: object) -> "AppError":
        """Create error from registry code with context substitution.

        Args:
            code: Error code in E-XXXX format.
            **kwargs: Context values for message template substitution.
                The special key 'details' is stored on the error instead.

        Returns:
            AppError instance with formatted message.
        """
        details = kwargs.pop("details", {})
        if not isinstance(details, dict):
            details = {}

        error_def = get_error(code)
        if not error_def:
            return cls(
                code=code,
                title="Unknown error",
                message=f"Unknown error: {code}",
                remediation="Contact support.",
                details=details,
            )

        message = error_def.message_template
        try:
            message = message.format(**kwargs)
        except KeyError:
            # Keep template if some placeholders are missing
            pass

        return cls(
            code=error_def.code,
            title=error_def.title,
            message=message,
            remediation=error_def.remediation,
            http_status=error_def.http_status,
            is_retryable=error_def.is_retryable,
            details=details,
        )

    def to_response_body(self) -> dict:
        """JSON body for the HTTP transport: ``{error, message, code, ...}``."""
        body = {"error": self.title, "message": self.message, "code": self.code}
        body.update(self.details)
        return body


def format_error(error: AppError, include_remediation: bool = True) -> str:
    """Format error for display in logs or tool output.

    Args:
        error: The AppError to format.
        include_remediation: Whether to include remediation steps.

    Returns:
        Multi-line formatted string.
    """
    lines = [f"{error.code}: {error.message}"]
    if include_remediation and error.remediation:
        lines.append(f"  Action: {error.remediation}")
    return "\n".join(lines)
