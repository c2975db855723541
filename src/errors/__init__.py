"""Error handling framework for the Europarcel MCP server.

This package provides:
- Error code registry with E-XXXX format codes
- AppError and the structured bodies returned by the HTTP transport

Error categories:
- E-3xxx: Europarcel API errors
- E-4xxx: System/internal errors
- E-5xxx: Authentication errors
- E-6xxx: Rate limiting errors
"""

from src.errors.formatter import AppError, format_error
from src.errors.registry import (
    ERROR_REGISTRY,
    ErrorCategory,
    ErrorCode,
    get_error,
    get_errors_by_category,
)

__all__ = [
    # Registry
    "ErrorCode",
    "ErrorCategory",
    "ERROR_REGISTRY",
    "get_error",
    "get_errors_by_category",
    # Formatter
    "AppError",
    "format_error",
]
