"""Secret redaction helpers for safe logging.

API keys travel with every request but must never reach the logs in full.
Log lines identify callers by a masked prefix/suffix or by a short
fingerprint, and header/parameter dicts are redacted before being logged.
"""

import hashlib
import re

# Substring patterns matched case-insensitively against dict keys
_DEFAULT_SENSITIVE_PATTERNS = frozenset({
    "secret", "token", "authorization", "api_key", "api-key", "apikey",
    "password", "credential",
})

_REDACTED = "***REDACTED***"

_BEARER_PATTERN = re.compile(r"(?i)Bearer\s+\S+")


def mask_credential(credential: str | None, visible: int = 4) -> str:
    """Return a display form of a credential that keeps only its edges.

    Args:
        credential: API key to mask.
        visible: Characters kept at each end.

    Returns:
        e.g. 'ab12...yz89'. Short keys are fully masked; None/empty yields
        '<none>'.
    """
    if not credential:
        return "<none>"
    if len(credential) <= visible * 2:
        return "*" * len(credential)
    return f"{credential[:visible]}...{credential[-visible:]}"


def credential_fingerprint(credential: str, length: int = 16) -> str:
    """Stable, non-reversible identifier for a credential.

    Used as the rate-limit bucket key and in log correlation so the raw
    key is not held as a dict key or written anywhere.
    """
    return hashlib.sha256(credential.encode("utf-8")).hexdigest()[:length]


def _is_sensitive_key(key: str, sensitive_patterns: frozenset[str]) -> bool:
    key_lower = key.lower()
    return any(pattern in key_lower for pattern in sensitive_patterns)


def redact_for_logging(
    obj: dict,
    sensitive_patterns: frozenset[str] = _DEFAULT_SENSITIVE_PATTERNS,
) -> dict:
    """Redact sensitive values from a dict for safe logging.

    Args:
        obj: Dict to redact (not mutated, a copy is returned).
        sensitive_patterns: Substring patterns whose matching keys' values
            should be replaced. Matching is case-insensitive.

    Returns:
        New dict with sensitive values replaced by '***REDACTED***'.
        Nested dicts and lists of dicts are handled recursively.
    """
    result = {}
    for key, value in obj.items():
        if _is_sensitive_key(str(key), sensitive_patterns):
            result[key] = _REDACTED
        elif isinstance(value, dict):
            result[key] = redact_for_logging(value, sensitive_patterns)
        elif isinstance(value, list):
            result[key] = [
                redact_for_logging(item, sensitive_patterns) if isinstance(item, dict) else item
                for item in value
            ]
        else:
            result[key] = value
    return result


def sanitize_error_message(msg: str, max_length: int = 500) -> str:
    """Strip bearer tokens from an upstream message and truncate it."""
    sanitized = _BEARER_PATTERN.sub("Bearer " + _REDACTED, msg)
    if len(sanitized) > max_length:
        sanitized = sanitized[:max_length - 3] + "..."
    return sanitized
