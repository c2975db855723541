"""Per-credential fixed-window rate limiting for tool invocations.

Only tool-invoking POSTs are counted; the informational GET / redirect and
/health are exempt. Buckets are keyed by the caller's credential
fingerprint, falling back to the client IP, then to a shared "unknown"
bucket.

The window map is guarded by a lock so the limiter stays correct if
requests are ever served from several threads.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from starlette.requests import Request

from src.utils.redaction import credential_fingerprint

logger = logging.getLogger(__name__)

UNKNOWN_KEY = "unknown"

# Expired windows are swept at most this often
_EVICTION_INTERVAL_SECONDS = 60.0


@dataclass
class RateWindow:
    """Request count of one key in its current window."""

    count: int
    window_start: float


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of counting one request against its key's window."""

    allowed: bool
    limit: int
    remaining: int
    reset_after: float
    window_seconds: float

    @property
    def retry_after(self) -> int:
        """Whole seconds until the window resets (at least 1)."""
        return max(1, math.ceil(self.reset_after))

    def headers(self) -> dict[str, str]:
        """Standard RateLimit-* response headers (plus Retry-After on breach)."""
        headers = {
            "RateLimit-Limit": str(self.limit),
            "RateLimit-Remaining": str(self.remaining),
            "RateLimit-Reset": str(self.retry_after),
        }
        if not self.allowed:
            headers["Retry-After"] = str(self.retry_after)
        return headers


class RateLimiter:
    """Fixed-window request counter per key.

    Args:
        max_requests: Requests allowed per key in one window.
        window_seconds: Window length.
        clock: Monotonic time source (injected by tests).
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: dict[str, RateWindow] = {}
        self._lock = threading.Lock()
        self._last_eviction = clock()

    def hit(self, key: str) -> RateLimitDecision:
        """Count one request for ``key`` and decide whether it may proceed.

        Thread-safe via _lock.
        """
        with self._lock:
            now = self._clock()
            self._evict_expired(now)

            window = self._windows.get(key)
            if window is None or now - window.window_start >= self.window_seconds:
                window = RateWindow(count=0, window_start=now)
                self._windows[key] = window

            window.count += 1
            allowed = window.count <= self.max_requests
            return RateLimitDecision(
                allowed=allowed,
                limit=self.max_requests,
                remaining=max(0, self.max_requests - window.count),
                reset_after=window.window_start + self.window_seconds - now,
                window_seconds=self.window_seconds,
            )

    def usage(self, key: str) -> int:
        """Requests counted for ``key`` in its live window (0 if none).

        Read-only inspection hook for operators and tests; it never counts a
        request or creates a window.
        """
        with self._lock:
            window = self._windows.get(key)
            if window is None or self._clock() - window.window_start >= self.window_seconds:
                return 0
            return window.count

    def reset(self) -> None:
        """Forget all windows. Used by tests."""
        with self._lock:
            self._windows.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._windows)

    def _evict_expired(self, now: float) -> None:
        # Caller holds _lock
        if now - self._last_eviction < _EVICTION_INTERVAL_SECONDS:
            return
        self._last_eviction = now
        expired = [
            key
            for key, window in self._windows.items()
            if now - window.window_start >= self.window_seconds
        ]
        for key in expired:
            del self._windows[key]
        if expired:
            logger.debug("Evicted %d idle rate-limit windows", len(expired))


def get_client_ip(request: Request, trust_proxy: bool = False) -> str | None:
    """Extract the client IP from a request.

    X-Forwarded-For is only honored when ``trust_proxy`` is set, so callers
    cannot spoof their bucket when the server is not behind a proxy.
    """
    if trust_proxy:
        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            first = forwarded.split(",")[0].strip()
            if first:
                return first
    return request.client.host if request.client else None


def rate_limit_key(credential: str | None, client_ip: str | None) -> str:
    """Derive the bucket key for a request. Never returns an empty string."""
    if credential:
        return f"key:{credential_fingerprint(credential)}"
    if client_ip:
        return f"ip:{client_ip}"
    return UNKNOWN_KEY
