"""
Fixed-window rate limiter for the platform service.
"""

import math
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict

from fastapi import Request
from starlette.responses import Response

from shared.logging import get_logger


@dataclass
class _Window:
    count: int
    reset_at: float


class FixedWindowRateLimiter:
    """In-memory per-client request budget.

    A client's window opens on its first request and lasts ``window_seconds``;
    requests beyond ``max_requests`` inside it are rejected until it closes.
    """

    def __init__(
        self,
        max_requests: int = 100,
        window_seconds: float = 60.0,
        *,
        clock: Callable[[], float] = time.monotonic,
        sweep_threshold: int = 10000,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.sweep_threshold = sweep_threshold
        self._clock = clock
        self._windows: Dict[str, _Window] = {}
        self.logger = get_logger("platform.rate_limiter")

    def _current_window(self, client_id: str, now: float) -> _Window:
        window = self._windows.get(client_id)
        if window is None or now >= window.reset_at:
            if len(self._windows) >= self.sweep_threshold:
                self._sweep(now)
            window = _Window(count=0, reset_at=now + self.window_seconds)
            self._windows[client_id] = window
        return window

    def _sweep(self, now: float) -> None:
        stale = [key for key, window in self._windows.items() if now >= window.reset_at]
        for key in stale:
            del self._windows[key]

    def check_rate_limit(self, client_id: str) -> Dict[str, Any]:
        """Count one request for ``client_id`` and report whether it is allowed."""
        now = self._clock()
        window = self._current_window(client_id, now)
        window.count += 1
        reset_in = max(0, math.ceil(window.reset_at - now))

        if window.count > self.max_requests:
            self.logger.warning(
                "Rate limit exceeded",
                client_id=client_id,
                current_count=window.count,
                limit=self.max_requests,
            )
            return {
                "allowed": False,
                "current_count": window.count,
                "limit": self.max_requests,
                "remaining": 0,
                "reset_in_seconds": reset_in,
                "retry_after": reset_in,
            }

        return {
            "allowed": True,
            "current_count": window.count,
            "limit": self.max_requests,
            "remaining": max(0, self.max_requests - window.count),
            "reset_in_seconds": reset_in,
        }


class RateLimitMiddleware:
    """Applies a FixedWindowRateLimiter to incoming FastAPI requests."""

    def __init__(self, rate_limiter: FixedWindowRateLimiter, *, trust_proxy: bool = False):
        self.rate_limiter = rate_limiter
        self.trust_proxy = trust_proxy

    def check_request(self, request: Request) -> Dict[str, Any]:
        return self.rate_limiter.check_rate_limit(self._get_client_id(request))

    def _get_client_id(self, request: Request) -> str:
        """Extract client ID from request."""
        if self.trust_proxy:
            forwarded_for = request.headers.get('X-Forwarded-For')
            if forwarded_for:
                return forwarded_for.split(',')[0].strip()

            real_ip = request.headers.get('X-Real-IP')
            if real_ip:
                return real_ip

        return request.client.host if request.client else 'unknown'

    @staticmethod
    def set_headers(response: Response, rate_result: Dict[str, Any]) -> None:
        """Propagate rate limiting metadata via standard headers."""
        response.headers["RateLimit-Limit"] = str(rate_result["limit"])
        response.headers["RateLimit-Remaining"] = str(rate_result["remaining"])
        response.headers["RateLimit-Reset"] = str(rate_result["reset_in_seconds"])
        if not rate_result["allowed"]:
            response.headers["Retry-After"] = str(rate_result["retry_after"])
