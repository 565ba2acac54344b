"""
Rate limiting package for the platform service.

Holds the in-memory fixed-window limiter and the middleware helper that
keys it by client address.
"""

from .fixed_window import FixedWindowRateLimiter, RateLimitMiddleware

__all__ = ["FixedWindowRateLimiter", "RateLimitMiddleware"]
