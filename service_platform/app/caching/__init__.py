"""
Response caching package.

Holds the in-memory TTL cache and the fetch gateway that wraps every
upstream call with it. Cache keys are built by callers from the logical
resource identity, e.g. ``player_42`` or ``avatar_42_150x150``.
"""

from .fetch_gateway import CachedFetchGateway, UPSTREAM_TIMEOUT_SECONDS, USER_AGENT
from .ttl_cache import CacheEntry, DEFAULT_TTL_SECONDS, TTLCache

__all__ = [
    "CachedFetchGateway",
    "CacheEntry",
    "TTLCache",
    "DEFAULT_TTL_SECONDS",
    "UPSTREAM_TIMEOUT_SECONDS",
    "USER_AGENT",
]
