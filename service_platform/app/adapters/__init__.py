"""
Adapters package for the platform service.

Contains HTTP client wrappers for the third-party platform APIs. Adapters
know URLs and cache keys; the caching gateway owns transport, timeout and
error mapping.
"""

from .roblox_client import RobloxClient, headshot_fallback_url

__all__ = [
    "RobloxClient",
    "headshot_fallback_url",
]
