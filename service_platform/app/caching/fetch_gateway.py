"""
Cached fetch gateway for upstream platform calls.
"""

import asyncio
import time
from typing import Any, Optional, TYPE_CHECKING

import httpx

from shared.errors import MalformedResponse, UpstreamError, UpstreamTimeout, UpstreamUnreachable
from shared.logging import get_logger
from .ttl_cache import DEFAULT_TTL_SECONDS, TTLCache

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from shared.metrics import MetricsCollector


UPSTREAM_TIMEOUT_SECONDS = 10.0
USER_AGENT = "RobloxAPI/1.0"

_MISSING = object()


class CachedFetchGateway:
    """Serve upstream GETs from a TTL cache, going to the network on a miss.

    ``fetch`` either returns fresh or cached upstream data, or raises one of
    the ``UpstreamFetchError`` subclasses. It never substitutes placeholder
    data and never caches a failure; callers decide what to do on error.

    Concurrent misses on the same key are not collapsed: each performs its
    own request and the last one to finish wins the cache slot.
    """

    def __init__(
        self,
        cache: Optional[TTLCache] = None,
        *,
        metrics: Optional["MetricsCollector"] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = UPSTREAM_TIMEOUT_SECONDS,
    ):
        self.cache = cache if cache is not None else TTLCache(DEFAULT_TTL_SECONDS)
        self.metrics = metrics
        self.logger = get_logger("platform.fetch_gateway")
        self._transport = transport
        self.timeout = timeout

    async def fetch(self, url: str, cache_key: Optional[str] = None, ttl: float = DEFAULT_TTL_SECONDS) -> Any:
        """Return the decoded JSON body for ``url``, using ``cache_key`` when given."""
        if cache_key is not None:
            cached = self.cache.get(cache_key, _MISSING)
            if cached is not _MISSING:
                self._count("cache_lookups_total", result="hit")
                self.logger.debug("Upstream cache hit", cache_key=cache_key)
                return cached
            self._count("cache_lookups_total", result="miss")

        data = await self._request(url)

        if cache_key is not None:
            self.cache.set(cache_key, data, ttl)
        return data

    async def _request(self, url: str) -> Any:
        start = time.perf_counter()
        outcome = "error"
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                headers={"User-Agent": USER_AGENT},
                transport=self._transport,
            ) as client:
                try:
                    # Per-phase httpx timeouts do not bound a slowly streamed body
                    response = await asyncio.wait_for(client.get(url), self.timeout)
                except (httpx.TimeoutException, asyncio.TimeoutError) as exc:
                    outcome = "timeout"
                    self.logger.warning("Upstream request timed out", url=url, error=str(exc))
                    raise UpstreamTimeout(url, self.timeout) from exc
                except httpx.RequestError as exc:
                    outcome = "unreachable"
                    self.logger.warning("Upstream request failed", url=url, error=str(exc))
                    raise UpstreamUnreachable(url, str(exc)) from exc

            if not response.is_success:
                outcome = "http_error"
                self.logger.warning(
                    "Upstream returned error status",
                    url=url,
                    status_code=response.status_code,
                )
                raise UpstreamError(response.status_code, url, response.reason_phrase)

            try:
                data = response.json()
            except ValueError as exc:
                outcome = "malformed"
                self.logger.warning("Upstream body could not be decoded", url=url, error=str(exc))
                raise MalformedResponse(url, str(exc)) from exc

            outcome = "success"
            self.logger.debug("Upstream request succeeded", url=url, status_code=response.status_code)
            return data
        finally:
            self._count("upstream_requests_total", outcome=outcome)
            if self.metrics:
                self.metrics.observe_histogram(
                    "upstream_request_duration_seconds", time.perf_counter() - start
                )

    def _count(self, metric_name: str, **labels) -> None:
        if self.metrics:
            self.metrics.increment_counter(metric_name, **labels)
