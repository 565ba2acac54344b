"""
Game platform API service.

Normalizes Roblox players, games, groups and avatars into the shared JSON
envelope, with synthetic data for endpoints the public APIs do not cover.
"""

import asyncio
from typing import Any, Dict, Literal, Optional

from fastapi import Depends, Path, Query, Request
from fastapi.responses import JSONResponse

from shared.base_service import BaseService
from shared.config import ServiceConfig, get_config
from shared.errors import MalformedResponse, RateLimitError, UpstreamFetchError
from .adapters import RobloxClient
from .caching import CachedFetchGateway, DEFAULT_TTL_SECONDS, TTLCache
from .domain import normalizers
from .domain.auth_middleware import ApiKeyAuthenticator
from .domain.mock_data import MockDataFactory
from .ratelimit import FixedWindowRateLimiter, RateLimitMiddleware


# Platform ids are 64-bit
NUMERIC_ID = r"^[0-9]{1,19}$"

AvatarSize = Literal[
    "30x30", "48x48", "60x60", "75x75", "100x100", "110x110",
    "150x150", "180x180", "352x352", "420x420", "720x720",
]

DATA_SOURCE_HEADER = "X-Data-Source"


class PlatformService(BaseService):
    """Game platform API service implementation."""

    validation_messages = {
        "user_id": "User ID must be numeric",
        "other_user_id": "Other User ID must be numeric",
        "game_id": "Game ID must be numeric",
        "group_id": "Group ID must be numeric",
        "asset_id": "Asset ID must be numeric",
    }

    def __init__(
        self,
        config: Optional[ServiceConfig] = None,
        *,
        gateway: Optional[CachedFetchGateway] = None,
        mock_data: Optional[MockDataFactory] = None,
        rate_limiter: Optional[FixedWindowRateLimiter] = None,
    ):
        config = config or get_config("platform")
        self.rate_limiter = rate_limiter or FixedWindowRateLimiter(
            max_requests=config.rate_limit_max_requests,
            window_seconds=config.rate_limit_window_ms / 1000,
        )
        self.rate_limit_middleware = RateLimitMiddleware(self.rate_limiter, trust_proxy=config.trust_proxy)

        super().__init__("platform", config)

        self.gateway = gateway or CachedFetchGateway(
            TTLCache(DEFAULT_TTL_SECONDS, max_entries=self.config.cache_max_entries),
            metrics=self.metrics,
        )
        if self.gateway.metrics is None:
            self.gateway.metrics = self.metrics
        self.roblox = RobloxClient(self.gateway)
        self.mock_data = mock_data or MockDataFactory()
        self.authenticator = ApiKeyAuthenticator(self.config.api_key)

        @self.app.on_event("startup")
        async def _startup():
            self.logger.info(
                "Platform service starting",
                port=self.config.port,
                api_key_auth="enabled" if self.authenticator.enabled else "disabled",
                rate_limit_max_requests=self.config.rate_limit_max_requests,
                rate_limit_window_seconds=self.config.rate_limit_window_ms / 1000,
            )

        self._setup_platform_routes()
        self._setup_synthetic_routes()

        # Expose service instance via app state for introspection/testing
        self.app.state.platform_service = self

    def _setup_service_middleware(self):
        """Rate limit every request, including unknown routes."""

        @self.app.middleware("http")
        async def enforce_rate_limit(request: Request, call_next):
            rate_result = self.rate_limit_middleware.check_request(request)
            if rate_result["allowed"]:
                response = await call_next(request)
            else:
                self.metrics.increment_counter("rate_limit_hits_total")
                error = RateLimitError()
                response = JSONResponse(
                    status_code=error.status_code,
                    content={"error": error.message, "code": error.code},
                )
            RateLimitMiddleware.set_headers(response, rate_result)
            return response

    def available_endpoints(self):
        return [
            "GET /health",
            "GET /metrics",
            "GET /player/:userId",
            "GET /game/:gameId/stats",
            "GET /group/:groupId",
            "GET /avatar/:userId",
            "GET /asset/:assetId",
            "GET /limited/:assetId",
            "GET /mutual/:userId/:otherUserId",
            "GET /leaderboard/:gameId",
            "GET /events/latest",
        ]

    def _fallback(self, resource: str, data: Dict[str, Any], reason: Any) -> JSONResponse:
        """Serve synthetic data in place of an upstream failure."""
        self.logger.warning(
            "Serving fallback data",
            resource=resource,
            reason=getattr(reason, "code", None) or str(reason),
            error=str(reason),
        )
        self.metrics.increment_counter("fallback_responses_total", resource=resource)
        return self.send_response(data, headers={DATA_SOURCE_HEADER: "fallback"})

    def _upstream(self, data: Dict[str, Any]) -> JSONResponse:
        return self.send_response(data, headers={DATA_SOURCE_HEADER: "upstream"})

    def _synthetic(self, data: Dict[str, Any]) -> JSONResponse:
        return self.send_response(data, headers={DATA_SOURCE_HEADER: "synthetic"})

    def _route_error(self, exc: Exception, message: str, code: str) -> JSONResponse:
        self.logger.error(message, code=code, error=str(exc), exc_info=True)
        self.metrics.record_error(code)
        return self.send_error(500, message, code, str(exc))

    def _setup_platform_routes(self):
        """Routes backed by the upstream platform APIs."""
        authenticated = [Depends(self.authenticator.authenticate_request)]

        @self.app.get("/player/{user_id}", dependencies=authenticated)
        async def get_player(user_id: str = Path(..., pattern=NUMERIC_ID)):
            """User profile with friend count and headshot."""
            try:
                uid = int(user_id)
                try:
                    user_info = await self.roblox.get_user(uid)
                    if not isinstance(user_info, dict):
                        raise MalformedResponse(reason="expected a user object")
                except UpstreamFetchError as exc:
                    return self._fallback("player", self.mock_data.player(uid), exc)

                friends, avatar = await asyncio.gather(
                    self.roblox.get_friends_count(uid),
                    self.roblox.get_avatar_headshot(uid, cached=False),
                    return_exceptions=True,
                )
                return self._upstream(normalizers.player_profile(uid, user_info, friends, avatar))
            except Exception as exc:
                return self._route_error(exc, "Failed to fetch player data", "PLAYER_FETCH_ERROR")

        @self.app.get("/game/{game_id}/stats", dependencies=authenticated)
        async def get_game_stats(game_id: str = Path(..., pattern=NUMERIC_ID)):
            """Game statistics for a universe."""
            try:
                gid = int(game_id)
                try:
                    stats = normalizers.game_stats(gid, await self.roblox.get_game(gid))
                except UpstreamFetchError as exc:
                    return self._fallback("game_stats", self.mock_data.game_stats(gid), exc)

                if stats is None:
                    return self._fallback("game_stats", self.mock_data.game_stats(gid), "Game not found")
                return self._upstream(stats)
            except Exception as exc:
                return self._route_error(exc, "Failed to fetch game statistics", "GAME_STATS_ERROR")

        @self.app.get("/group/{group_id}", dependencies=authenticated)
        async def get_group(group_id: str = Path(..., pattern=NUMERIC_ID)):
            """Group information."""
            try:
                gid = int(group_id)
                try:
                    payload = await self.roblox.get_group(gid)
                    if not isinstance(payload, dict):
                        raise MalformedResponse(reason="expected a group object")
                except UpstreamFetchError as exc:
                    return self._fallback("group", self.mock_data.group(gid), exc)

                return self._upstream(normalizers.group_info(payload))
            except Exception as exc:
                return self._route_error(exc, "Failed to fetch group information", "GROUP_FETCH_ERROR")

        @self.app.get("/avatar/{user_id}", dependencies=authenticated)
        async def get_avatar(
            user_id: str = Path(..., pattern=NUMERIC_ID),
            size: AvatarSize = Query("150x150"),
        ):
            """Avatar headshot thumbnail."""
            try:
                uid = int(user_id)
                try:
                    thumbnail = normalizers.avatar_thumbnail(
                        uid, size, await self.roblox.get_avatar_headshot(uid, size)
                    )
                except UpstreamFetchError as exc:
                    return self._fallback("avatar", self.mock_data.avatar(uid, size), exc)

                if thumbnail is None:
                    return self._fallback("avatar", self.mock_data.avatar(uid, size), "Avatar not found")
                return self._upstream(thumbnail)
            except Exception as exc:
                return self._route_error(exc, "Failed to fetch avatar", "AVATAR_FETCH_ERROR")

    def _setup_synthetic_routes(self):
        """Routes with no public upstream; always synthetic."""
        authenticated = [Depends(self.authenticator.authenticate_request)]

        @self.app.get("/asset/{asset_id}", dependencies=authenticated)
        async def get_asset(asset_id: str = Path(..., pattern=NUMERIC_ID)):
            try:
                return self._synthetic(self.mock_data.asset(int(asset_id)))
            except Exception as exc:
                return self._route_error(exc, "Failed to fetch asset details", "ASSET_FETCH_ERROR")

        @self.app.get("/limited/{asset_id}", dependencies=authenticated)
        async def get_limited(asset_id: str = Path(..., pattern=NUMERIC_ID)):
            try:
                return self._synthetic(self.mock_data.limited_item(int(asset_id)))
            except Exception as exc:
                return self._route_error(exc, "Failed to fetch limited item data", "LIMITED_FETCH_ERROR")

        @self.app.get("/mutual/{user_id}/{other_user_id}", dependencies=authenticated)
        async def get_mutual_friends(
            user_id: str = Path(..., pattern=NUMERIC_ID),
            other_user_id: str = Path(..., pattern=NUMERIC_ID),
        ):
            try:
                return self._synthetic(self.mock_data.mutual_friends(int(user_id), int(other_user_id)))
            except Exception as exc:
                return self._route_error(exc, "Failed to fetch mutual friends", "MUTUAL_FRIENDS_ERROR")

        @self.app.get("/leaderboard/{game_id}", dependencies=authenticated)
        async def get_leaderboard(
            game_id: str = Path(..., pattern=NUMERIC_ID),
            limit: int = Query(50, ge=1, le=100),
        ):
            try:
                return self._synthetic(self.mock_data.leaderboard(int(game_id), limit))
            except Exception as exc:
                return self._route_error(exc, "Failed to fetch leaderboard", "LEADERBOARD_ERROR")

        @self.app.get("/events/latest", dependencies=authenticated)
        async def get_latest_events(limit: int = Query(10, ge=1, le=50)):
            try:
                return self._synthetic(self.mock_data.events(limit))
            except Exception as exc:
                return self._route_error(exc, "Failed to fetch events", "EVENTS_FETCH_ERROR")


def create_app(config: Optional[ServiceConfig] = None, **kwargs):
    """Create FastAPI application."""
    service = PlatformService(config, **kwargs)
    return service.app


def main():
    service = PlatformService()
    service.run()


if __name__ == "__main__":
    main()
