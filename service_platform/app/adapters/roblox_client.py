"""
Roblox public web API client.
"""

from typing import Any, Dict
from urllib.parse import urlencode

from shared.logging import get_logger
from ..caching import CachedFetchGateway


USERS_API = "https://users.roblox.com/v1"
FRIENDS_API = "https://friends.roblox.com/v1"
THUMBNAILS_API = "https://thumbnails.roblox.com/v1"
GAMES_API = "https://games.roblox.com/v1"
GROUPS_API = "https://groups.roblox.com/v1"

DEFAULT_AVATAR_SIZE = "150x150"


class RobloxClient:
    """Builds upstream URLs and cache keys and fetches them through the gateway.

    Gateway errors propagate unchanged; fallback policy belongs to the routes.
    """

    def __init__(self, gateway: CachedFetchGateway):
        self.gateway = gateway
        self.logger = get_logger("platform.roblox_client")

    async def get_user(self, user_id: int) -> Dict[str, Any]:
        """Fetch a user profile."""
        return await self.gateway.fetch(f"{USERS_API}/users/{user_id}", cache_key=f"player_{user_id}")

    async def get_friends_count(self, user_id: int) -> Dict[str, Any]:
        """Fetch a user's friend count. Always fresh."""
        return await self.gateway.fetch(f"{FRIENDS_API}/users/{user_id}/friends/count")

    async def get_avatar_headshot(
        self,
        user_id: int,
        size: str = DEFAULT_AVATAR_SIZE,
        *,
        cached: bool = True,
    ) -> Dict[str, Any]:
        """Fetch the avatar headshot thumbnail batch response for one user."""
        query = urlencode({"userIds": user_id, "size": size, "format": "Png"})
        url = f"{THUMBNAILS_API}/users/avatar-headshot?{query}"
        cache_key = f"avatar_{user_id}_{size}" if cached else None
        return await self.gateway.fetch(url, cache_key=cache_key)

    async def get_game(self, universe_id: int) -> Dict[str, Any]:
        """Fetch the games batch response for one universe."""
        query = urlencode({"universeIds": universe_id})
        return await self.gateway.fetch(f"{GAMES_API}/games?{query}", cache_key=f"game_stats_{universe_id}")

    async def get_group(self, group_id: int) -> Dict[str, Any]:
        """Fetch group information."""
        return await self.gateway.fetch(f"{GROUPS_API}/groups/{group_id}", cache_key=f"group_{group_id}")


def headshot_fallback_url(user_id: int, width: int = 150, height: int = 150, *, sized: bool = True) -> str:
    """Legacy headshot URL that resolves without the thumbnails API."""
    url = f"https://www.roblox.com/headshot-thumbnail/image?userId={user_id}"
    if sized:
        url = f"{url}&width={width}&height={height}"
    return url
