"""
Synthetic payloads for fallback responses and upstream-less endpoints.

Every generator returns the same shape as the live response it stands in
for. Randomness comes from an injectable ``random.Random`` and time from an
injectable clock, so tests can pin both.
"""

import random
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional

from shared.errors import utc_timestamp
from ..adapters.roblox_client import headshot_fallback_url


EPOCH_PLACEHOLDER = "2021-01-01T00:00:00.000Z"
EVENT_TYPES = ("Featured", "Social", "Building", "Sponsored")
DAY = timedelta(days=1)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class MockDataFactory:
    """Generator for plausible placeholder platform data."""

    def __init__(self, rng: Optional[random.Random] = None, clock: Callable[[], datetime] = _utc_now):
        self.rng = rng or random.Random()
        self.clock = clock

    def _rand(self, upper: int) -> int:
        """Uniform integer in ``[0, upper)``."""
        return self.rng.randrange(upper)

    def _now(self) -> str:
        return utc_timestamp(self.clock())

    def player(self, user_id: int) -> Dict[str, Any]:
        return {
            "userId": user_id,
            "username": f"Player{user_id}",
            "displayName": f"Player{user_id}",
            "description": "A Roblox player",
            "created": "2020-01-01T00:00:00.000Z",
            "isBanned": False,
            "friendsCount": self._rand(1000),
            "avatarThumbnail": headshot_fallback_url(user_id),
            "hasVerifiedBadge": False,
        }

    def game_stats(self, game_id: int) -> Dict[str, Any]:
        return {
            "gameId": game_id,
            "name": f"Game {game_id}",
            "description": "An awesome Roblox game!",
            "creator": {"id": 1, "name": "GameDeveloper", "type": "User"},
            "rootPlaceId": game_id,
            "created": EPOCH_PLACEHOLDER,
            "updated": self._now(),
            "maxPlayers": 50,
            "playing": self._rand(10_000),
            "visits": self._rand(1_000_000),
            "favoritedCount": self._rand(25_000),
        }

    def group(self, group_id: int) -> Dict[str, Any]:
        return {
            "id": group_id,
            "name": f"Group {group_id}",
            "description": "A cool Roblox group!",
            "owner": {"userId": 1, "username": "GroupOwner", "displayName": "Group Owner"},
            "shout": None,
            "memberCount": self._rand(10_000),
            "isBuildersClubOnly": False,
            "publicEntryAllowed": True,
            "hasVerifiedBadge": False,
        }

    def avatar(self, user_id: int, size: str) -> Dict[str, Any]:
        width, _, height = size.partition("x")
        return {
            "userId": user_id,
            "imageUrl": headshot_fallback_url(user_id, int(width), int(height or width)),
            "state": "Completed",
            "size": size,
        }

    def asset(self, asset_id: int) -> Dict[str, Any]:
        return {
            "assetId": asset_id,
            "name": f"Asset {asset_id}",
            "description": "A Roblox asset",
            "assetType": {"id": 1, "name": "T-Shirt"},
            "creator": {"id": 1, "name": "Creator", "type": "User"},
            "price": self._rand(1000),
            "isLimited": self.rng.random() > 0.8,
            "isLimitedUnique": self.rng.random() > 0.95,
            "remaining": self._rand(100),
            "sales": self._rand(10_000),
            "created": EPOCH_PLACEHOLDER,
            "updated": self._now(),
        }

    def limited_item(self, asset_id: int) -> Dict[str, Any]:
        now = self.clock()
        sales = [
            {
                "userAssetId": self._rand(1_000_000),
                "seller": {"id": self._rand(100_000), "name": f"Seller{i + 1}"},
                "price": self._rand(10_000) + 100,
                "serialNumber": i + 1,
                "dateTime": utc_timestamp(now - self.rng.random() * 30 * DAY),
            }
            for i in range(10)
        ]
        return {
            "assetId": asset_id,
            "name": f"Limited Item {asset_id}",
            "recentAveragePrice": self._rand(5000) + 500,
            "originalPrice": self._rand(1000) + 100,
            "priceDataPoints": [{"value": sale["price"], "date": sale["dateTime"]} for sale in sales],
            "volumeDataPoints": [
                {"value": self._rand(50), "date": utc_timestamp(now - i * DAY)}
                for i in range(30)
            ],
            "recentSales": sales,
        }

    def mutual_friends(self, user_id: int, other_user_id: int) -> Dict[str, Any]:
        friends: List[Dict[str, Any]] = [
            {
                "id": self._rand(1_000_000),
                "username": f"MutualFriend{i + 1}",
                "displayName": f"Mutual Friend {i + 1}",
                "avatarThumbnail": headshot_fallback_url(self._rand(1_000_000)),
            }
            for i in range(self._rand(20))
        ]
        return {
            "userId": user_id,
            "otherUserId": other_user_id,
            "mutualFriendsCount": len(friends),
            "mutualFriends": friends,
        }

    def leaderboard(self, game_id: int, limit: int) -> Dict[str, Any]:
        entries = [
            {
                "rank": i + 1,
                "player": {
                    "id": self._rand(1_000_000),
                    "username": f"Player{i + 1}",
                    "displayName": f"Top Player {i + 1}",
                },
                # Rank bonus keeps higher ranks ahead on average
                "score": self._rand(1_000_000) + (limit - i) * 1000,
                "avatarThumbnail": headshot_fallback_url(self._rand(1_000_000)),
            }
            for i in range(limit)
        ]
        return {
            "gameId": game_id,
            "leaderboard": entries,
            "totalEntries": limit,
            "lastUpdated": self._now(),
        }

    def events(self, limit: int) -> Dict[str, Any]:
        now = self.clock()
        events = [
            {
                "id": i + 1,
                "name": f"Event {i + 1}",
                "description": f"Description for Event {i + 1}",
                "startDate": utc_timestamp(now + self.rng.random() * 30 * DAY),
                "endDate": utc_timestamp(now + self.rng.random() * 60 * DAY),
                "eventType": self.rng.choice(EVENT_TYPES),
                "badge": {
                    "id": self._rand(1_000_000),
                    "name": f"Event Badge {i + 1}",
                    "imageUrl": f"https://www.roblox.com/badge-thumbnail/image?badgeId={self._rand(1_000_000)}",
                },
            }
            for i in range(limit)
        ]
        return {
            "events": events,
            "count": len(events),
            "lastUpdated": self._now(),
        }
