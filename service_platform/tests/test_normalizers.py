"""
Unit tests for upstream payload normalizers.
"""

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from service_platform.app.domain import normalizers
from shared.errors import UpstreamError


USER_INFO = {
    "id": 1,
    "name": "builder_one",
    "displayName": "Builder",
    "description": "I build things",
    "created": "2015-06-01T12:00:00.000Z",
    "isBanned": False,
    "hasVerifiedBadge": True,
}


class TestPlayerProfile:
    """Test cases for player_profile."""

    def test_full_profile(self):
        profile = normalizers.player_profile(
            1,
            USER_INFO,
            {"count": 12},
            {"data": [{"targetId": 1, "state": "Completed", "imageUrl": "https://tr.rbxcdn.com/a.png"}]},
        )

        assert profile == {
            "userId": 1,
            "username": "Builder",
            "displayName": "Builder",
            "description": "I build things",
            "created": "2015-06-01T12:00:00.000Z",
            "isBanned": False,
            "friendsCount": 12,
            "avatarThumbnail": "https://tr.rbxcdn.com/a.png",
            "hasVerifiedBadge": True,
        }

    def test_username_falls_back_to_name(self):
        profile = normalizers.player_profile(1, {"name": "builder_one"}, {"count": 1}, None)

        assert profile["username"] == "builder_one"
        assert profile["displayName"] is None
        assert profile["description"] == ""
        assert profile["isBanned"] is False
        assert profile["hasVerifiedBadge"] is False

    def test_failed_side_lookups_fall_back_independently(self):
        profile = normalizers.player_profile(
            7,
            USER_INFO,
            UpstreamError(500),
            UpstreamError(503),
        )

        assert profile["friendsCount"] == 0
        assert profile["avatarThumbnail"] == "https://www.roblox.com/headshot-thumbnail/image?userId=7"

    def test_empty_thumbnail_batch_uses_fallback_url(self):
        profile = normalizers.player_profile(7, USER_INFO, {"count": 3}, {"data": []})

        assert profile["friendsCount"] == 3
        assert profile["avatarThumbnail"].endswith("userId=7")


class TestGameStats:
    """Test cases for game_stats."""

    def test_reshapes_first_game(self):
        payload = {
            "data": [{
                "id": 99,
                "rootPlaceId": 1818,
                "name": "Obby",
                "description": "Jump",
                "creator": {"id": 5, "name": "Studio", "type": "Group", "isRNVAccount": False},
                "created": "2019-01-01T00:00:00Z",
                "updated": "2024-01-01T00:00:00Z",
                "maxPlayers": 30,
                "playing": 120,
                "visits": 50000,
                "favoritedCount": 800,
                "genre": "All",
            }]
        }

        stats = normalizers.game_stats(99, payload)

        assert stats["gameId"] == 99
        assert stats["creator"] == {"id": 5, "name": "Studio", "type": "Group"}
        assert stats["rootPlaceId"] == 1818
        assert stats["favoritedCount"] == 800
        assert "genre" not in stats

    def test_unknown_game_returns_none(self):
        assert normalizers.game_stats(1, {"data": []}) is None
        assert normalizers.game_stats(1, {}) is None
        assert normalizers.game_stats(1, ["unexpected"]) is None


class TestGroupInfo:
    """Test cases for group_info."""

    def test_reshape(self):
        payload = {
            "id": 9,
            "name": "Builders",
            "description": "We build",
            "owner": {"userId": 1, "username": "boss", "displayName": "Boss"},
            "shout": None,
            "memberCount": 1500,
            "isBuildersClubOnly": False,
            "publicEntryAllowed": True,
        }

        group = normalizers.group_info(payload)

        assert group["id"] == 9
        assert group["owner"]["username"] == "boss"
        assert group["memberCount"] == 1500
        assert group["hasVerifiedBadge"] is False


class TestAvatarThumbnail:
    """Test cases for avatar_thumbnail."""

    def test_reshape(self):
        payload = {"data": [{"targetId": 3, "state": "Pending", "imageUrl": ""}]}

        assert normalizers.avatar_thumbnail(3, "60x60", payload) == {
            "userId": 3,
            "imageUrl": "",
            "state": "Pending",
            "size": "60x60",
        }

    def test_empty_batch_returns_none(self):
        assert normalizers.avatar_thumbnail(3, "60x60", {"data": []}) is None
