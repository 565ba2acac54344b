"""
Unit tests for the synthetic data factory.
"""

import random
from datetime import datetime, timezone

import pytest

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from service_platform.app.domain.mock_data import EVENT_TYPES, MockDataFactory


FIXED_NOW = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


class TestMockDataFactory:
    """Test cases for MockDataFactory."""

    @pytest.fixture
    def factory(self):
        return MockDataFactory(random.Random(1234), clock=lambda: FIXED_NOW)

    def test_same_seed_same_output(self):
        first = MockDataFactory(random.Random(5), clock=lambda: FIXED_NOW)
        second = MockDataFactory(random.Random(5), clock=lambda: FIXED_NOW)

        assert first.leaderboard(1, 10) == second.leaderboard(1, 10)

    def test_player(self, factory):
        player = factory.player(42)

        assert player["userId"] == 42
        assert player["username"] == "Player42"
        assert player["description"] == "A Roblox player"
        assert 0 <= player["friendsCount"] < 1000
        assert player["avatarThumbnail"].endswith("userId=42&width=150&height=150")

    def test_game_stats(self, factory):
        stats = factory.game_stats(7)

        assert stats["name"] == "Game 7"
        assert stats["maxPlayers"] == 50
        assert 0 <= stats["visits"] < 1_000_000
        assert 0 <= stats["playing"] < 10_000
        assert 0 <= stats["favoritedCount"] < 25_000
        assert stats["rootPlaceId"] == 7
        assert stats["updated"] == "2024-03-01T12:00:00.000Z"

    def test_group(self, factory):
        group = factory.group(9)

        assert group["id"] == 9
        assert group["owner"]["username"] == "GroupOwner"
        assert group["shout"] is None
        assert group["publicEntryAllowed"] is True

    def test_avatar_uses_size_dimensions(self, factory):
        avatar = factory.avatar(3, "420x420")

        assert avatar["state"] == "Completed"
        assert avatar["size"] == "420x420"
        assert avatar["imageUrl"].endswith("userId=3&width=420&height=420")

    def test_asset(self, factory):
        asset = factory.asset(11)

        assert asset["assetType"] == {"id": 1, "name": "T-Shirt"}
        assert isinstance(asset["isLimited"], bool)
        assert 0 <= asset["price"] < 1000

    def test_limited_item(self, factory):
        item = factory.limited_item(11)

        assert len(item["recentSales"]) == 10
        assert [sale["serialNumber"] for sale in item["recentSales"]] == list(range(1, 11))
        assert all(sale["price"] >= 100 for sale in item["recentSales"])
        assert item["priceDataPoints"] == [
            {"value": sale["price"], "date": sale["dateTime"]} for sale in item["recentSales"]
        ]
        assert len(item["volumeDataPoints"]) == 30
        assert item["volumeDataPoints"][0]["date"] == "2024-03-01T12:00:00.000Z"
        assert item["volumeDataPoints"][1]["date"] == "2024-02-29T12:00:00.000Z"
        assert 500 <= item["recentAveragePrice"] < 5500

    def test_mutual_friends(self, factory):
        mutual = factory.mutual_friends(1, 2)

        assert mutual["userId"] == 1
        assert mutual["otherUserId"] == 2
        assert 0 <= mutual["mutualFriendsCount"] < 20
        assert mutual["mutualFriendsCount"] == len(mutual["mutualFriends"])

    def test_leaderboard(self, factory):
        board = factory.leaderboard(5, 25)

        assert board["totalEntries"] == 25
        assert [entry["rank"] for entry in board["leaderboard"]] == list(range(1, 26))
        assert board["leaderboard"][0]["score"] >= 25 * 1000
        assert board["leaderboard"][-1]["player"]["username"] == "Player25"

    def test_events(self, factory):
        events = factory.events(4)

        assert events["count"] == 4
        for event in events["events"]:
            assert event["eventType"] in EVENT_TYPES
            assert event["startDate"] >= "2024-03-01T12:00:00.000Z"
            assert event["badge"]["imageUrl"].startswith("https://www.roblox.com/badge-thumbnail/image?badgeId=")
