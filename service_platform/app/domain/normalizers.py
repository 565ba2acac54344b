"""
Reshape upstream payloads into the response ``data`` shapes.
"""

from typing import Any, Dict, Optional, Union

from ..adapters.roblox_client import headshot_fallback_url


def _first_item(payload: Any) -> Optional[Dict[str, Any]]:
    """Return the first element of a batch response's ``data`` list."""
    if not isinstance(payload, dict):
        return None
    items = payload.get("data")
    if not isinstance(items, list) or not items:
        return None
    return items[0]


def player_profile(
    user_id: int,
    user_info: Dict[str, Any],
    friends: Union[Dict[str, Any], BaseException, None],
    avatar: Union[Dict[str, Any], BaseException, None],
) -> Dict[str, Any]:
    """Merge a user profile with its best-effort friend count and headshot.

    ``friends`` and ``avatar`` may be exceptions from a concurrent fetch; each
    falls back independently.
    """
    friends_count = 0
    if isinstance(friends, dict):
        friends_count = friends.get("count", 0)

    avatar_item = _first_item(avatar) if isinstance(avatar, dict) else None
    if avatar_item and avatar_item.get("imageUrl"):
        avatar_thumbnail = avatar_item["imageUrl"]
    else:
        avatar_thumbnail = headshot_fallback_url(user_id, sized=False)

    return {
        "userId": user_id,
        "username": user_info.get("displayName") or user_info.get("name"),
        "displayName": user_info.get("displayName"),
        "description": user_info.get("description") or "",
        "created": user_info.get("created"),
        "isBanned": user_info.get("isBanned") or False,
        "friendsCount": friends_count,
        "avatarThumbnail": avatar_thumbnail,
        "hasVerifiedBadge": user_info.get("hasVerifiedBadge") or False,
    }


def game_stats(game_id: int, payload: Any) -> Optional[Dict[str, Any]]:
    """Game statistics, or None when the universe is unknown upstream."""
    game = _first_item(payload)
    if game is None:
        return None

    creator = game.get("creator") or {}
    return {
        "gameId": game_id,
        "name": game.get("name"),
        "description": game.get("description"),
        "creator": {
            "id": creator.get("id"),
            "name": creator.get("name"),
            "type": creator.get("type"),
        },
        "rootPlaceId": game.get("rootPlaceId"),
        "created": game.get("created"),
        "updated": game.get("updated"),
        "maxPlayers": game.get("maxPlayers"),
        "playing": game.get("playing"),
        "visits": game.get("visits"),
        "favoritedCount": game.get("favoritedCount"),
    }


def group_info(payload: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": payload.get("id"),
        "name": payload.get("name"),
        "description": payload.get("description"),
        "owner": payload.get("owner"),
        "shout": payload.get("shout"),
        "memberCount": payload.get("memberCount"),
        "isBuildersClubOnly": payload.get("isBuildersClubOnly"),
        "publicEntryAllowed": payload.get("publicEntryAllowed"),
        "hasVerifiedBadge": payload.get("hasVerifiedBadge") or False,
    }


def avatar_thumbnail(user_id: int, size: str, payload: Any) -> Optional[Dict[str, Any]]:
    """Avatar thumbnail details, or None when no thumbnail came back."""
    item = _first_item(payload)
    if item is None:
        return None
    return {
        "userId": user_id,
        "imageUrl": item.get("imageUrl"),
        "state": item.get("state"),
        "size": size,
    }
