"""
In-memory TTL cache backing the fetch gateway.
"""

import copy
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from shared.logging import get_logger


DEFAULT_TTL_SECONDS = 300


@dataclass
class CacheEntry:
    key: str
    value: Any
    expires_at: float


class TTLCache:
    """Key/value table where every entry expires a fixed time after it was set.

    Expired entries are treated as absent on read and dropped lazily. When
    ``max_entries`` is reached, a ``set`` first purges expired entries and, if
    the table is still full, evicts the entry closest to expiry.

    Values are deep-copied on the way in and out, so callers never hold a
    reference into the table.
    """

    def __init__(
        self,
        default_ttl: float = DEFAULT_TTL_SECONDS,
        *,
        max_entries: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.default_ttl = default_ttl
        self.max_entries = max_entries
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._hits = 0
        self._misses = 0
        self.logger = get_logger("platform.ttl_cache")

    def _live_entry(self, key: str) -> Optional[CacheEntry]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() >= entry.expires_at:
            del self._entries[key]
            return None
        return entry

    def get(self, key: str, default: Any = None) -> Any:
        """Return a copy of the value for ``key``, or ``default`` if absent or expired."""
        entry = self._live_entry(key)
        if entry is None:
            self._misses += 1
            return default
        self._hits += 1
        return copy.deepcopy(entry.value)

    def has(self, key: str) -> bool:
        return self._live_entry(key) is not None

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        """Store ``value`` under ``key``, replacing any previous entry."""
        ttl = self.default_ttl if ttl is None else ttl
        if key not in self._entries and self.max_entries and len(self._entries) >= self.max_entries:
            self._make_room()
        self._entries[key] = CacheEntry(
            key=key,
            value=copy.deepcopy(value),
            expires_at=self._clock() + ttl,
        )

    def delete(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        self._entries.clear()

    def purge_expired(self) -> int:
        """Drop every expired entry and return how many were removed."""
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if now >= entry.expires_at]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def _make_room(self) -> None:
        removed = self.purge_expired()
        if len(self._entries) < self.max_entries:
            return
        victim = min(self._entries.values(), key=lambda entry: entry.expires_at)
        del self._entries[victim.key]
        self.logger.debug("Cache full, evicted entry", key=victim.key, purged=removed)

    def stats(self) -> Dict[str, Any]:
        return {
            "keys": len(self._entries),
            "hits": self._hits,
            "misses": self._misses,
            "max_entries": self.max_entries,
            "default_ttl": self.default_ttl,
        }

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.has(key)
