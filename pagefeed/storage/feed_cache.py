"""
Feed Cache
==========

In-process, time-bounded cache of generated feeds keyed by page URL.

Eviction is lazy: an entry older than the TTL is ignored at read time but
never removed. There is no size bound; the cache lives as long as the
process. Writes replace the whole entry in one dict assignment, so readers
never observe a partially written entry.
"""

import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from ..utils.logging import get_logger_for_component


DEFAULT_TTL_SECONDS = 10 * 60


@dataclass(frozen=True)
class CacheEntry:
    """A cached feed body."""
    key: str
    created_at: float
    body: str


class FeedCache:
    """Time-bounded feed cache with an injectable clock."""

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize feed cache.

        Args:
            ttl_seconds: Maximum age of a usable entry
            clock: Returns the current time in seconds
        """
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._hits = 0
        self._misses = 0
        self.logger = get_logger_for_component("feed_cache")

    def lookup(self, key: str) -> Optional[str]:
        """Return the cached body for key if it is younger than the TTL."""
        entry = self._entries.get(key)

        if entry is not None and self.clock() - entry.created_at < self.ttl_seconds:
            self._hits += 1
            self.logger.debug(f"Cache hit for {key}")
            return entry.body

        self._misses += 1
        if entry is not None:
            self.logger.debug(f"Cache entry for {key} is stale")
        return None

    def store(self, key: str, body: str) -> None:
        """Store body under key, replacing any existing entry."""
        self._entries[key] = CacheEntry(key=key, created_at=self.clock(), body=body)
        self.logger.debug(f"Cached feed for {key} ({len(body)} chars)")

    def stats(self) -> Dict[str, int]:
        """Hit/miss counters and number of stored entries (stale included)."""
        return {
            "entries": len(self._entries),
            "hits": self._hits,
            "misses": self._misses,
        }

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
