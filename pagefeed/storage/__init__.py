"""Feed storage."""

from .feed_cache import FeedCache, CacheEntry

__all__ = ["FeedCache", "CacheEntry"]
