"""
Tests for the time-bounded feed cache.
"""

from pagefeed.storage.feed_cache import DEFAULT_TTL_SECONDS, FeedCache


class TestFeedCache:
    """Test lookup, store and expiry behaviour."""

    def test_default_ttl_is_ten_minutes(self):
        assert DEFAULT_TTL_SECONDS == 600
        assert FeedCache().ttl_seconds == 600

    def test_lookup_missing_key(self, fake_clock):
        cache = FeedCache(clock=fake_clock)

        assert cache.lookup("https://example.com") is None

    def test_store_then_lookup(self, fake_clock, sample_feed_xml):
        cache = FeedCache(clock=fake_clock)

        cache.store("https://example.com", sample_feed_xml)

        assert cache.lookup("https://example.com") == sample_feed_xml

    def test_entry_usable_just_before_ttl(self, fake_clock):
        cache = FeedCache(ttl_seconds=600, clock=fake_clock)
        cache.store("k", "body")

        fake_clock.advance(599.9)

        assert cache.lookup("k") == "body"

    def test_entry_expires_at_exactly_ttl(self, fake_clock):
        cache = FeedCache(ttl_seconds=600, clock=fake_clock)
        cache.store("k", "body")

        fake_clock.advance(600)

        assert cache.lookup("k") is None

    def test_stale_entry_is_not_removed(self, fake_clock):
        cache = FeedCache(ttl_seconds=10, clock=fake_clock)
        cache.store("k", "body")

        fake_clock.advance(60)
        cache.lookup("k")

        assert "k" in cache
        assert len(cache) == 1

    def test_store_overwrites_and_refreshes_timestamp(self, fake_clock):
        cache = FeedCache(ttl_seconds=600, clock=fake_clock)
        cache.store("k", "old")

        fake_clock.advance(500)
        cache.store("k", "new")
        fake_clock.advance(500)

        assert cache.lookup("k") == "new"
        assert len(cache) == 1

    def test_keys_are_compared_verbatim(self, fake_clock):
        cache = FeedCache(clock=fake_clock)
        cache.store("https://example.com/a b", "decoded")

        assert cache.lookup("https://example.com/a%20b") is None
        assert cache.lookup("https://example.com/a b") == "decoded"

    def test_stats(self, fake_clock):
        cache = FeedCache(clock=fake_clock)
        cache.store("k", "body")

        cache.lookup("k")
        cache.lookup("k")
        cache.lookup("other")

        assert cache.stats() == {"entries": 1, "hits": 2, "misses": 1}
