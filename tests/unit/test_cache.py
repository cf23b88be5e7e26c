"""Tests for cache utilities."""

from unittest.mock import patch

from scss_style_mcp.utils.cache import LRUCache, cache_key


class TestLRUCache:
    """Test cases for LRUCache implementation."""

    def test_put_and_get(self):
        """Test basic put and get operations."""
        cache = LRUCache[str, str](max_size=3)

        cache.put("a.scss", "result-a")

        assert cache.get("a.scss") == "result-a"
        assert cache.get("missing") is None
        assert cache.get("missing", "default") == "default"
        assert cache.size() == 1

    def test_lru_eviction(self):
        """Test that the least recently used entry is evicted."""
        cache = LRUCache[str, int](max_size=2)

        cache.put("first", 1)
        cache.put("second", 2)
        cache.get("first")
        cache.put("third", 3)

        assert cache.get("second") is None
        assert cache.get("first") == 1
        assert cache.get("third") == 3

    def test_shrinking_capacity(self):
        """Test that lowering max_size evicts down to the limit on the next put."""
        cache = LRUCache[int, int](max_size=5)
        for i in range(5):
            cache.put(i, i)

        cache.max_size = 2
        cache.put(5, 5)

        assert cache.size() == 2
        assert cache.get(4) == 4
        assert cache.get(5) == 5

    def test_delete_and_clear(self):
        """Test delete and clear."""
        cache = LRUCache[str, int]()
        cache.put("a", 1)
        cache.put("b", 2)

        assert cache.delete("a") is True
        assert cache.delete("a") is False
        assert cache.size() == 1

        cache.clear()
        assert cache.size() == 0

    def test_ttl_expiration(self):
        """Test that entries expire after the TTL."""
        cache = LRUCache[str, int](ttl=10)

        with patch("scss_style_mcp.utils.cache.time.time", return_value=1000.0):
            cache.put("a", 1)
        with patch("scss_style_mcp.utils.cache.time.time", return_value=1005.0):
            assert cache.get("a") == 1
        with patch("scss_style_mcp.utils.cache.time.time", return_value=1011.0):
            assert cache.get("a") is None
            assert cache.size() == 0

    def test_cleanup_expired(self):
        """Test removing expired entries in bulk."""
        cache = LRUCache[str, int](ttl=10)

        with patch("scss_style_mcp.utils.cache.time.time", return_value=1000.0):
            cache.put("old", 1)
        with patch("scss_style_mcp.utils.cache.time.time", return_value=1008.0):
            cache.put("new", 2)
        with patch("scss_style_mcp.utils.cache.time.time", return_value=1012.0):
            assert cache.cleanup_expired() == 1

        assert cache.size() == 1
        assert LRUCache[str, int]().cleanup_expired() == 0


class TestCacheKey:
    """Test cache key generation."""

    def test_cache_key_is_deterministic(self):
        """Test that equal arguments give equal keys."""
        assert cache_key(".c-a {}", strict=False) == cache_key(".c-a {}", strict=False)

    def test_cache_key_distinguishes_arguments(self):
        """Test that content and options change the key."""
        base = cache_key(".c-a {}", strict=False, rules="{}")

        assert base != cache_key(".c-b {}", strict=False, rules="{}")
        assert base != cache_key(".c-a {}", strict=True, rules="{}")
        assert base != cache_key(".c-a {}", strict=False, rules='{"disabled": []}')

    def test_cache_key_kwarg_order(self):
        """Test that keyword order does not matter."""
        assert cache_key("x", a=1, b=2) == cache_key("x", b=2, a=1)


class TestCacheStats:
    """Test hit and miss counters."""

    def test_stats(self):
        """Test that lookups are counted."""
        cache = LRUCache[str, int]()
        cache.put("a", 1)

        cache.get("a")
        cache.get("b")

        assert cache.stats() == {"size": 1, "hits": 1, "misses": 1}
