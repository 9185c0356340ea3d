"""Tests for the session LRU cache."""

import pytest

from corpus_forensics.cache import LRUCache


class TestLRUCache:
    def test_miss_returns_none(self):
        assert LRUCache(2).get("missing") is None

    def test_set_and_get(self):
        cache = LRUCache(2)
        cache.set("a", 1)
        assert cache.get("a") == 1
        assert len(cache) == 1

    def test_evicts_least_recently_used(self):
        cache = LRUCache(2)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.set("c", 3)
        assert "a" not in cache
        assert cache.keys() == ["b", "c"]

    def test_get_refreshes_recency(self):
        cache = LRUCache(2)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.get("a")
        cache.set("c", 3)
        assert cache.has("a")
        assert not cache.has("b")

    def test_overwrite_refreshes_without_evicting(self):
        cache = LRUCache(2)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.set("a", 10)
        assert len(cache) == 2
        assert cache.keys() == ["b", "a"]
        assert cache.get("a") == 10

    def test_has_does_not_refresh(self):
        cache = LRUCache(2)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.has("a")
        cache.set("c", 3)
        assert not cache.has("a")

    def test_clear(self):
        cache = LRUCache(3)
        cache.set("a", 1)
        cache.clear()
        assert len(cache) == 0

    def test_capacity_one(self):
        cache = LRUCache(1)
        cache.set("a", 1)
        cache.set("b", 2)
        assert cache.keys() == ["b"]

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            LRUCache(0)
