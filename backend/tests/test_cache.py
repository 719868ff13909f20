"""Tests for the in-process LRU cache layer."""

import pytest

from backend.app.utils.cache import CacheManager, L1Cache


def test_rejects_non_positive_capacity():
    with pytest.raises(ValueError):
        L1Cache(max_items=0)


@pytest.mark.asyncio
async def test_evicts_least_recently_used():
    cache = L1Cache(max_items=2)
    await cache.set("a", 1, ttl=0)
    await cache.set("b", 2, ttl=0)

    # Touch "a" so "b" becomes the eviction candidate
    assert await cache.get("a") == 1
    await cache.set("c", 3, ttl=0)

    assert "a" in cache
    assert "b" not in cache
    assert "c" in cache
    assert len(cache) == 2


@pytest.mark.asyncio
async def test_overwrite_refreshes_recency():
    cache = L1Cache(max_items=2)
    await cache.set("a", 1, ttl=0)
    await cache.set("b", 2, ttl=0)
    await cache.set("a", 10, ttl=0)
    await cache.set("c", 3, ttl=0)

    assert await cache.get("a") == 10
    assert await cache.get("b") is None


@pytest.mark.asyncio
async def test_expired_entries_are_dropped(monkeypatch):
    cache = L1Cache(max_items=4)
    await cache.set("k", "v", ttl=10)

    import backend.app.utils.cache as cache_module

    real_time = cache_module.time.time
    monkeypatch.setattr(cache_module.time, "time", lambda: real_time() + 60)

    assert await cache.get("k") is None
    assert "k" not in cache


@pytest.mark.asyncio
async def test_manager_get_or_set_without_redis():
    manager = CacheManager(redis_url="", default_ttl=60, max_items=4, namespace="test")
    calls = []

    async def loader():
        calls.append(1)
        return ["value"]

    assert await manager.get_or_set("key", loader) == ["value"]
    assert await manager.get_or_set("key", loader) == ["value"]
    assert len(calls) == 1

    await manager.clear()
    assert await manager.get("key") is None
