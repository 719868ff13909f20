"""Two-level cache: bounded in-process LRU (L1) in front of optional Redis (L2)."""

from __future__ import annotations

import asyncio
import pickle
import time
from collections import OrderedDict
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from redis.exceptions import RedisError

from .logging import get_logger
from .metrics import CACHE_ENTRIES, record_cache_lookup
from .redis import get_redis_client

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass
class CacheEntry:
    value: Any
    expires_at: float


class L1Cache:
    """asyncio-safe LRU cache with per-entry TTL.

    When full, the least recently read or written key is evicted.
    A ``ttl`` of 0 means the entry never expires.
    """

    def __init__(self, max_items: int) -> None:
        if max_items < 1:
            raise ValueError("max_items must be at least 1")
        self.max_items = max_items
        self._store: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> Any | None:
        async with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            if entry.expires_at and entry.expires_at < time.time():
                self._store.pop(key, None)
                CACHE_ENTRIES.set(len(self._store))
                return None
            self._store.move_to_end(key)
            return entry.value

    async def set(self, key: str, value: Any, ttl: int) -> None:
        expires_at = time.time() + ttl if ttl else 0
        async with self._lock:
            if key in self._store:
                self._store.move_to_end(key)
            self._store[key] = CacheEntry(value=value, expires_at=expires_at)
            while len(self._store) > self.max_items:
                self._store.popitem(last=False)
            CACHE_ENTRIES.set(len(self._store))

    async def clear(self) -> None:
        async with self._lock:
            self._store.clear()
            CACHE_ENTRIES.set(0)

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, key: object) -> bool:
        return key in self._store


class CacheManager:
    """Coordinates the L1 (memory) and L2 (Redis) caches."""

    def __init__(
        self,
        redis_url: str,
        default_ttl: int,
        max_items: int,
        namespace: str,
    ) -> None:
        self.redis_url = redis_url
        self.default_ttl = default_ttl
        self.namespace = namespace
        self.l1 = L1Cache(max_items=max_items)
        self._redis_checked = False
        self._redis_available = False

    def _namespaced(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    async def _redis(self):
        if not self.redis_url:
            return None
        if self._redis_checked and not self._redis_available:
            return None
        client = await get_redis_client(self.redis_url)
        self._redis_checked = True
        self._redis_available = client is not None
        return client

    async def get(self, key: str) -> Any | None:
        value = await self.l1.get(key)
        if value is not None:
            record_cache_lookup("l1", hit=True)
            return value
        record_cache_lookup("l1", hit=False)

        redis = await self._redis()
        if redis is None:
            return None

        try:
            payload = await redis.get(self._namespaced(key))
        except RedisError as exc:
            logger.warning("redis_get_failed", extra={"error": str(exc)})
            record_cache_lookup("l2", hit=False)
            return None

        if payload is None:
            record_cache_lookup("l2", hit=False)
            return None

        try:
            value = pickle.loads(payload)
        except pickle.PickleError as exc:
            logger.error("cache_deserialization_failed", extra={"error": str(exc)})
            record_cache_lookup("l2", hit=False)
            return None

        record_cache_lookup("l2", hit=True)
        await self.l1.set(key, value, ttl=self.default_ttl)
        return value

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        ttl = self.default_ttl if ttl is None else ttl
        await self.l1.set(key, value, ttl)

        redis = await self._redis()
        if redis is None or ttl == 0:
            return

        try:
            await redis.set(self._namespaced(key), pickle.dumps(value), ex=ttl)
        except RedisError as exc:
            logger.warning("redis_set_failed", extra={"error": str(exc)})

    async def get_or_set(
        self,
        key: str,
        loader: Callable[[], Awaitable[T]],
        ttl: int | None = None,
    ) -> T:
        """Return the cached value for ``key``, loading and storing it on a miss."""
        cached = await self.get(key)
        if cached is not None:
            return cached
        value = await loader()
        await self.set(key, value, ttl=ttl)
        return value

    async def clear(self) -> None:
        await self.l1.clear()
        redis = await self._redis()
        if redis is None:
            return
        try:
            keys = [key async for key in redis.scan_iter(match=f"{self.namespace}:*")]
            if keys:
                await redis.delete(*keys)
        except RedisError as exc:
            logger.warning("redis_clear_failed", extra={"error": str(exc)})
