"""FastAPI dependency for the shared cache manager."""

from __future__ import annotations

from functools import lru_cache

from ..config import settings
from ..utils.cache import CacheManager


@lru_cache(maxsize=1)
def get_cache_manager() -> CacheManager:
    """Return the process-wide ``CacheManager``."""

    return CacheManager(
        redis_url=settings.REDIS_URL,
        default_ttl=settings.CACHE_TTL_SECONDS,
        max_items=settings.CACHE_MAX_ITEMS,
        namespace=settings.CACHE_NAMESPACE,
    )
