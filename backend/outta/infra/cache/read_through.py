from __future__ import annotations

import logging
import os
from typing import Any, Callable, Mapping, Optional, TypeVar

from .store import InMemoryStore, KeyValueStore, RedisStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TTL_SECONDS = 300
KEY_SEPARATOR = "|"


def build_cache_key(namespace: str, params: Mapping[str, Any]) -> str:
    """Deterministic key: parameter names sorted, ``None`` values dropped."""
    parts = [f"{name}:{params[name]}" for name in sorted(params) if params[name] is not None]
    return f"{namespace}:{KEY_SEPARATOR.join(parts)}"


def listings_cache_key(params: Mapping[str, Any]) -> str:
    return build_cache_key("listings", params)


def home_cache_key(params: Mapping[str, Any]) -> str:
    return build_cache_key("home", params)


def search_cache_key(query: str, listing_type: Optional[str] = None, limit: int = 15, offset: int = 0) -> str:
    return f"search:{listing_type or 'all'}:{query}:{limit}:{offset}"


class ReadThroughCache:
    def __init__(self, store: KeyValueStore, *, ttl_seconds: int = DEFAULT_TTL_SECONDS, enabled: bool = True):
        self.store = store
        self.ttl_seconds = ttl_seconds
        self.enabled = enabled

    def get_cached_data(self, key: str, fetcher: Callable[[], T], ttl_seconds: Optional[int] = None) -> T:
        """Return the cached value for ``key`` or compute it with ``fetcher`` and store it.

        Store failures on either side are logged and treated as a miss; the
        fetcher's result is always returned. Errors raised by ``fetcher``
        propagate to the caller.
        """
        if not self.enabled:
            return fetcher()

        try:
            cached = self.store.get(key)
        except Exception as exc:
            logger.warning("Cache read failed for %s: %s", key, exc)
            cached = None
        if cached is not None:
            logger.debug("Cache HIT: %s", key)
            return cached
        logger.debug("Cache MISS: %s", key)

        data = fetcher()

        ttl = ttl_seconds if ttl_seconds is not None else self.ttl_seconds
        try:
            self.store.set(key, data, ex=ttl)
        except Exception as exc:
            logger.warning("Cache write failed for %s: %s", key, exc)
        else:
            logger.debug("Cache SET: %s (TTL: %ss)", key, ttl)
        return data

    def invalidate_cache(self, pattern: str) -> int:
        """Delete every key matching ``pattern``; returns how many were removed."""
        if not self.enabled:
            return 0
        try:
            keys = self.store.keys(pattern)
            if not keys:
                return 0
            removed = self.store.delete(*keys)
        except Exception as exc:
            logger.warning("Cache invalidation failed for %s: %s", pattern, exc)
            return 0
        logger.info("Invalidated %s cache keys matching %s", removed, pattern)
        return removed


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


def build_cache_from_env() -> ReadThroughCache:
    enabled = _env_flag("CACHE_ENABLED", "true")
    ttl_seconds = int(os.getenv("CACHE_TTL_SECONDS", str(DEFAULT_TTL_SECONDS)))
    redis_url = os.getenv("REDIS_URL")
    store: KeyValueStore = RedisStore.from_url(redis_url) if redis_url else InMemoryStore()
    return ReadThroughCache(store, ttl_seconds=ttl_seconds, enabled=enabled)
