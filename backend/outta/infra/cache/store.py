from __future__ import annotations

import fnmatch
import json
import time
from threading import Lock
from typing import Any, Callable, Dict, List, Optional, Protocol, Tuple

import redis


class KeyValueStore(Protocol):
    """Contract for the managed key-value service backing the cache."""

    def get(self, key: str) -> Any:
        """Return the stored value or ``None`` when missing or expired."""
        raise NotImplementedError

    def set(self, key: str, value: Any, ex: Optional[int] = None) -> None:
        raise NotImplementedError

    def keys(self, pattern: str) -> List[str]:
        raise NotImplementedError

    def delete(self, *keys: str) -> int:
        raise NotImplementedError


class InMemoryStore:
    """Process-local store with per-key expiry, used when no Redis is configured.

    Values are JSON-encoded on write so they behave like values that went
    through a network store.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._items: Dict[str, Tuple[Optional[float], str]] = {}
        self._lock = Lock()

    def get(self, key: str) -> Any:
        with self._lock:
            entry = self._items.get(key)
            if entry is None:
                return None
            expires_at, payload = entry
            if expires_at is not None and self._clock() >= expires_at:
                del self._items[key]
                return None
        return json.loads(payload)

    def set(self, key: str, value: Any, ex: Optional[int] = None) -> None:
        payload = json.dumps(value)
        now = self._clock()
        expires_at = now + ex if ex else None
        with self._lock:
            self._purge_expired(now)
            self._items[key] = (expires_at, payload)

    def keys(self, pattern: str) -> List[str]:
        now = self._clock()
        with self._lock:
            self._purge_expired(now)
            return [key for key in self._items if fnmatch.fnmatchcase(key, pattern)]

    def delete(self, *keys: str) -> int:
        removed = 0
        with self._lock:
            for key in keys:
                if self._items.pop(key, None) is not None:
                    removed += 1
        return removed

    def _purge_expired(self, now: float) -> None:
        # Caller holds the lock.
        expired = [key for key, (expires_at, _) in self._items.items() if expires_at is not None and now >= expires_at]
        for key in expired:
            del self._items[key]


class RedisStore:
    def __init__(self, client: "redis.Redis") -> None:
        self._client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisStore":
        return cls(redis.Redis.from_url(url, decode_responses=True))

    def get(self, key: str) -> Any:
        payload = self._client.get(key)
        if payload is None:
            return None
        return json.loads(payload)

    def set(self, key: str, value: Any, ex: Optional[int] = None) -> None:
        self._client.set(key, json.dumps(value), ex=ex)

    def keys(self, pattern: str) -> List[str]:
        return list(self._client.keys(pattern))

    def delete(self, *keys: str) -> int:
        if not keys:
            return 0
        return int(self._client.delete(*keys))
