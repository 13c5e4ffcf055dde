from __future__ import annotations

import logging
import threading
import time
from collections.abc import Awaitable, Callable
from typing import Any, Protocol

from src.security.advisories import AdvisoryCollection

logger = logging.getLogger(__name__)


class CacheStore(Protocol):
    def get(self, key: str) -> Any | None: ...

    def set(self, key: str, value: Any, ttl_seconds: int) -> None: ...

    def has(self, key: str) -> bool: ...


# Resolved lazily so a check can be built before its cache backend exists
CacheStoreProvider = Callable[[], CacheStore | None]


class InMemoryCacheStore:
    """Process-local key/value store with per-entry expiry."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[str, tuple[float, Any]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Any | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return None
            return value

    def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        with self._lock:
            self._entries[key] = (self._clock() + ttl_seconds, value)

    def has(self, key: str) -> bool:
        return self.get(key) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def stats(self) -> dict[str, Any]:
        with self._lock:
            now = self._clock()
            live = sum(1 for expires_at, _ in self._entries.values() if expires_at > now)
            return {"entries": len(self._entries), "live_entries": live}


class ResultCache:
    """Memoizes advisory lookups per inventory fingerprint."""

    def __init__(self, store_provider: CacheStoreProvider | None = None) -> None:
        self._store_provider = store_provider
        self._store: CacheStore | None = None
        self._resolved = False

    @property
    def store(self) -> CacheStore | None:
        if not self._resolved:
            if self._store_provider is None:
                self._resolved = True
                return None
            try:
                self._store = self._store_provider()
            except Exception as e:
                # Not marked resolved: the backend may be available on the next run
                logger.warning(f"⚠️  Cache store unavailable: {e}")
                return None
            self._resolved = True
        return self._store

    async def get_or_compute(
        self,
        key: str,
        ttl_seconds: int,
        compute: Callable[[], Awaitable[AdvisoryCollection]],
    ) -> AdvisoryCollection:
        if ttl_seconds <= 0:
            return await compute()

        store = self.store
        if store is None:
            logger.debug("No cache store available; caching disabled")
            return await compute()

        try:
            cached = store.get(key)
        except Exception as e:
            logger.warning(f"⚠️  Cache read failed for {key}: {e}")
            cached = None

        if cached is not None:
            try:
                advisories = AdvisoryCollection.from_mapping(cached)
            except (AttributeError, TypeError, ValueError) as e:
                logger.warning(f"⚠️  Ignoring unreadable cache entry {key}: {e}")
            else:
                logger.info(f"📦 Loaded advisories from cache ({key})")
                return advisories

        logger.info(f"🌐 Cache miss for {key}; querying advisory service")
        result = await compute()
        try:
            store.set(key, result.to_dict(), ttl_seconds)
        except Exception as e:
            logger.warning(f"⚠️  Cache write failed for {key}: {e}")
        return result
