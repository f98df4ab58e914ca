"""In-memory cache provider using cachetools.TTLCache.

Simple, fast cache suitable for single-process deployments.  Expiry is
lazy: there is no background sweep, and a read that finds an expired entry
evicts it and reports a miss.  There is no size bound beyond TTL expiry,
because the data held per process lifetime is bounded by query volume.

The event loop runs every coroutine on one thread, so the underlying map
needs no lock.  Two tasks racing to fill the same key just both fetch and
the last write wins; values are immutable once stored.
"""

from __future__ import annotations

import math
import time
from typing import Any, Callable

from cachetools import TTLCache

from src.interfaces.cache_provider import ICacheProvider
from src.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_TTL_SECONDS = 24 * 60 * 60


class MemoryCacheProvider(ICacheProvider):
    """In-memory TTL cache backed by ``cachetools.TTLCache``.

    Parameters
    ----------
    name:
        Human-readable name used in log events (e.g. ``"songDetails"``).
    ttl:
        Time-to-live in seconds for every entry.
    timer:
        Clock returning seconds; injectable so tests can move time forward.
    """

    def __init__(
        self,
        name: str,
        ttl: float = DEFAULT_TTL_SECONDS,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        self._name = name
        self._ttl = ttl
        self._cache: TTLCache[str, Any] = TTLCache(maxsize=math.inf, ttl=ttl, timer=timer)

    @property
    def name(self) -> str:
        return self._name

    @property
    def ttl(self) -> float:
        return self._ttl

    # ------------------------------------------------------------------
    # ICacheProvider implementation
    # ------------------------------------------------------------------

    async def get(self, key: str) -> Any | None:
        """Retrieve the cached value for *key*, or ``None`` if missing/expired."""
        self._evict_expired(key)
        value = self._cache.get(key)
        if value is not None:
            logger.debug("cache_hit", cache=self._name, key=key)
        else:
            logger.debug("cache_miss", cache=self._name, key=key)
        return value

    async def set(self, key: str, value: Any) -> None:
        """Store *value* under *key*, restarting its TTL."""
        self._cache[key] = value
        logger.debug("cache_set", cache=self._name, key=key)

    async def delete(self, key: str) -> None:
        """Remove *key* from the cache (no-op if absent)."""
        self._cache.pop(key, None)
        logger.debug("cache_delete", cache=self._name, key=key)

    async def exists(self, key: str) -> bool:
        """Return ``True`` if *key* is present and not expired."""
        self._evict_expired(key)
        return key in self._cache

    async def clear(self) -> None:
        self._cache.clear()
        logger.info("cache_cleared", cache=self._name)

    def size(self) -> int:
        return len(self._cache)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _evict_expired(self, key: str) -> None:
        expired = self._cache.expire()
        if any(expired_key == key for expired_key, _ in expired):
            logger.debug("cache_expired", cache=self._name, key=key)
