"""Cache providers.

In-memory TTL caches that let repeated searches for the same artist skip
the upstream API entirely for 24 hours.  ``CacheRegistry`` groups the four
caches the engine uses (artist searches, song lists, song details and
producer profiles).

MemoryCacheProvider is not shared across processes.  For multi-worker
deployments, swap in a Redis adapter implementing ICacheProvider without
changing any business logic.
"""

from src.providers.cache.memory_cache import MemoryCacheProvider
from src.providers.cache.registry import CacheRegistry

__all__ = ["CacheRegistry", "MemoryCacheProvider"]
