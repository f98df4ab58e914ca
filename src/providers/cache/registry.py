"""The four process-wide caches used by the aggregation engine.

One cache per data kind, each with its own name for log output.  The
registry is built once at process start and injected into the services
that need it; tests build a fresh registry per test.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable

from src.interfaces.cache_provider import ICacheProvider
from src.providers.cache.memory_cache import DEFAULT_TTL_SECONDS, MemoryCacheProvider


@dataclass(frozen=True)
class CacheRegistry:
    """Named caches keyed by string ids.

    Attributes
    ----------
    artist_search:
        ``list[Artist]`` keyed by the lower-cased search query.
    artist_songs:
        ``list[Song]`` keyed by artist id.
    song_details:
        ``Song`` keyed by song id.
    producer_profiles:
        ``Producer`` keyed by producer id.
    """

    artist_search: ICacheProvider
    artist_songs: ICacheProvider
    song_details: ICacheProvider
    producer_profiles: ICacheProvider

    @classmethod
    def in_memory(
        cls,
        ttl: float = DEFAULT_TTL_SECONDS,
        timer: Callable[[], float] = time.monotonic,
    ) -> CacheRegistry:
        return cls(
            artist_search=MemoryCacheProvider("artistSearch", ttl=ttl, timer=timer),
            artist_songs=MemoryCacheProvider("artistSongs", ttl=ttl, timer=timer),
            song_details=MemoryCacheProvider("songDetails", ttl=ttl, timer=timer),
            producer_profiles=MemoryCacheProvider("producerDetails", ttl=ttl, timer=timer),
        )

    def all(self) -> list[ICacheProvider]:
        return [self.artist_search, self.artist_songs, self.song_details, self.producer_profiles]

    async def clear_all(self) -> None:
        for cache in self.all():
            await cache.clear()

    def sizes(self) -> dict[str, int]:
        return {cache.name: cache.size() for cache in self.all()}
