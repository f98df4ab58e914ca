"""Unit tests for MemoryCacheProvider and CacheRegistry."""

from __future__ import annotations

import pytest

from src.providers.cache.memory_cache import MemoryCacheProvider
from src.providers.cache.registry import CacheRegistry


class _Clock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


# ======================================================================
# MemoryCacheProvider
# ======================================================================


class TestMemoryCacheProvider:
    @pytest.fixture()
    def clock(self) -> _Clock:
        return _Clock()

    @pytest.fixture()
    def cache(self, clock: _Clock) -> MemoryCacheProvider:
        return MemoryCacheProvider("songDetails", ttl=60, timer=clock)

    @pytest.mark.asyncio
    async def test_get_missing_key_returns_none(self, cache: MemoryCacheProvider) -> None:
        assert await cache.get("nonexistent") is None

    @pytest.mark.asyncio
    async def test_set_and_get(self, cache: MemoryCacheProvider) -> None:
        await cache.set("42", {"title": "Nikes"})
        assert await cache.get("42") == {"title": "Nikes"}

    @pytest.mark.asyncio
    async def test_set_overwrites_existing(self, cache: MemoryCacheProvider) -> None:
        await cache.set("42", "old")
        await cache.set("42", "new")
        assert await cache.get("42") == "new"

    @pytest.mark.asyncio
    async def test_entry_readable_until_ttl(
        self, cache: MemoryCacheProvider, clock: _Clock
    ) -> None:
        await cache.set("42", "value")
        clock.now = 59.9
        assert await cache.get("42") == "value"
        assert await cache.exists("42") is True

    @pytest.mark.asyncio
    async def test_entry_expires_after_ttl(
        self, cache: MemoryCacheProvider, clock: _Clock
    ) -> None:
        await cache.set("42", "value")
        clock.now = 61
        assert await cache.get("42") is None
        assert cache.size() == 0

    @pytest.mark.asyncio
    async def test_exists_evicts_expired_entry(
        self, cache: MemoryCacheProvider, clock: _Clock
    ) -> None:
        await cache.set("42", "value")
        clock.now = 120
        assert await cache.exists("42") is False
        assert cache.size() == 0

    @pytest.mark.asyncio
    async def test_set_restarts_ttl(self, cache: MemoryCacheProvider, clock: _Clock) -> None:
        await cache.set("42", "first")
        clock.now = 50
        await cache.set("42", "second")
        clock.now = 100
        assert await cache.get("42") == "second"

    @pytest.mark.asyncio
    async def test_delete_removes_key(self, cache: MemoryCacheProvider) -> None:
        await cache.set("42", "value")
        await cache.delete("42")
        assert await cache.get("42") is None

    @pytest.mark.asyncio
    async def test_delete_nonexistent_is_noop(self, cache: MemoryCacheProvider) -> None:
        await cache.delete("missing")
        assert cache.size() == 0

    @pytest.mark.asyncio
    async def test_clear_removes_everything(self, cache: MemoryCacheProvider) -> None:
        for key in ("1", "2", "3"):
            await cache.set(key, key)
        assert cache.size() == 3
        await cache.clear()
        assert cache.size() == 0

    @pytest.mark.asyncio
    async def test_stores_complex_values(self, cache: MemoryCacheProvider) -> None:
        value = {"songs": [1, 2, 3], "nested": {"page": 1}}
        await cache.set("complex", value)
        assert await cache.get("complex") == value

    def test_name_and_ttl(self, cache: MemoryCacheProvider) -> None:
        assert cache.name == "songDetails"
        assert cache.ttl == 60

    def test_default_ttl_is_one_day(self) -> None:
        assert MemoryCacheProvider("x").ttl == 86400


# ======================================================================
# CacheRegistry
# ======================================================================


class TestCacheRegistry:
    def test_in_memory_names(self) -> None:
        registry = CacheRegistry.in_memory()
        assert [cache.name for cache in registry.all()] == [
            "artistSearch",
            "artistSongs",
            "songDetails",
            "producerDetails",
        ]

    @pytest.mark.asyncio
    async def test_caches_are_independent(self) -> None:
        registry = CacheRegistry.in_memory()
        await registry.song_details.set("1", "song")
        assert await registry.producer_profiles.get("1") is None

    @pytest.mark.asyncio
    async def test_sizes(self) -> None:
        registry = CacheRegistry.in_memory()
        await registry.artist_search.set("frank ocean", [])
        await registry.song_details.set("1", "a")
        await registry.song_details.set("2", "b")
        assert registry.sizes() == {
            "artistSearch": 1,
            "artistSongs": 0,
            "songDetails": 2,
            "producerDetails": 0,
        }

    @pytest.mark.asyncio
    async def test_clear_all(self) -> None:
        registry = CacheRegistry.in_memory()
        for cache in registry.all():
            await cache.set("k", "v")
        await registry.clear_all()
        assert all(size == 0 for size in registry.sizes().values())

    @pytest.mark.asyncio
    async def test_shared_timer_expires_every_cache(self) -> None:
        clock = _Clock()
        registry = CacheRegistry.in_memory(ttl=10, timer=clock)
        await registry.artist_songs.set("7", ["song"])
        clock.now = 11
        assert await registry.artist_songs.get("7") is None
