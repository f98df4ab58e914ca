"""Shared pytest fixtures for the producer-connect test suite."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

import src.main  # noqa: F401  configures logging once, before any test swaps sys.stdout
from src.interfaces.music_metadata_provider import IMusicMetadataProvider
from src.providers.cache.registry import CacheRegistry
from tests.factories import make_profile

# ---------------------------------------------------------------------------
# Clock
# ---------------------------------------------------------------------------


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def caches(clock: FakeClock) -> CacheRegistry:
    """A fresh set of the four caches, driven by the fake clock."""
    return CacheRegistry.in_memory(ttl=86400, timer=clock)


# ---------------------------------------------------------------------------
# Upstream provider
# ---------------------------------------------------------------------------


@pytest.fixture
def provider() -> AsyncMock:
    """Metadata provider mock; ``get_artist`` answers with a full profile."""
    mock = AsyncMock(spec=IMusicMetadataProvider)
    mock.get_artist.side_effect = lambda artist_id: make_profile(artist_id)
    mock.get_provider_name.return_value = "fake"
    mock.is_available.return_value = True
    return mock
