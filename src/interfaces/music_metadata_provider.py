"""Abstract base class for music-metadata service providers.

Defines the contract for the upstream API the aggregation engine reads
artists, song lists, song credits and artist profiles from.  The concrete
adapter owns transport, retry and payload parsing; services above it only
ever see domain models and final errors.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from src.models.entities import Artist, Song


class IMusicMetadataProvider(ABC):
    """Contract for the upstream metadata API.

    Every method performs at most one logical request (the adapter may retry
    it internally) and raises a :class:`src.utils.errors.UpstreamError`
    subclass when the request ultimately fails.
    """

    @abstractmethod
    async def search_artists(self, query: str) -> list[Artist]:
        """Search for artists matching *query*.

        Returns
        -------
        list[Artist]
            Distinct artists in upstream relevance order.
        """

    @abstractmethod
    async def get_artist_songs(
        self,
        artist_id: int,
        page: int = 1,
        per_page: int = 50,
        sort: str = "popularity",
    ) -> list[Song]:
        """Return one page of songs by the artist identified by *artist_id*.

        Parameters
        ----------
        artist_id:
            Upstream artist id.
        page:
            1-based page number.
        per_page:
            Page size requested from the upstream.
        sort:
            Upstream sort key.
        """

    @abstractmethod
    async def get_song(self, song_id: int) -> Song:
        """Return the full details (including all credits) of one song."""

    @abstractmethod
    async def get_artist(self, artist_id: int) -> Artist:
        """Return the full profile of one artist."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier, e.g. ``"genius"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the provider is configured (credentials present)."""
