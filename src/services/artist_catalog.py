"""Artist lookup and song-list pagination.

``ArtistCatalogService`` turns an artist name into upstream artists, and an
artist id into the artist's song list.  Both are cache-first: a hit never
touches the upstream, and a successful fetch is cached before returning.

Song lists are assembled page by page, sorted by popularity.  Pages are
fetched strictly one after another because whether page N+1 exists depends
on how many songs page N returned.  The list is capped at ``max_pages``
pages (250 songs with the defaults) to bound latency and upstream load;
a failed page propagates, since without songs there is nothing to
aggregate.
"""

from __future__ import annotations

import structlog

from src.interfaces.music_metadata_provider import IMusicMetadataProvider
from src.models.entities import Artist, Song
from src.providers.cache.registry import CacheRegistry
from src.utils.logging import get_logger
from src.utils.timing import timers

_PAGE_SIZE = 50
_MAX_PAGES = 5
_SORT = "popularity"


class ArtistCatalogService:
    """Cache-first artist search and paginated song fetching.

    Parameters
    ----------
    provider:
        Upstream metadata provider.
    caches:
        Registry whose ``artist_search`` and ``artist_songs`` caches are used.
    page_size:
        Songs requested per page.
    max_pages:
        Hard cap on pages fetched per artist.
    """

    def __init__(
        self,
        provider: IMusicMetadataProvider,
        caches: CacheRegistry,
        page_size: int = _PAGE_SIZE,
        max_pages: int = _MAX_PAGES,
    ) -> None:
        self._provider = provider
        self._caches = caches
        self._page_size = page_size
        self._max_pages = max_pages
        self._logger: structlog.BoundLogger = get_logger(__name__)

    @property
    def max_songs(self) -> int:
        return self._page_size * self._max_pages

    async def search_artists(self, name: str) -> list[Artist]:
        """Return artists matching *name*, de-duplicated, in relevance order."""
        cache_key = name.lower()
        cached = await self._caches.artist_search.get(cache_key)
        if cached is not None:
            return list(cached)

        with timers.measure(f"searchArtist:{name}"):
            try:
                artists = await self._provider.search_artists(name)
            except Exception as exc:
                self._logger.error("artist_search_failed", query=name, error=str(exc))
                raise

        await self._caches.artist_search.set(cache_key, artists)
        return list(artists)

    async def fetch_all_songs(self, artist_id: int) -> list[Song]:
        """Return up to ``max_pages * page_size`` songs by *artist_id*.

        Raises
        ------
        src.utils.errors.UpstreamError
            If any page cannot be fetched.  Nothing is cached in that case.
        """
        cache_key = str(artist_id)
        cached = await self._caches.artist_songs.get(cache_key)
        if cached is not None:
            return list(cached)

        songs: list[Song] = []
        pages_fetched = 0
        with timers.measure(f"getAllArtistSongs:{artist_id}"):
            for page in range(1, self._max_pages + 1):
                try:
                    page_songs = await self._provider.get_artist_songs(
                        artist_id,
                        page=page,
                        per_page=self._page_size,
                        sort=_SORT,
                    )
                except Exception as exc:
                    self._logger.error(
                        "artist_songs_page_failed",
                        artist_id=artist_id,
                        page=page,
                        error=str(exc),
                    )
                    raise

                pages_fetched += 1
                songs.extend(page_songs)
                if len(page_songs) < self._page_size:
                    break

        self._logger.info(
            "artist_songs_fetched",
            artist_id=artist_id,
            song_count=len(songs),
            pages=pages_fetched,
        )
        await self._caches.artist_songs.set(cache_key, songs)
        return list(songs)
