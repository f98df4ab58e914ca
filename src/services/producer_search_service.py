"""End-to-end producer search: artist name in, ranked producers out.

Chains the catalog and the aggregator the way the HTTP route and the CLI
both need it:

    search artists → first match → all songs → aggregate → rank

Ranking is deliberately simple: producers credited on more of the artist's
songs come first, and ties keep first-encountered order.
"""

from __future__ import annotations

import time

import structlog
from pydantic import BaseModel, Field

from src.models.aggregation import AggregationFailure
from src.models.entities import Artist, Producer
from src.services.artist_catalog import ArtistCatalogService
from src.services.producer_aggregator import ProducerAggregator
from src.utils.errors import ArtistNotFoundError
from src.utils.logging import get_logger
from src.utils.timing import timers


class ProducerSearchResult(BaseModel):
    """Everything one search produced."""

    artist: Artist
    producers: list[Producer] = Field(default_factory=list)
    song_count: int = 0
    failures: list[AggregationFailure] = Field(default_factory=list)
    complete: bool = True
    duration_ms: float = 0.0

    @property
    def producer_count(self) -> int:
        return len(self.producers)


def rank_producers(producers: list[Producer]) -> list[Producer]:
    """Order *producers* by notable-song count, most first (stable)."""
    return sorted(producers, key=lambda producer: len(producer.notable_songs), reverse=True)


class ProducerSearchService:
    """Finds the producers who worked with an artist."""

    def __init__(self, catalog: ArtistCatalogService, aggregator: ProducerAggregator) -> None:
        self._catalog = catalog
        self._aggregator = aggregator
        self._logger: structlog.BoundLogger = get_logger(__name__)

    async def search(self, query: str) -> ProducerSearchResult:
        """Run a full producer search for the artist best matching *query*.

        Raises
        ------
        ArtistNotFoundError
            If the search yields no artist.
        src.utils.errors.UpstreamError
            If the artist search or the song list cannot be fetched.
        """
        started = time.perf_counter()
        timer_label = f"API:search:{query}"
        timers.start(timer_label)
        self._logger.info("producer_search_started", query=query)
        try:
            artists = await self._catalog.search_artists(query)
            if not artists:
                self._logger.info("producer_search_no_artist", query=query)
                raise ArtistNotFoundError(message=f"No artists found for '{query}'")

            artist = artists[0]
            self._logger.info("producer_search_artist", artist=artist.name, artist_id=artist.id)

            songs = await self._catalog.fetch_all_songs(artist.id)
            report = await self._aggregator.aggregate_with_report(songs)
        finally:
            timers.stop(timer_label)

        result = ProducerSearchResult(
            artist=artist,
            producers=rank_producers(report.producers),
            song_count=len(songs),
            failures=report.failures,
            complete=report.complete,
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
        )
        self._logger.info(
            "producer_search_complete",
            artist=artist.name,
            song_count=result.song_count,
            producer_count=result.producer_count,
            failure_count=len(result.failures),
            duration_ms=result.duration_ms,
        )
        return result
