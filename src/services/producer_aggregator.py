"""Producer aggregation: from a song list to enriched, de-duplicated producers.

Architecture role: **the core of the engine**
---------------------------------------------
For every song the aggregator works out who produced it, then folds that
credit into one record per producer id:

  1. CREDITS  -- use the song's own producer credits when present; otherwise
                 fetch the song details (cache-first) and take both the
                 ``producer_credits`` and every additional credit group whose
                 label looks like a production credit.  Songs without any
                 production credit contribute nothing; that is common and
                 not an error.
  2. MERGE    -- a producer already profiled in this run just gains the
                 song.  Otherwise a cached profile is adopted (as a copy), or
                 the profile is fetched.  A failed profile fetch yields a
                 degraded record built from the inline credit fields.
  3. PACING   -- songs run in batches (concurrent inside a batch, sequential
                 across batches) with a pause between batches, and every
                 profile fetch is followed by a short pause.

Invariants:
- Producers come back in first-encountered order.
- A producer never lists two notable songs with the same title in one run.
- Records in the profile cache are song-free snapshots and are copied on
  every read, so one run can never leak songs into another.
- A failure scoped to one song or one producer never aborts the run; it is
  recorded in the :class:`AggregationResult`.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Sequence
from urllib.parse import urlparse

import structlog

from src.interfaces.music_metadata_provider import IMusicMetadataProvider
from src.models.aggregation import AggregationFailure, AggregationResult, FailureScope
from src.models.entities import Artist, NotableSong, Producer, Song
from src.providers.cache.registry import CacheRegistry
from src.utils.concurrency import gather_in_batches
from src.utils.logging import get_logger
from src.utils.timing import timers

_BATCH_SIZE = 5
_BATCH_DELAY = 0.5  # seconds between song batches
_PROFILE_DELAY = 0.3  # seconds after every producer profile fetch

# Upstream files production credits under free-text group labels such as
# "Producer", "Co-Producer" or "Additional Production".  Any label
# containing this marker (case-insensitive) counts as a production credit.
PRODUCER_LABEL_MARKER = "produc"


def is_production_label(label: str) -> bool:
    """Return ``True`` when a credit-group *label* names a production role."""
    return PRODUCER_LABEL_MARKER in label.lower()


def production_credits(song: Song) -> list[Artist]:
    """Collect producer credits from both credit fields of *song*.

    Direct producer credits come first, then artists from production-labelled
    credit groups; an artist listed in both places appears once.
    """
    credits: list[Artist] = []
    seen: set[int] = set()

    candidates = list(song.producer_credits)
    for group in song.additional_credit_groups:
        if is_production_label(group.label):
            candidates.extend(group.artists)

    for artist in candidates:
        if artist.id not in seen:
            seen.add(artist.id)
            credits.append(artist)
    return credits


def sanitize_image_url(url: str | None) -> str | None:
    """Return *url* only if it is an absolute http(s) URL."""
    if not url:
        return None
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return None
    return url


@dataclass
class _Run:
    """State private to one ``aggregate`` call."""

    producers: dict[int, Producer] = field(default_factory=dict)
    failures: list[AggregationFailure] = field(default_factory=list)


class ProducerAggregator:
    """Resolves producer credits for songs and merges them per producer.

    Parameters
    ----------
    provider:
        Upstream metadata provider (song details, artist profiles).
    caches:
        Registry whose ``song_details`` and ``producer_profiles`` caches are used.
    batch_size:
        Songs resolved concurrently.
    batch_delay:
        Seconds between song batches.
    profile_delay:
        Seconds to wait after every producer profile fetch attempt.
    """

    def __init__(
        self,
        provider: IMusicMetadataProvider,
        caches: CacheRegistry,
        batch_size: int = _BATCH_SIZE,
        batch_delay: float = _BATCH_DELAY,
        profile_delay: float = _PROFILE_DELAY,
    ) -> None:
        self._provider = provider
        self._caches = caches
        self._batch_size = batch_size
        self._batch_delay = batch_delay
        self._profile_delay = profile_delay
        self._logger: structlog.BoundLogger = get_logger(__name__)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def aggregate(self, songs: Sequence[Song]) -> list[Producer]:
        """Return the producers credited on *songs*, in first-encountered order.

        An interrupted run yields an empty list; use
        :meth:`aggregate_with_report` to tell that apart from "no producers".
        """
        result = await self.aggregate_with_report(songs)
        return result.producers

    async def aggregate_with_report(self, songs: Sequence[Song]) -> AggregationResult:
        """Aggregate *songs* and report every failure encountered on the way."""
        run = _Run()

        with timers.measure("getProducersFromSongs"):
            try:
                outcomes = await gather_in_batches(
                    songs,
                    lambda song: self._process_song(song, run),
                    batch_size=self._batch_size,
                    pause_seconds=self._batch_delay,
                )
            except Exception as exc:
                self._logger.error("producer_aggregation_failed", error=str(exc))
                run.failures.append(
                    AggregationFailure(scope=FailureScope.RUN, message=str(exc))
                )
                return AggregationResult(producers=[], failures=run.failures, complete=False)

        for song, outcome in zip(songs, outcomes):
            if isinstance(outcome, Exception):
                self._logger.error("song_processing_failed", song_id=song.id, error=str(outcome))
                run.failures.append(
                    AggregationFailure(
                        scope=FailureScope.SONG,
                        identifier=song.id,
                        message=str(outcome),
                    )
                )
            elif isinstance(outcome, BaseException):
                raise outcome

        producers = list(run.producers.values())
        self._logger.info(
            "producers_aggregated",
            song_count=len(songs),
            producer_count=len(producers),
            failure_count=len(run.failures),
        )
        return AggregationResult(producers=producers, failures=run.failures)

    # ------------------------------------------------------------------
    # Per-song resolution
    # ------------------------------------------------------------------

    async def _process_song(self, song: Song, run: _Run) -> None:
        if song.producer_credits:
            await self._merge_credits(song.producer_credits, song, run)
            return

        try:
            details = await self._get_song_details(song.id)
        except Exception as exc:
            self._logger.warning("song_details_failed", song_id=song.id, error=str(exc))
            run.failures.append(
                AggregationFailure(scope=FailureScope.SONG, identifier=song.id, message=str(exc))
            )
            return

        credits = production_credits(details)
        if credits:
            await self._merge_credits(credits, details, run)

    async def _get_song_details(self, song_id: int) -> Song:
        cache_key = str(song_id)
        cached = await self._caches.song_details.get(cache_key)
        if cached is not None:
            return cached

        with timers.measure(f"getSongDetails:{song_id}"):
            song = await self._provider.get_song(song_id)
        await self._caches.song_details.set(cache_key, song)
        return song

    # ------------------------------------------------------------------
    # Per-producer merge
    # ------------------------------------------------------------------

    async def _merge_credits(self, credits: Sequence[Artist], song: Song, run: _Run) -> None:
        notable = NotableSong.from_song(song)
        for credit in credits:
            await self._merge_credit(credit, notable, run)

    async def _merge_credit(self, credit: Artist, notable: NotableSong, run: _Run) -> None:
        existing = run.producers.get(credit.id)
        if existing is not None and existing.is_profiled:
            existing.add_song(notable)
            return

        cache_key = str(credit.id)
        cached: Producer | None = await self._caches.producer_profiles.get(cache_key)
        if cached is not None:
            self._install(cached.model_copy(deep=True), notable, run)
            return

        try:
            profile = await self._provider.get_artist(credit.id)
        except Exception as exc:
            self._logger.warning(
                "producer_profile_failed",
                producer_id=credit.id,
                producer=credit.name,
                error=str(exc),
            )
            run.failures.append(
                AggregationFailure(
                    scope=FailureScope.PRODUCER,
                    identifier=credit.id,
                    message=str(exc),
                )
            )
            current = run.producers.get(credit.id)
            if current is None:
                self._install(_degraded_record(credit), notable, run)
            else:
                current.add_song(notable)
        else:
            record = _profiled_record(credit, profile)
            await self._caches.producer_profiles.set(cache_key, record.model_copy(deep=True))
            self._install(record, notable, run)

        if self._profile_delay > 0:
            await asyncio.sleep(self._profile_delay)

    @staticmethod
    def _install(record: Producer, notable: NotableSong, run: _Run) -> None:
        """Put *record* in the run map, keeping songs already merged for its id.

        Two tasks in one batch can resolve the same producer concurrently;
        whichever installs second inherits the songs of the first.
        """
        current = run.producers.get(record.id)
        if current is not None and current is not record:
            for song in current.notable_songs:
                record.add_song(song)
        record.add_song(notable)
        run.producers[record.id] = record


def _profiled_record(credit: Artist, profile: Artist) -> Producer:
    """Build a song-free producer record from a credit and its full profile."""
    return Producer(
        id=credit.id,
        name=credit.name,
        image_url=sanitize_image_url(profile.image_url) or sanitize_image_url(credit.image_url),
        instagram_name=profile.instagram_name or credit.instagram_name,
        twitter_name=profile.twitter_name or credit.twitter_name,
        profile_url=profile.url,
        bio=profile.bio_text,
    )


def _degraded_record(credit: Artist) -> Producer:
    """Build a producer record from inline credit fields only."""
    return Producer(
        id=credit.id,
        name=credit.name,
        image_url=sanitize_image_url(credit.image_url),
    )
