"""Core domain entities for the producer aggregation engine.

Defines Pydantic v2 models for the upstream records (artists, songs, credit
groups) and for the engine's output entity, :class:`Producer`.

Upstream records are frozen: once parsed from an API payload they never
change, and their identity is the upstream-assigned ``id``.  ``Producer`` is
the one mutable model -- songs are appended to it while an aggregation run
is in progress -- so any record that leaves the aggregator (or comes out of
a cache) must be copied before it is mutated again.

Key relationships:
    - Song has one primary Artist and zero or more producer credits
    - Song may carry extra CreditGroup entries ("Co-Producer", "Mixing", ...)
    - Producer is built from an Artist credit plus the Artist's full profile
    - Producer.notable_songs holds NotableSong summaries of crediting songs
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Upstream records
# ---------------------------------------------------------------------------

class Artist(BaseModel):
    """An artist as returned by the upstream API.

    Appears as a song's primary artist, inside credit lists, and as the
    full profile returned by the artist-details endpoint (only the profile
    carries ``bio_text``).
    """

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    image_url: str | None = None
    instagram_name: str | None = None
    twitter_name: str | None = None
    url: str | None = None              # Upstream profile page
    bio_text: str | None = None         # Plain-text description


class CreditGroup(BaseModel):
    """A labelled group of artists credited on a song (e.g. "Co-Producer")."""

    model_config = ConfigDict(frozen=True)

    label: str
    artists: list[Artist] = Field(default_factory=list)


class Song(BaseModel):
    """A song with its primary artist and (possibly empty) credits.

    Song-list pages frequently omit credits; the song-details payload is
    the authoritative source.  ``release_date`` is passed through as the
    upstream formats it and is never parsed.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    title: str
    primary_artist: Artist
    producer_credits: list[Artist] = Field(default_factory=list)
    additional_credit_groups: list[CreditGroup] = Field(default_factory=list)
    release_date: str | None = None


# ---------------------------------------------------------------------------
# Aggregation output
# ---------------------------------------------------------------------------

class NotableSong(BaseModel):
    """Summary of one song a producer is credited on."""

    model_config = ConfigDict(frozen=True)

    title: str
    artist: str                         # Primary artist name of the song
    release_date: str | None = None

    @classmethod
    def from_song(cls, song: Song) -> NotableSong:
        return cls(
            title=song.title,
            artist=song.primary_artist.name,
            release_date=song.release_date,
        )


class Producer(BaseModel):
    """A producer credited on one or more of the searched artist's songs.

    ``id`` is the underlying upstream Artist id.  A record with a
    ``profile_url`` was enriched from the producer's full profile; a record
    without one is a degraded record built from inline credit fields only.
    """

    id: int
    name: str
    image_url: str | None = None
    instagram_name: str | None = None
    twitter_name: str | None = None
    profile_url: str | None = None
    bio: str | None = None
    notable_songs: list[NotableSong] = Field(default_factory=list)

    @property
    def is_profiled(self) -> bool:
        return self.profile_url is not None

    def has_song_titled(self, title: str) -> bool:
        return any(song.title == title for song in self.notable_songs)

    def add_song(self, song: NotableSong) -> bool:
        """Append *song* unless a song with the same title is already listed.

        Returns ``True`` when the song was appended.
        """
        if self.has_song_titled(song.title):
            return False
        self.notable_songs.append(song)
        return True
