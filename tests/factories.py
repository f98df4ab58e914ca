"""Builders for the upstream records used across the test suite."""

from __future__ import annotations

from typing import Any

from src.models.entities import Artist, CreditGroup, Song


def make_artist(artist_id: int, name: str | None = None, **fields: Any) -> Artist:
    return Artist(id=artist_id, name=name or f"Artist {artist_id}", **fields)


def make_song(
    song_id: int,
    title: str | None = None,
    primary: Artist | None = None,
    producers: list[Artist] | None = None,
    groups: list[CreditGroup] | None = None,
    release_date: str | None = None,
) -> Song:
    return Song(
        id=song_id,
        title=title or f"Song {song_id}",
        primary_artist=primary or make_artist(1, "Frank Ocean"),
        producer_credits=producers or [],
        additional_credit_groups=groups or [],
        release_date=release_date,
    )


def make_profile(artist_id: int, name: str | None = None) -> Artist:
    """A full artist profile as returned by the artist-details endpoint."""
    return make_artist(
        artist_id,
        name,
        image_url=f"https://images.genius.com/{artist_id}.jpg",
        instagram_name=f"ig_{artist_id}",
        twitter_name=f"tw_{artist_id}",
        url=f"https://genius.com/artists/{artist_id}",
        bio_text=f"Bio of {artist_id}",
    )
