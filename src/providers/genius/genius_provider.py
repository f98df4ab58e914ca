"""Genius REST API provider implementing IMusicMetadataProvider.

Wraps :class:`GeniusTransport` in a :class:`RetryPolicy` and turns the
``response`` envelope of each endpoint into domain models:

    GET /search?q=                          -> list[Artist]  (song hits' primary artists)
    GET /artists/{id}/songs?page=&per_page=&sort= -> list[Song]
    GET /songs/{id}                         -> Song          (full credits)
    GET /artists/{id}?text_format=plain     -> Artist        (profile + bio)

Genius files producer credits inconsistently: song-list entries usually
carry none, and song details put them under ``producer_artists`` and/or a
``custom_performances`` group labelled "Co-Producer", "Additional
Production" and the like.  This provider maps both fields faithfully and
leaves the interpretation to the aggregator.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import urlencode

import httpx
from pydantic import ValidationError

from src.config.settings import Settings
from src.interfaces.music_metadata_provider import IMusicMetadataProvider
from src.models.entities import Artist, CreditGroup, Song
from src.providers.genius.retry import RetryPolicy
from src.providers.genius.transport import GeniusTransport
from src.utils.errors import UpstreamError
from src.utils.logging import get_logger

_PROVIDER_NAME = "genius"


class GeniusProvider(IMusicMetadataProvider):
    """Music-metadata provider backed by the Genius REST API.

    Parameters
    ----------
    settings:
        Supplies the bearer token, API root, timeout and retry bound.
    http_client:
        Shared ``httpx.AsyncClient``.
    retry_policy:
        Optional pre-built policy (tuned delays, or a fake transport in
        tests).  Built from *settings* when omitted.
    """

    def __init__(
        self,
        settings: Settings,
        http_client: httpx.AsyncClient,
        retry_policy: RetryPolicy | None = None,
    ) -> None:
        self._settings = settings
        if retry_policy is None:
            transport = GeniusTransport(
                http_client,
                access_token=settings.genius_access_token,
                base_url=settings.genius_api_base,
                timeout=settings.genius_request_timeout,
            )
            retry_policy = RetryPolicy(transport, max_retries=settings.genius_max_retries)
        self._retry = retry_policy
        self._logger = get_logger(__name__)

    # -- IMusicMetadataProvider implementation ---------------------------------

    async def search_artists(self, query: str) -> list[Artist]:
        data = await self._get(f"/search?{urlencode({'q': query})}")
        hits = _envelope(data, "hits", list)

        artists: list[Artist] = []
        seen: set[int] = set()
        for hit in hits:
            if not isinstance(hit, dict) or hit.get("type") != "song":
                continue
            result = hit.get("result")
            primary = result.get("primary_artist") if isinstance(result, dict) else None
            if not primary:
                continue
            artist = _parse_artist(primary)
            if artist.id in seen:
                continue
            seen.add(artist.id)
            artists.append(artist)

        self._logger.info("genius_search_complete", query=query, artist_count=len(artists))
        return artists

    async def get_artist_songs(
        self,
        artist_id: int,
        page: int = 1,
        per_page: int = 50,
        sort: str = "popularity",
    ) -> list[Song]:
        params = urlencode({"page": page, "per_page": per_page, "sort": sort})
        data = await self._get(f"/artists/{artist_id}/songs?{params}")
        return [_parse_song(item) for item in _envelope(data, "songs", list)]

    async def get_song(self, song_id: int) -> Song:
        data = await self._get(f"/songs/{song_id}")
        return _parse_song(_envelope(data, "song", dict))

    async def get_artist(self, artist_id: int) -> Artist:
        data = await self._get(f"/artists/{artist_id}?text_format=plain")
        return _parse_artist(_envelope(data, "artist", dict))

    def get_provider_name(self) -> str:
        return _PROVIDER_NAME

    def is_available(self) -> bool:
        return self._settings.is_genius_configured()

    # -- Private helpers -------------------------------------------------------

    async def _get(self, endpoint: str) -> dict[str, Any]:
        return await self._retry.execute(endpoint)


def _envelope(data: dict[str, Any], key: str, expected: type) -> Any:
    """Return ``data["response"][key]``, checking its type."""
    response = data.get("response")
    value = response.get(key) if isinstance(response, dict) else None
    if not isinstance(value, expected):
        raise UpstreamError(
            message=f"Malformed Genius payload: missing response.{key}",
            provider_name=_PROVIDER_NAME,
        )
    return value


def _parse_artist(data: dict[str, Any]) -> Artist:
    if not isinstance(data, dict):
        raise UpstreamError(
            message="Malformed Genius artist payload: expected an object",
            provider_name=_PROVIDER_NAME,
        )
    description = data.get("description")
    bio = description.get("plain") if isinstance(description, dict) else None
    try:
        return Artist(
            id=data["id"],
            name=data.get("name") or "",
            image_url=data.get("image_url"),
            instagram_name=data.get("instagram_name"),
            twitter_name=data.get("twitter_name"),
            url=data.get("url"),
            bio_text=bio or None,
        )
    except (KeyError, ValidationError) as exc:
        raise UpstreamError(
            message=f"Malformed Genius artist payload: {exc}",
            provider_name=_PROVIDER_NAME,
        ) from exc


def _parse_song(data: dict[str, Any]) -> Song:
    if not isinstance(data, dict) or not isinstance(data.get("primary_artist"), dict):
        raise UpstreamError(
            message="Malformed Genius song payload: missing primary_artist",
            provider_name=_PROVIDER_NAME,
        )
    groups = [
        CreditGroup(
            label=group.get("label") or "",
            artists=[_parse_artist(a) for a in group.get("artists") or []],
        )
        for group in data.get("custom_performances") or []
        if isinstance(group, dict)
    ]
    try:
        return Song(
            id=data["id"],
            title=data.get("title") or "",
            primary_artist=_parse_artist(data["primary_artist"]),
            producer_credits=[_parse_artist(a) for a in data.get("producer_artists") or []],
            additional_credit_groups=groups,
            release_date=data.get("release_date"),
        )
    except (KeyError, ValidationError) as exc:
        raise UpstreamError(
            message=f"Malformed Genius song payload: {exc}",
            provider_name=_PROVIDER_NAME,
        ) from exc
