"""Pydantic request/response schemas for the producer-connect API.

Defines the public contract for the REST endpoints: producer search, health
and cache maintenance.  FastAPI uses these models for validation,
serialization and the generated OpenAPI docs.

Convention: response schemas end with "Response".
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from src.models.entities import Artist, Producer


class ArtistSummary(BaseModel):
    """The artist a search resolved to."""

    id: int
    name: str
    image_url: str | None = None

    @classmethod
    def from_artist(cls, artist: Artist) -> ArtistSummary:
        return cls(id=artist.id, name=artist.name, image_url=artist.image_url)


class SearchPerformance(BaseModel):
    """Timing and volume figures for one search."""

    total_time_ms: float
    song_count: int
    producer_count: int
    failure_count: int = 0
    complete: bool = True


class ProducerSearchResponse(BaseModel):
    """Response for ``GET /api/v1/search``."""

    artist: ArtistSummary
    producers: list[Producer] = Field(default_factory=list)
    performance: SearchPerformance


class HealthResponse(BaseModel):
    """Application health check response."""

    status: str
    version: str
    upstream_configured: bool
    caches: dict[str, int] = Field(default_factory=dict)


class CacheClearResponse(BaseModel):
    """Response after clearing every cache."""

    cleared: list[str]


class ErrorResponse(BaseModel):
    """Standard error response body."""

    error: str
    detail: str | None = None
