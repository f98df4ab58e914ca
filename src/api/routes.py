"""FastAPI API routes for producer-connect.

Service dependencies are resolved from ``app.state`` via FastAPI's
``Depends`` using the ``Annotated`` pattern; ``src/main.py`` populates
``app.state`` at startup and tests populate it directly.

Endpoint                     Method  Description
─────────────────────────────────────────────────────────────────────
/api/v1/search?q=            GET     Find the producers behind an artist's songs
/api/v1/health               GET     Health check + cache sizes
/api/v1/cache/clear          POST    Drop every cached upstream response
"""

from __future__ import annotations

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, Request

from src.api.schemas import (
    ArtistSummary,
    CacheClearResponse,
    HealthResponse,
    ProducerSearchResponse,
    SearchPerformance,
)
from src.providers.cache.registry import CacheRegistry
from src.services.producer_search_service import ProducerSearchService
from src.utils.errors import ArtistNotFoundError, ProducerConnectError
from src.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

router = APIRouter(prefix="/api/v1")

_APP_VERSION = "0.1.0"
_SEARCH_FAILED = "Failed to search for producers"


# ---------------------------------------------------------------------------
# Dependency injection helpers -- resolve singletons from app.state
# ---------------------------------------------------------------------------


def _get_search_service(request: Request) -> ProducerSearchService:
    return request.app.state.search_service


def _get_caches(request: Request) -> CacheRegistry:
    return request.app.state.caches


def _get_upstream_configured(request: Request) -> bool:
    return bool(getattr(request.app.state, "upstream_configured", False))


SearchServiceDep = Annotated[ProducerSearchService, Depends(_get_search_service)]
CachesDep = Annotated[CacheRegistry, Depends(_get_caches)]


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@router.get(
    "/search",
    response_model=ProducerSearchResponse,
    summary="Find producers credited on an artist's songs",
)
async def search_producers(
    search_service: SearchServiceDep,
    q: Annotated[str | None, Query(description="Artist name to search for")] = None,
) -> ProducerSearchResponse:
    """Resolve *q* to an artist and return its producers, most prolific first."""
    query = (q or "").strip()
    if not query:
        _logger.info("search_missing_query")
        raise HTTPException(status_code=400, detail="Search query is required")

    try:
        result = await search_service.search(query)
    except ArtistNotFoundError as exc:
        raise HTTPException(status_code=404, detail="No artists found") from exc
    except ProducerConnectError as exc:
        _logger.error("search_failed", query=query, error=str(exc))
        raise HTTPException(status_code=500, detail=_SEARCH_FAILED) from exc

    return ProducerSearchResponse(
        artist=ArtistSummary.from_artist(result.artist),
        producers=result.producers,
        performance=SearchPerformance(
            total_time_ms=result.duration_ms,
            song_count=result.song_count,
            producer_count=result.producer_count,
            failure_count=len(result.failures),
            complete=result.complete,
        ),
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Application health check",
)
async def health_check(
    caches: CachesDep,
    upstream_configured: Annotated[bool, Depends(_get_upstream_configured)],
) -> HealthResponse:
    """Return application health, version, and cache entry counts."""
    return HealthResponse(
        status="ok",
        version=_APP_VERSION,
        upstream_configured=upstream_configured,
        caches=caches.sizes(),
    )


@router.post(
    "/cache/clear",
    response_model=CacheClearResponse,
    summary="Clear every upstream response cache",
)
async def clear_caches(caches: CachesDep) -> CacheClearResponse:
    await caches.clear_all()
    return CacheClearResponse(cleared=[cache.name for cache in caches.all()])
