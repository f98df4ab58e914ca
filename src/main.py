"""producer-connect FastAPI application entry point.

Wires together the provider, caches and services via dependency injection.
Loads configuration from ``.env`` and ``config/config.yaml``, configures
structured logging and timers, and exposes the API router.

``build_components`` is shared with the CLI so both entry points run the
exact same engine.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import httpx
import structlog
import uvicorn
from fastapi import FastAPI

from src.api.middleware import (
    ErrorHandlingMiddleware,
    RequestContextMiddleware,
    configure_cors,
)
from src.api.routes import router as api_router
from src.config.loader import load_config
from src.config.settings import Settings
from src.providers.cache.registry import CacheRegistry
from src.providers.genius.genius_provider import GeniusProvider
from src.providers.genius.retry import RetryPolicy
from src.providers.genius.transport import GeniusTransport
from src.services.artist_catalog import ArtistCatalogService
from src.services.producer_aggregator import ProducerAggregator
from src.services.producer_search_service import ProducerSearchService
from src.utils.logging import configure_logging, get_logger
from src.utils.timing import configure_timers

# ---------------------------------------------------------------------------
# Module-level settings & logging
# ---------------------------------------------------------------------------

settings = Settings()
config = load_config(settings=settings)

configure_logging(
    log_level=settings.log_level,
    json_output=(settings.app_env == "production"),
)
configure_timers(settings.debug_timers)
_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# DI assembly
# ---------------------------------------------------------------------------


def build_components(
    app_settings: Settings,
    app_config: dict[str, Any],
    http_client: httpx.AsyncClient | None = None,
) -> dict[str, Any]:
    """Construct every provider and service instance for the application.

    The four caches are created here, once per process, and injected into
    the services.  Returns a flat dict of named components to be stored on
    ``app.state``.
    """
    engine = app_config["engine"]
    retry = app_config["retry"]

    if http_client is None:
        http_client = httpx.AsyncClient(timeout=app_settings.genius_request_timeout)

    transport = GeniusTransport(
        http_client,
        access_token=app_settings.genius_access_token,
        base_url=app_settings.genius_api_base,
        timeout=app_settings.genius_request_timeout,
    )
    retry_policy = RetryPolicy(
        transport,
        max_retries=retry["max_retries"],
        rate_limit_delay=retry["rate_limit_delay_seconds"],
        base_delay=retry["base_delay_seconds"],
    )
    provider = GeniusProvider(app_settings, http_client, retry_policy=retry_policy)

    caches = CacheRegistry.in_memory(ttl=app_config["cache"]["ttl_seconds"])

    catalog = ArtistCatalogService(
        provider,
        caches,
        page_size=engine["page_size"],
        max_pages=engine["max_pages"],
    )
    aggregator = ProducerAggregator(
        provider,
        caches,
        batch_size=engine["batch_size"],
        batch_delay=engine["batch_delay_seconds"],
        profile_delay=engine["profile_delay_seconds"],
    )

    return {
        "http_client": http_client,
        "provider": provider,
        "caches": caches,
        "catalog": catalog,
        "aggregator": aggregator,
        "search_service": ProducerSearchService(catalog, aggregator),
        "upstream_configured": provider.is_available(),
    }


# ---------------------------------------------------------------------------
# Application lifespan (startup / shutdown)
# ---------------------------------------------------------------------------


@asynccontextmanager
async def _lifespan(application: FastAPI):  # noqa: ANN201
    """Build all components on startup, close the HTTP client on shutdown."""
    components = build_components(settings, config)

    for key, value in components.items():
        setattr(application.state, key, value)

    if not components["upstream_configured"]:
        _logger.warning("genius_token_missing", hint="set GENIUS_ACCESS_TOKEN")

    _logger.info(
        "app_startup",
        version="0.1.0",
        environment=settings.app_env,
        debug_timers=settings.debug_timers,
    )

    yield

    http_client: httpx.AsyncClient = components["http_client"]
    await http_client.aclose()
    _logger.info("app_shutdown", message="HTTP client closed")


# ---------------------------------------------------------------------------
# FastAPI application factory
# ---------------------------------------------------------------------------


def create_app() -> FastAPI:
    """Build and configure the FastAPI application."""
    application = FastAPI(
        title="producer-connect API",
        version="0.1.0",
        description=(
            "Search for an artist and find the producers credited on their "
            "songs, enriched with each producer's profile and notable songs."
        ),
        lifespan=_lifespan,
    )

    # Order matters: last added = first executed.
    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(RequestContextMiddleware)
    configure_cors(application)

    application.include_router(api_router)
    return application


app = create_app()

# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    uvicorn.run(
        "src.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=(settings.app_env == "development"),
    )
