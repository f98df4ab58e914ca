"""producer-connect API layer -- routes, schemas, and middleware."""

from src.api.middleware import (
    ErrorHandlingMiddleware,
    RequestContextMiddleware,
    configure_cors,
)
from src.api.routes import router
from src.api.schemas import (
    ArtistSummary,
    CacheClearResponse,
    ErrorResponse,
    HealthResponse,
    ProducerSearchResponse,
    SearchPerformance,
)

__all__ = [
    "ArtistSummary",
    "CacheClearResponse",
    "ErrorHandlingMiddleware",
    "ErrorResponse",
    "HealthResponse",
    "ProducerSearchResponse",
    "RequestContextMiddleware",
    "SearchPerformance",
    "configure_cors",
    "router",
]
