"""HTTP middleware: CORS, per-request log context, and error mapping.

``RequestContextMiddleware`` binds a request id into structlog's context
variables, so every log line emitted while serving a search (each
``genius_request``, ``producer_profile_failed`` and so on) carries the id
of the HTTP request that caused it.  The id is echoed back in the
``X-Request-ID`` response header.

``ErrorHandlingMiddleware`` turns any ``ProducerConnectError`` that escapes
a route into a JSON ``ErrorResponse`` with a status from :func:`status_for`.

main.py adds ErrorHandlingMiddleware first, so the context middleware is
outermost and its ``http_request`` line records the final status code.
"""

from __future__ import annotations

import time
import uuid

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from src.api.schemas import ErrorResponse
from src.utils.errors import ArtistNotFoundError, ProducerConnectError, UpstreamError
from src.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def configure_cors(app: FastAPI, *, allowed_origins: list[str] | None = None) -> None:
    """Allow browser clients to call the API.

    The API is read-only apart from cache clearing and uses no cookies, so
    every origin is allowed unless *allowed_origins* narrows it.
    """
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins or ["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Bind a request id to the log context and log one line per request."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:12]
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        started = time.perf_counter()
        status = 500
        try:
            response = await call_next(request)
            status = response.status_code
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            _logger.info(
                "http_request",
                method=request.method,
                path=request.url.path,
                query=request.url.query or None,
                status=status,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            structlog.contextvars.unbind_contextvars("request_id")


def status_for(exc: ProducerConnectError) -> int:
    """Map an application error onto an HTTP status code."""
    if isinstance(exc, ArtistNotFoundError):
        return 404
    if isinstance(exc, UpstreamError):
        return 502
    return 500


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Render escaped ``ProducerConnectError``s as JSON.

    Clients get the error class and message only.  Anything that is not a
    ``ProducerConnectError`` is left to FastAPI's default 500 handler.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        try:
            return await call_next(request)
        except ProducerConnectError as exc:
            status = status_for(exc)
            _logger.error(
                "application_error",
                error_type=type(exc).__name__,
                message=exc.message,
                provider=exc.provider_name,
                status=status,
            )
            body = ErrorResponse(error=type(exc).__name__, detail=exc.message)
            return JSONResponse(status_code=status, content=body.model_dump())
