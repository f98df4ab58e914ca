"""Bounded retry around :class:`~src.providers.genius.transport.GeniusTransport`.

This is the only place retry and backoff live; everything above it calls
through :meth:`RetryPolicy.execute` and never retries on its own.

    RATE_LIMITED   -> wait ``rate_limit_delay`` (fixed), retry
    SERVER_ERROR   -> wait ``base_delay * 2**attempt``, retry
    NETWORK_ERROR  -> wait ``base_delay * 2**attempt``, retry
    CLIENT_ERROR   -> raise UpstreamClientError immediately

After ``max_retries`` retries (``max_retries + 1`` requests in total) the
last retryable outcome is raised as its matching error class.
"""

from __future__ import annotations

import asyncio
from typing import Any, Protocol

from src.providers.genius.transport import TransportResult, TransportStatus
from src.utils.errors import (
    NetworkError,
    RateLimitError,
    UpstreamClientError,
    UpstreamError,
    UpstreamServerError,
)
from src.utils.logging import get_logger

_MAX_RETRIES = 3
_RATE_LIMIT_DELAY = 5.0  # seconds
_BASE_DELAY = 1.0  # seconds, doubled per attempt

_ERROR_CLASSES: dict[TransportStatus, type[UpstreamError]] = {
    TransportStatus.RATE_LIMITED: RateLimitError,
    TransportStatus.SERVER_ERROR: UpstreamServerError,
    TransportStatus.NETWORK_ERROR: NetworkError,
    TransportStatus.CLIENT_ERROR: UpstreamClientError,
}


class Transport(Protocol):
    async def request(self, endpoint: str, attempt: int = 0) -> TransportResult: ...


class RetryPolicy:
    """Retries retryable transport outcomes with per-class backoff.

    Parameters
    ----------
    transport:
        Anything with an async ``request(endpoint, attempt)`` method.
    max_retries:
        Retries after the first request.
    rate_limit_delay:
        Fixed wait in seconds after a 429.
    base_delay:
        Base of the exponential backoff for server and network errors.
    provider_name:
        Attached to raised errors.
    """

    def __init__(
        self,
        transport: Transport,
        max_retries: int = _MAX_RETRIES,
        rate_limit_delay: float = _RATE_LIMIT_DELAY,
        base_delay: float = _BASE_DELAY,
        provider_name: str = "genius",
    ) -> None:
        self._transport = transport
        self._max_retries = max_retries
        self._rate_limit_delay = rate_limit_delay
        self._base_delay = base_delay
        self._provider_name = provider_name
        self._logger = get_logger(__name__)

    @property
    def max_retries(self) -> int:
        return self._max_retries

    def delay_for(self, status: TransportStatus, attempt: int) -> float:
        """Seconds to wait before retrying after *status* on 0-based *attempt*."""
        if status is TransportStatus.RATE_LIMITED:
            return self._rate_limit_delay
        return self._base_delay * (2**attempt)

    async def execute(self, endpoint: str) -> dict[str, Any]:
        """Request *endpoint* until it succeeds, fails fatally, or retries run out.

        Returns
        -------
        dict[str, Any]
            The decoded JSON body of the successful response, unchanged.

        Raises
        ------
        UpstreamClientError
            On a non-retryable 4xx, without retrying.
        RateLimitError, UpstreamServerError, NetworkError
            When the last allowed attempt still failed.
        """
        attempt = 0
        while True:
            result = await self._transport.request(endpoint, attempt)

            if result.ok:
                return result.payload or {}

            if result.status is TransportStatus.CLIENT_ERROR:
                self._logger.error(
                    "genius_client_error",
                    endpoint=endpoint,
                    status=result.status_code,
                    message=result.message,
                    attempt=attempt + 1,
                )
                raise self._to_error(result, attempt + 1)

            if attempt >= self._max_retries:
                self._logger.error(
                    "genius_retries_exhausted",
                    endpoint=endpoint,
                    outcome=result.status.value,
                    status=result.status_code,
                    message=result.message,
                    attempts=attempt + 1,
                )
                raise self._to_error(result, attempt + 1)

            delay = self.delay_for(result.status, attempt)
            self._logger.warning(
                "genius_retry_scheduled",
                endpoint=endpoint,
                outcome=result.status.value,
                status=result.status_code,
                attempt=attempt + 1,
                delay_s=delay,
            )
            await asyncio.sleep(delay)
            attempt += 1

    def _to_error(self, result: TransportResult, attempts: int) -> UpstreamError:
        error_class = _ERROR_CLASSES[result.status]
        return error_class(
            message=f"Genius API Error: {result.message or 'Unknown API Error'}",
            provider_name=self._provider_name,
            status_code=result.status_code,
            attempts=attempts,
        )
