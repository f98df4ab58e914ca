"""Single-request transport for the Genius REST API.

``GeniusTransport.request`` issues exactly one GET and classifies what
came back; it never retries and never raises for upstream trouble.  The
classification drives :class:`~src.providers.genius.retry.RetryPolicy`:

    2xx + JSON object     -> SUCCESS
    429                   -> RATE_LIMITED
    5xx                   -> SERVER_ERROR
    other non-2xx         -> CLIENT_ERROR (message from ``error`` or ``meta.message``)
    httpx error / bad body -> NETWORK_ERROR
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

import httpx

from src.utils.logging import get_logger
from src.utils.timing import timers

_API_BASE = "https://api.genius.com"
_DEFAULT_TIMEOUT = 15.0
_UNKNOWN_ERROR = "Unknown API Error"


class TransportStatus(str, Enum):  # noqa: UP042 -- StrEnum requires Python 3.11+
    """Outcome classes of a single upstream request."""

    SUCCESS = "SUCCESS"
    RATE_LIMITED = "RATE_LIMITED"
    SERVER_ERROR = "SERVER_ERROR"
    CLIENT_ERROR = "CLIENT_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"


@dataclass(frozen=True)
class TransportResult:
    """The classified outcome of one request.

    Attributes
    ----------
    status:
        Outcome class.
    payload:
        Decoded JSON body; only set for ``SUCCESS``.
    message:
        Error description for every non-success outcome.
    status_code:
        HTTP status, or ``None`` when no response was received.
    """

    status: TransportStatus
    payload: dict[str, Any] | None = None
    message: str | None = None
    status_code: int | None = None

    @property
    def ok(self) -> bool:
        return self.status is TransportStatus.SUCCESS


class GeniusTransport:
    """Issues authenticated GET requests against the Genius API.

    Parameters
    ----------
    http_client:
        Injected ``httpx.AsyncClient`` for testability and connection pooling.
    access_token:
        Static bearer credential attached to every request.
    base_url:
        API root, without a trailing slash.
    timeout:
        Per-request timeout in seconds.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        access_token: str,
        base_url: str = _API_BASE,
        timeout: float = _DEFAULT_TIMEOUT,
    ) -> None:
        self._http = http_client
        self._access_token = access_token
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._logger = get_logger(__name__)

    async def request(self, endpoint: str, attempt: int = 0) -> TransportResult:
        """Perform one GET of *endpoint* (path plus query string).

        *attempt* is the 0-based retry counter supplied by the caller; it is
        only used for logging.
        """
        headers = {
            "Authorization": f"Bearer {self._access_token}",
            "Accept": "application/json",
        }
        self._logger.info("genius_request", endpoint=endpoint, attempt=attempt + 1)

        with timers.measure(f"API:{endpoint.split('?')[0]}"):
            try:
                response = await self._http.get(
                    f"{self._base_url}{endpoint}",
                    headers=headers,
                    timeout=self._timeout,
                    follow_redirects=True,
                )
            except httpx.HTTPError as exc:
                return TransportResult(
                    status=TransportStatus.NETWORK_ERROR,
                    message=str(exc) or type(exc).__name__,
                )

        return self._classify(response)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _classify(response: httpx.Response) -> TransportResult:
        status_code = response.status_code

        if response.is_success:
            try:
                data = response.json()
            except ValueError as exc:
                return TransportResult(
                    status=TransportStatus.NETWORK_ERROR,
                    message=f"Unreadable response body: {exc}",
                    status_code=status_code,
                )
            if not isinstance(data, dict):
                return TransportResult(
                    status=TransportStatus.NETWORK_ERROR,
                    message="Response body is not a JSON object",
                    status_code=status_code,
                )
            return TransportResult(
                status=TransportStatus.SUCCESS,
                payload=data,
                status_code=status_code,
            )

        message = _error_message(response)
        if status_code == 429:
            status = TransportStatus.RATE_LIMITED
        elif status_code >= 500:
            status = TransportStatus.SERVER_ERROR
        else:
            status = TransportStatus.CLIENT_ERROR
        return TransportResult(status=status, message=message, status_code=status_code)


def _error_message(response: httpx.Response) -> str:
    """Pull the upstream's error text out of an error response."""
    try:
        data = response.json()
    except ValueError:
        return _UNKNOWN_ERROR
    if not isinstance(data, dict):
        return _UNKNOWN_ERROR
    if data.get("error"):
        description = data.get("error_description")
        return f"{data['error']}: {description}" if description else str(data["error"])
    meta = data.get("meta")
    if isinstance(meta, dict) and meta.get("message"):
        return str(meta["message"])
    return _UNKNOWN_ERROR
