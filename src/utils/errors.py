"""Custom exception hierarchy for producer-connect.

All application exceptions inherit from :class:`ProducerConnectError`, which
carries an optional ``provider_name`` so error handlers can identify which
external service (e.g. "genius") caused the failure.

The hierarchy is organized by how callers react to it:

    ProducerConnectError  (base -- catch-all for any producer-connect error)
    +-- UpstreamError            (any failed call to the metadata API)
    |   +-- RateLimitError       (HTTP 429, retried after a fixed pause)
    |   +-- UpstreamServerError  (HTTP 5xx, retried with exponential backoff)
    |   +-- NetworkError         (connection / timeout / unreadable body)
    |   +-- UpstreamClientError  (other 4xx, never retried)
    +-- ArtistNotFoundError      (search produced no artist)
    +-- ConfigurationError       (startup / missing config)

The retry policy is the only place that catches the retryable classes; by
the time an ``UpstreamError`` reaches a service it is final.
"""

from __future__ import annotations


class ProducerConnectError(Exception):
    """Base exception for all producer-connect errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name`` identifying which external service triggered the
    error.  The ``__str__`` method prefixes the provider name in brackets
    for structured log output, e.g. ``[genius] Rate limit exceeded``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Upstream API errors
# ---------------------------------------------------------------------------

class UpstreamError(ProducerConnectError):
    """Raised when a call to the upstream metadata API ultimately fails.

    ``status_code`` is the last HTTP status seen (``None`` for transport
    failures) and ``attempts`` is how many requests were issued before
    giving up.
    """

    retryable: bool = False

    def __init__(
        self,
        message: str = "Upstream API request failed",
        provider_name: str | None = None,
        status_code: int | None = None,
        attempts: int = 1,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
        self._status_code = status_code
        self._attempts = attempts

    @property
    def status_code(self) -> int | None:
        return self._status_code

    @property
    def attempts(self) -> int:
        return self._attempts


class RateLimitError(UpstreamError):
    """Raised when the upstream keeps answering 429 after every retry."""

    retryable = True

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        provider_name: str | None = None,
        status_code: int | None = 429,
        attempts: int = 1,
    ) -> None:
        super().__init__(message, provider_name, status_code, attempts)


class UpstreamServerError(UpstreamError):
    """Raised when the upstream keeps failing with 5xx after every retry."""

    retryable = True

    def __init__(
        self,
        message: str = "Upstream server error",
        provider_name: str | None = None,
        status_code: int | None = None,
        attempts: int = 1,
    ) -> None:
        super().__init__(message, provider_name, status_code, attempts)


class NetworkError(UpstreamError):
    """Raised when the request never produced a usable response."""

    retryable = True

    def __init__(
        self,
        message: str = "Network error while contacting upstream",
        provider_name: str | None = None,
        status_code: int | None = None,
        attempts: int = 1,
    ) -> None:
        super().__init__(message, provider_name, status_code, attempts)


class UpstreamClientError(UpstreamError):
    """Raised when the upstream rejects a request (malformed query, unknown id).

    Never retried: repeating the same request cannot change the answer.
    """

    def __init__(
        self,
        message: str = "Upstream rejected the request",
        provider_name: str | None = None,
        status_code: int | None = None,
        attempts: int = 1,
    ) -> None:
        super().__init__(message, provider_name, status_code, attempts)


# ---------------------------------------------------------------------------
# Search / configuration errors
# ---------------------------------------------------------------------------

class ArtistNotFoundError(ProducerConnectError):
    """Raised when an artist search yields no candidates."""

    def __init__(
        self,
        message: str = "No artists found",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ConfigurationError(ProducerConnectError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
