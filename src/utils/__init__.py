"""Utility modules for producer-connect.

- **errors** -- Domain-specific exception hierarchy rooted at
  ProducerConnectError; the upstream branch mirrors how the retry policy
  classifies responses (rate limited, server error, network, client).
- **concurrency** -- Sequential batches with concurrent items, used to keep
  outstanding upstream requests bounded.
- **logging** -- structlog setup with a dual-renderer pattern: coloured
  console output in development, structured JSON in production.
- **timing** -- Named timers whose log lines are gated by ``DEBUG_TIMERS``.
"""

# -- Domain exception hierarchy --------------------------------------------
from src.utils.errors import (
    ArtistNotFoundError,
    ConfigurationError,
    NetworkError,
    ProducerConnectError,
    RateLimitError,
    UpstreamClientError,
    UpstreamError,
    UpstreamServerError,
)

# -- Async concurrency helpers ---------------------------------------------
from src.utils.concurrency import chunked, gather_in_batches

# -- Structured logging setup ----------------------------------------------
from src.utils.logging import configure_logging, get_logger

# -- Named timers -----------------------------------------------------------
from src.utils.timing import TimerRegistry, configure_timers, timers

__all__ = [
    "ArtistNotFoundError",
    "ConfigurationError",
    "NetworkError",
    "ProducerConnectError",
    "RateLimitError",
    "TimerRegistry",
    "UpstreamClientError",
    "UpstreamError",
    "UpstreamServerError",
    "chunked",
    "configure_logging",
    "configure_timers",
    "gather_in_batches",
    "get_logger",
    "timers",
]
