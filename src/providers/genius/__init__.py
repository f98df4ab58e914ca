"""Genius API adapter.

Three layers, leaves first:

    GeniusTransport   -- one authenticated GET, outcome classified, no retries
    RetryPolicy       -- bounded retry with per-outcome backoff
    GeniusProvider    -- endpoint construction and payload parsing
                        (implements IMusicMetadataProvider)
"""

from src.providers.genius.genius_provider import GeniusProvider
from src.providers.genius.retry import RetryPolicy
from src.providers.genius.transport import GeniusTransport, TransportResult, TransportStatus

__all__ = [
    "GeniusProvider",
    "GeniusTransport",
    "RetryPolicy",
    "TransportResult",
    "TransportStatus",
]
