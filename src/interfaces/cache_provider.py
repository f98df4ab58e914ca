"""Abstract base class for cache service providers.

Defines the contract for the keyed, expiring stores the aggregation engine
consults before every upstream fetch (artist searches, song lists, song
details, producer profiles).  Implementations may use an in-memory map,
Redis, or any other backend; the engine only depends on this interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class ICacheProvider(ABC):
    """Contract for key-value cache services.

    All operations are async to allow for network-backed stores (e.g. Redis)
    without blocking the event loop.  A miss is signalled by ``None``, never
    by an exception.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable cache name, used only in log output."""

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        """Retrieve the value stored under *key*.

        Parameters
        ----------
        key:
            The cache key to look up.

        Returns
        -------
        Any or None
            The cached value if present and not expired; ``None`` otherwise.
            An expired entry is evicted by the same call.
        """

    @abstractmethod
    async def set(self, key: str, value: Any) -> None:
        """Store *value* under *key*, replacing any previous entry.

        The entry expires once the provider's TTL has elapsed.
        """

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove the entry stored under *key* (no-op if absent)."""

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """Return ``True`` if *key* is present in the cache and not expired."""

    @abstractmethod
    async def clear(self) -> None:
        """Remove every entry."""

    @abstractmethod
    def size(self) -> int:
        """Return the number of stored entries (expired ones may be counted)."""
