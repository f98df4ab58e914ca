"""Public interface definitions for external service providers.

The aggregation engine reaches the upstream API and its caches only through
the abstract base classes defined here.  Concrete adapters live in
``src/providers/`` and are wired together in ``src/main.py``; tests inject
fakes or fresh instances instead.

CONCRETE PROVIDER MAP:
    Interface                  →  Concrete implementations (in src/providers/)
    ─────────────────────────────────────────────────────────────────────
    IMusicMetadataProvider     →  GeniusProvider
    ICacheProvider             →  MemoryCacheProvider
"""

from src.interfaces.cache_provider import ICacheProvider
from src.interfaces.music_metadata_provider import IMusicMetadataProvider

__all__ = [
    "ICacheProvider",
    "IMusicMetadataProvider",
]
