"""Application settings loaded from environment variables via pydantic-settings.

Settings are read from two sources, in priority order:

  1. Environment variables, e.g. ``GENIUS_ACCESS_TOKEN=abc123``
  2. A ``.env`` file in the working directory (local development only)

Field names map to upper-cased environment variables automatically.
Defaults apply when neither source provides a value.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """producer-connect application settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # === Upstream metadata API ===
    # Empty token = not configured; requests go out unauthenticated and the
    # upstream answers 401, which surfaces as a fatal client error.
    genius_access_token: str = ""
    genius_api_base: str = "https://api.genius.com"
    genius_request_timeout: float = 15.0  # seconds per request
    genius_max_retries: int = 3

    # === Caching ===
    cache_ttl_seconds: int = 24 * 60 * 60

    # === Observability ===
    debug_timers: bool = False
    log_level: str = "INFO"

    # === App Config ===
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_env: str = "development"

    def is_genius_configured(self) -> bool:
        """Return ``True`` when an upstream bearer token is configured."""
        return bool(self.genius_access_token.strip())
