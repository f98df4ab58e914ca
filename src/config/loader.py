"""YAML configuration loader with environment variable overrides.

Configuration is loaded in layers (later layers override earlier):

  1. config/config.yaml  -- engine tuning defaults checked into the repo
  2. .env file           -- local developer overrides (not committed)
  3. Environment vars    -- set at deploy time

``load_config`` reads the YAML file first, then deep-merges the
environment-derived values from :class:`Settings` on top.  Sections that
the YAML file omits fall back to :data:`DEFAULT_CONFIG`, so a missing file
reproduces the built-in engine behaviour exactly.
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any

import yaml

from src.config.settings import Settings
from src.utils.errors import ConfigurationError

DEFAULT_CONFIG: dict[str, Any] = {
    "engine": {
        "page_size": 50,
        "max_pages": 5,
        "batch_size": 5,
        "batch_delay_seconds": 0.5,
        "profile_delay_seconds": 0.3,
    },
    "retry": {
        "max_retries": 3,
        "rate_limit_delay_seconds": 5.0,
        "base_delay_seconds": 1.0,
    },
    "cache": {
        "ttl_seconds": 24 * 60 * 60,
    },
}


def load_config(path: str = "config/config.yaml", settings: Settings | None = None) -> dict:
    """Load YAML config and merge with environment-based Settings.

    Args:
        path: Path to the YAML configuration file.
        settings: Pre-built settings; a fresh ``Settings()`` is read otherwise.

    Returns:
        Fully resolved configuration dictionary.

    Raises:
        ConfigurationError: If the YAML file exists but is not a mapping.
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    config_path = Path(path)
    if config_path.exists():
        with open(config_path) as f:
            yaml_config = yaml.safe_load(f) or {}
        if not isinstance(yaml_config, dict):
            raise ConfigurationError(
                message=f"Configuration file {path} must contain a mapping",
            )
        _deep_merge(config, yaml_config)

    settings = settings or Settings()
    env_overrides: dict[str, Any] = {
        "app": {
            "host": settings.app_host,
            "port": settings.app_port,
            "env": settings.app_env,
        },
        "genius": {
            "api_base": settings.genius_api_base,
            "request_timeout": settings.genius_request_timeout,
            "configured": settings.is_genius_configured(),
        },
        "logging": {
            "level": settings.log_level,
            "debug_timers": settings.debug_timers,
        },
    }
    # Keys the YAML also carries: only an explicitly set value overrides it.
    if "genius_max_retries" in settings.model_fields_set:
        env_overrides["retry"] = {"max_retries": settings.genius_max_retries}
    if "cache_ttl_seconds" in settings.model_fields_set:
        env_overrides["cache"] = {"ttl_seconds": settings.cache_ttl_seconds}

    _deep_merge(config, env_overrides)
    return config


def _deep_merge(base: dict, overrides: dict) -> None:
    """Recursively merge overrides into base dict, mutating base in place."""
    for key, value in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
