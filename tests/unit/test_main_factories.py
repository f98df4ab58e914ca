"""Unit tests for component assembly in src.main."""

from __future__ import annotations

import copy
from unittest.mock import MagicMock

import httpx

from src.config.loader import DEFAULT_CONFIG
from src.config.settings import Settings
from src.main import build_components, create_app
from src.providers.cache.registry import CacheRegistry
from src.providers.genius.genius_provider import GeniusProvider
from src.services.producer_search_service import ProducerSearchService


def _config(**engine) -> dict:
    config = copy.deepcopy(DEFAULT_CONFIG)
    config["engine"].update(engine)
    return config


class TestBuildComponents:
    def test_wires_every_component(self) -> None:
        client = MagicMock(spec=httpx.AsyncClient)
        components = build_components(
            Settings(_env_file=None, genius_access_token="t"), _config(), http_client=client
        )

        assert components["http_client"] is client
        assert isinstance(components["provider"], GeniusProvider)
        assert isinstance(components["caches"], CacheRegistry)
        assert isinstance(components["search_service"], ProducerSearchService)
        assert components["upstream_configured"] is True

    def test_engine_settings_applied(self) -> None:
        components = build_components(
            Settings(_env_file=None),
            _config(page_size=20, max_pages=2),
            http_client=MagicMock(spec=httpx.AsyncClient),
        )
        assert components["catalog"].max_songs == 40

    def test_unconfigured_token(self) -> None:
        components = build_components(
            Settings(_env_file=None, genius_access_token=""),
            _config(),
            http_client=MagicMock(spec=httpx.AsyncClient),
        )
        assert components["upstream_configured"] is False

    def test_caches_ttl_from_config(self) -> None:
        config = _config()
        config["cache"]["ttl_seconds"] = 60
        components = build_components(
            Settings(_env_file=None), config, http_client=MagicMock(spec=httpx.AsyncClient)
        )
        assert all(cache.ttl == 60 for cache in components["caches"].all())


def test_create_app_registers_routes() -> None:
    paths = set(create_app().openapi()["paths"])
    assert {"/api/v1/search", "/api/v1/health", "/api/v1/cache/clear"} <= paths
