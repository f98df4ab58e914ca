"""Unit tests for the command-line producer search (src.cli.search)."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from src.cli.search import _build_parser, format_json, format_text, main
from src.models.aggregation import AggregationFailure, FailureScope
from src.models.entities import NotableSong, Producer
from src.services.producer_search_service import ProducerSearchResult, ProducerSearchService
from src.utils.errors import ArtistNotFoundError, UpstreamServerError
from tests.factories import make_artist


def _result(**overrides) -> ProducerSearchResult:
    songs = [
        NotableSong(title=title, artist="Frank Ocean")
        for title in ("Nikes", "Ivy", "Solo", "Self Control")
    ]
    defaults = {
        "artist": make_artist(1, "Frank Ocean"),
        "producers": [
            Producer(
                id=3,
                name="Malay",
                profile_url="https://genius.com/artists/Malay",
                notable_songs=songs,
            ),
            Producer(id=4, name="Buddy Ross", notable_songs=songs[:1]),
        ],
        "song_count": 40,
        "duration_ms": 1234.5,
    }
    defaults.update(overrides)
    return ProducerSearchResult(**defaults)


def _components(search: AsyncMock) -> dict:
    service = MagicMock(spec=ProducerSearchService)
    service.search = search
    http_client = MagicMock()
    http_client.aclose = AsyncMock()
    return {
        "search_service": service,
        "http_client": http_client,
        "upstream_configured": True,
    }


# ======================================================================
# Formatting
# ======================================================================


class TestFormatText:
    def test_header_and_ranked_lines(self) -> None:
        text = format_text(_result())
        assert "Producers for Frank Ocean" in text
        assert "40 songs scanned, 2 producers found" in text
        assert " 1. Malay (4 songs)" in text
        assert " 2. Buddy Ross (1 song)" in text
        assert "https://genius.com/artists/Malay" in text

    def test_song_preview_truncated(self) -> None:
        text = format_text(_result())
        assert "Nikes (Frank Ocean), Ivy (Frank Ocean), Solo (Frank Ocean), +1 more" in text

    def test_limit(self) -> None:
        text = format_text(_result(), limit=1)
        assert "Malay" in text
        assert "Buddy Ross" not in text

    def test_no_producers(self) -> None:
        assert "No producer credits found." in format_text(_result(producers=[]))

    def test_failures_noted(self) -> None:
        failure = AggregationFailure(scope=FailureScope.SONG, identifier=9, message="x")
        assert "1 lookups failed" in format_text(_result(failures=[failure]))


class TestFormatJson:
    def test_shape_matches_api(self) -> None:
        data = json.loads(format_json(_result()))
        assert data["artist"]["name"] == "Frank Ocean"
        assert [p["name"] for p in data["producers"]] == ["Malay", "Buddy Ross"]
        assert data["performance"]["song_count"] == 40
        assert data["performance"]["producer_count"] == 2
        assert data["performance"]["complete"] is True

    def test_limit(self) -> None:
        data = json.loads(format_json(_result(), limit=1))
        assert len(data["producers"]) == 1


# ======================================================================
# Argument parsing and main()
# ======================================================================


class TestParser:
    def test_defaults(self) -> None:
        args = _build_parser().parse_args(["Frank Ocean"])
        assert args.artist == "Frank Ocean"
        assert args.json_output is False
        assert args.limit is None
        assert args.output is None

    def test_flags(self) -> None:
        args = _build_parser().parse_args(["X", "--json", "-n", "5", "-o", "out.json", "-q"])
        assert args.json_output is True
        assert args.limit == 5
        assert args.output == "out.json"
        assert args.quiet is True


class TestMain:
    @pytest.fixture(autouse=True)
    def route_logs(self):
        with patch("src.cli.search._route_logs") as mock:
            yield mock

    def test_blank_artist_rejected(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["   "]) == 1
        assert "Search query is required" in capsys.readouterr().err

    def test_invalid_limit_rejected(self) -> None:
        assert main(["Frank Ocean", "--limit", "0"]) == 1

    def test_text_report(self, capsys: pytest.CaptureFixture[str]) -> None:
        search = AsyncMock(return_value=_result())
        components = _components(search)

        with patch("src.main.build_components", return_value=components):
            code = main(["  Frank Ocean "])

        assert code == 0
        search.assert_awaited_once_with("Frank Ocean")
        components["http_client"].aclose.assert_awaited_once()
        assert "1. Malay" in capsys.readouterr().out

    def test_json_report(
        self, capsys: pytest.CaptureFixture[str], route_logs: MagicMock
    ) -> None:
        components = _components(AsyncMock(return_value=_result()))

        with patch("src.main.build_components", return_value=components):
            code = main(["Frank Ocean", "--json"])

        assert code == 0
        route_logs.assert_called_once_with("WARNING")
        assert json.loads(capsys.readouterr().out)["artist"]["id"] == 1

    def test_output_file(self, tmp_path: Path) -> None:
        out = tmp_path / "producers.txt"
        components = _components(AsyncMock(return_value=_result()))

        with patch("src.main.build_components", return_value=components):
            assert main(["Frank Ocean", "-o", str(out)]) == 0

        assert "Malay" in out.read_text(encoding="utf-8")

    def test_artist_not_found(self, capsys: pytest.CaptureFixture[str]) -> None:
        components = _components(AsyncMock(side_effect=ArtistNotFoundError()))

        with patch("src.main.build_components", return_value=components):
            assert main(["zzzz"]) == 1

        assert "No artists found" in capsys.readouterr().err
        components["http_client"].aclose.assert_awaited_once()

    def test_upstream_failure(self, capsys: pytest.CaptureFixture[str]) -> None:
        components = _components(AsyncMock(side_effect=UpstreamServerError(message="down")))

        with patch("src.main.build_components", return_value=components):
            assert main(["Frank Ocean"]) == 2

        assert "Failed to search for producers" in capsys.readouterr().err
