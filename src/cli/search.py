"""Command-line producer search.

Usage::

    python -m src.cli "Frank Ocean"
    python -m src.cli "Frank Ocean" --json
    python -m src.cli "Frank Ocean" --limit 10 --output producers.txt

Runs the same engine as ``GET /api/v1/search`` (artist search, song
pagination, producer aggregation, ranking) and prints a text report or
JSON.  Progress messages go to stderr so stdout holds only the result.
Exit codes: 0 on success, 1 for usage errors or no artist, 2 when the
upstream could not be reached.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Sequence

from src.services.producer_search_service import ProducerSearchResult
from src.utils.errors import ArtistNotFoundError, ProducerConnectError
from src.utils.logging import configure_logging

_SONG_PREVIEW = 3


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_text(result: ProducerSearchResult, limit: int | None = None) -> str:
    """Format a search result as a human-readable report."""
    producers = result.producers[:limit] if limit else result.producers
    sep = "=" * 60

    lines = [
        sep,
        f"  Producers for {result.artist.name}",
        f"  {result.song_count} songs scanned, {result.producer_count} producers found",
        sep,
        "",
    ]

    if not producers:
        lines.append("No producer credits found.")

    for rank, producer in enumerate(producers, start=1):
        count = len(producer.notable_songs)
        lines.append(f"{rank:>2}. {producer.name} ({count} song{'s' if count != 1 else ''})")
        if producer.profile_url:
            lines.append(f"    {producer.profile_url}")
        preview = ", ".join(
            f"{song.title} ({song.artist})" for song in producer.notable_songs[:_SONG_PREVIEW]
        )
        if count > _SONG_PREVIEW:
            preview += f", +{count - _SONG_PREVIEW} more"
        lines.append(f"    {preview}")

    if result.failures:
        lines.append("")
        lines.append(f"Note: {len(result.failures)} lookups failed; results may be incomplete.")

    return "\n".join(lines)


def format_json(result: ProducerSearchResult, limit: int | None = None) -> str:
    """Format a search result as JSON, shaped like the API response."""
    producers = result.producers[:limit] if limit else result.producers
    payload = {
        "artist": {
            "id": result.artist.id,
            "name": result.artist.name,
            "image_url": result.artist.image_url,
        },
        "producers": [producer.model_dump() for producer in producers],
        "performance": {
            "total_time_ms": result.duration_ms,
            "song_count": result.song_count,
            "producer_count": result.producer_count,
            "failure_count": len(result.failures),
            "complete": result.complete,
        },
    }
    return json.dumps(payload, indent=2, ensure_ascii=False)


def _route_logs(level: str) -> None:
    """Send all log output to stderr so stdout carries only the report."""
    configure_logging(log_level=level, stream=sys.stderr)


async def _run(query: str, json_output: bool, output_file: str | None, limit: int | None) -> int:
    # Deferred import: src.main reads settings and configures logging.
    from src.main import build_components, config, settings

    components = build_components(settings, config)
    if not components["upstream_configured"]:
        print("Warning: GENIUS_ACCESS_TOKEN is not set.", file=sys.stderr)

    print(f"Searching producers for: {query}", file=sys.stderr)
    try:
        result = await components["search_service"].search(query)
    except ArtistNotFoundError:
        print(f"Error: No artists found for '{query}'", file=sys.stderr)
        return 1
    except ProducerConnectError as exc:
        print(f"Error: Failed to search for producers ({exc})", file=sys.stderr)
        return 2
    finally:
        await components["http_client"].aclose()

    print(f"Done in {result.duration_ms / 1000:.1f}s", file=sys.stderr)

    text = format_json(result, limit) if json_output else format_text(result, limit)
    if output_file:
        Path(output_file).write_text(text, encoding="utf-8")
        print(f"Results written to: {output_file}", file=sys.stderr)
    else:
        print(text)
    return 0


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m src.cli",
        description="Find the producers credited on an artist's songs.",
    )
    parser.add_argument("artist", type=str, help="Artist name to search for.")
    parser.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Output results as JSON instead of formatted text.",
    )
    parser.add_argument(
        "--limit", "-n",
        type=int,
        default=None,
        help="Show only the top N producers.",
    )
    parser.add_argument(
        "--output", "-o",
        type=str,
        default=None,
        help="Write results to a file instead of stdout.",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress log output (implied by --json).",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Parse arguments, run the search, and return the exit code."""
    args = _build_parser().parse_args(argv)

    query = args.artist.strip()
    if not query:
        print("Error: Search query is required", file=sys.stderr)
        return 1
    if args.limit is not None and args.limit < 1:
        print("Error: --limit must be at least 1", file=sys.stderr)
        return 1

    # src.main configures logging on import; reroute afterwards.
    from src.main import settings

    _route_logs("WARNING" if args.quiet or args.json_output else settings.log_level)

    return asyncio.run(_run(query, args.json_output, args.output, args.limit))


if __name__ == "__main__":
    sys.exit(main())
