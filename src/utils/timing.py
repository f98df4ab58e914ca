"""Named performance timers.

Timers are an observability side channel: starting or stopping one never
raises and never changes control flow.  Log lines are only emitted when
timers are enabled (``DEBUG_TIMERS=true``), so production logs stay quiet
while the durations are still returned to callers that want them.

Two styles are supported:

- ``start(label)`` / ``stop(label)`` for spans that cross function
  boundaries, keyed by a label string.
- ``with measure(label):`` for a span confined to one block.  The start
  time is held locally, so concurrent tasks using the same label do not
  overwrite each other.
"""

from __future__ import annotations

import time
from collections.abc import Iterator
from contextlib import contextmanager

import structlog

from src.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)


class TimerRegistry:
    """Keeps start timestamps for named timers."""

    def __init__(self, enabled: bool = False) -> None:
        self._enabled = enabled
        self._started: dict[str, float] = {}

    @property
    def enabled(self) -> bool:
        return self._enabled

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled

    def start(self, label: str) -> None:
        self._started[label] = time.perf_counter()
        if self._enabled:
            _logger.info("timer_started", timer=label)

    def stop(self, label: str) -> float | None:
        """Stop *label* and return its duration in milliseconds.

        Returns ``None`` (and logs a warning) when the timer was never started.
        """
        started = self._started.pop(label, None)
        if started is None:
            _logger.warning("timer_missing", timer=label)
            return None
        duration_ms = (time.perf_counter() - started) * 1000
        self._report(label, duration_ms)
        return duration_ms

    @contextmanager
    def measure(self, label: str) -> Iterator[None]:
        started = time.perf_counter()
        if self._enabled:
            _logger.info("timer_started", timer=label)
        try:
            yield
        finally:
            self._report(label, (time.perf_counter() - started) * 1000)

    def _report(self, label: str, duration_ms: float) -> None:
        if self._enabled:
            _logger.info("timer_stopped", timer=label, duration_ms=round(duration_ms, 2))


# Process-wide registry; ``configure_timers`` flips it on at startup.
timers = TimerRegistry()


def configure_timers(enabled: bool) -> TimerRegistry:
    """Enable or disable timer logging on the shared registry."""
    timers.set_enabled(enabled)
    return timers
