"""Unit tests for the named timer registry."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from src.utils.timing import TimerRegistry, configure_timers, timers


class TestTimerRegistry:
    def test_start_stop_returns_duration(self) -> None:
        registry = TimerRegistry()
        with patch("src.utils.timing.time.perf_counter", side_effect=[1.0, 1.25]):
            registry.start("API:/songs/1")
            duration = registry.stop("API:/songs/1")
        assert duration == pytest.approx(250.0)

    def test_stop_unknown_label_returns_none(self) -> None:
        registry = TimerRegistry()
        with patch("src.utils.timing._logger") as logger:
            assert registry.stop("never-started") is None
        logger.warning.assert_called_once_with("timer_missing", timer="never-started")

    def test_stop_twice(self) -> None:
        registry = TimerRegistry()
        registry.start("x")
        assert registry.stop("x") is not None
        assert registry.stop("x") is None

    def test_disabled_registry_is_silent(self) -> None:
        registry = TimerRegistry(enabled=False)
        with patch("src.utils.timing._logger") as logger:
            registry.start("x")
            registry.stop("x")
            with registry.measure("y"):
                pass
        logger.info.assert_not_called()

    def test_enabled_registry_logs_start_and_stop(self) -> None:
        registry = TimerRegistry(enabled=True)
        with patch("src.utils.timing._logger") as logger:
            with registry.measure("getSongDetails:1"):
                pass
        events = [c.args[0] for c in logger.info.call_args_list]
        assert events == ["timer_started", "timer_stopped"]

    def test_measure_reports_on_exception(self) -> None:
        registry = TimerRegistry(enabled=True)
        with patch("src.utils.timing._logger") as logger:
            with pytest.raises(RuntimeError):
                with registry.measure("boom"):
                    raise RuntimeError("boom")
        assert logger.info.call_args_list[-1].args[0] == "timer_stopped"

    def test_configure_timers_toggles_shared_registry(self) -> None:
        original = timers.enabled
        try:
            assert configure_timers(True) is timers
            assert timers.enabled is True
            configure_timers(False)
            assert timers.enabled is False
        finally:
            timers.set_enabled(original)
