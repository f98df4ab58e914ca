"""Unit tests for batching helpers."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from src.utils.concurrency import chunked, gather_in_batches


class TestChunked:
    def test_even_split(self) -> None:
        assert chunked([1, 2, 3, 4], 2) == [[1, 2], [3, 4]]

    def test_remainder(self) -> None:
        assert chunked([1, 2, 3, 4, 5, 6, 7], 5) == [[1, 2, 3, 4, 5], [6, 7]]

    def test_empty(self) -> None:
        assert chunked([], 5) == []

    def test_invalid_size(self) -> None:
        with pytest.raises(ValueError):
            chunked([1], 0)


class TestGatherInBatches:
    @pytest.mark.asyncio
    async def test_results_in_input_order(self) -> None:
        async def double(x: int) -> int:
            await asyncio.sleep(0.01 * (5 - x))
            return x * 2

        assert await gather_in_batches([1, 2, 3, 4], double, batch_size=2) == [2, 4, 6, 8]

    @pytest.mark.asyncio
    async def test_failure_does_not_abort_batch(self) -> None:
        async def work(x: int) -> int:
            if x == 2:
                raise ValueError("bad item")
            return x

        results = await gather_in_batches([1, 2, 3], work, batch_size=3)

        assert results[0] == 1
        assert isinstance(results[1], ValueError)
        assert results[2] == 3

    @pytest.mark.asyncio
    async def test_batch_concurrency_bounded(self) -> None:
        running = 0
        peak = 0

        async def work(x: int) -> None:
            nonlocal running, peak
            running += 1
            peak = max(peak, running)
            await asyncio.sleep(0)
            running -= 1

        await gather_in_batches(list(range(12)), work, batch_size=5)

        assert peak == 5

    @pytest.mark.asyncio
    async def test_pause_between_batches_only(self) -> None:
        async def work(x: int) -> int:
            return x

        with patch("src.utils.concurrency.asyncio.sleep", new_callable=AsyncMock) as sleep:
            await gather_in_batches(list(range(11)), work, batch_size=5, pause_seconds=0.5)

        assert sleep.await_count == 2
        sleep.assert_awaited_with(0.5)

    @pytest.mark.asyncio
    async def test_no_pause_when_zero(self) -> None:
        async def work(x: int) -> int:
            return x

        with patch("src.utils.concurrency.asyncio.sleep", new_callable=AsyncMock) as sleep:
            await gather_in_batches([1, 2, 3], work, batch_size=1, pause_seconds=0)

        sleep.assert_not_awaited()
