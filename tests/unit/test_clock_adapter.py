"""
Tests for the system clock adapter.
"""

from __future__ import annotations

from datetime import UTC

import pytest

from src.adapters.clock import SystemClock


class TestSystemClock:
    def test_now_is_utc(self) -> None:
        assert SystemClock().now_utc().tzinfo == UTC

    def test_monotonic_never_decreases(self) -> None:
        clock = SystemClock()
        first = clock.monotonic()
        assert clock.monotonic() >= first

    @pytest.mark.asyncio
    async def test_sleep_waits(self) -> None:
        clock = SystemClock()
        started = clock.monotonic()
        await clock.sleep(0.01)
        assert clock.monotonic() - started >= 0.009

    @pytest.mark.asyncio
    async def test_non_positive_sleep_returns(self) -> None:
        await SystemClock().sleep(0)
        await SystemClock().sleep(-1)
