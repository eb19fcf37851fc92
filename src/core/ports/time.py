"""
Clock port.

Wall-clock time is used for persisted timestamps (cooldowns), the
monotonic clock for durations (minimum loading time, debounce). Sleeping
goes through the port so tests can advance virtual time.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol


class ClockPort(Protocol):
    """Time provider interface."""

    def now_utc(self) -> datetime:
        """Get current UTC time (timezone-aware)."""
        ...

    def monotonic(self) -> float:
        """Seconds from an arbitrary fixed point; never goes backwards."""
        ...

    async def sleep(self, seconds: float) -> None:
        """Suspend the calling task for at least `seconds`."""
        ...
