"""
Redirects component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class StopReason(str, Enum):
    """Why a redirect walk ended."""

    FINAL = "final"  # non-3xx response
    MISSING_LOCATION = "missing_location"  # 3xx without usable Location
    MAX_HOPS = "max_hops"
    TRANSPORT_ERROR = "transport_error"


@dataclass(frozen=True)
class RedirectConfig:
    """Redirect resolution limits."""

    max_hops: int = 80
    hop_timeout_seconds: float = 8.0


@dataclass(frozen=True)
class RedirectChain:
    """URLs visited while resolving one stuck navigation."""

    visited: tuple[str, ...]
    stop_reason: StopReason
    requests: int

    @property
    def final_url(self) -> str:
        return self.visited[-1]

    @property
    def hops(self) -> int:
        return len(self.visited) - 1
