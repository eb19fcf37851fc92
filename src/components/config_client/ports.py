"""
Config client component - Port interfaces.
"""

from __future__ import annotations

from typing import Any, Protocol


class AttributionReaderPort(Protocol):
    """Read side of the attribution aggregator."""

    def snapshot(self) -> dict[str, Any]:
        """Copy of the canonical attribution record."""
        ...

    def ensure_install_id(self) -> str:
        """Stable install id (generated on first use)."""
        ...
