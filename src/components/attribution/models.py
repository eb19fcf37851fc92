"""
Attribution component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class AttributionSource(str, Enum):
    """Where an attribution fragment came from."""

    CONVERSION = "conversion"  # SDK install conversion callback
    DEEP_LINK = "deep_link"  # Deep-link open payload
    INSTALL_REFERRER = "install_referrer"
    INSTALL_ID = "install_id"  # SDK-provided stable identifier
    OTHER = "other"


@dataclass(frozen=True)
class MergeResult:
    """Outcome of merging one fragment into the canonical record."""

    source: AttributionSource
    accepted: tuple[str, ...] = ()  # new keys (or null placeholders filled)
    ignored: tuple[str, ...] = ()  # already set with a different value
    dropped: tuple[str, ...] = ()  # removed by sanitization

    @property
    def changed(self) -> bool:
        return bool(self.accepted)


@dataclass(frozen=True)
class AttributionChange:
    """Change event published to subscribers after every update."""

    source: AttributionSource
    accepted: tuple[str, ...] = ()
    install_id: str | None = None


@dataclass(frozen=True)
class UpdateAttributionInput:
    """Input for merging a raw fragment."""

    payload: dict[str, Any]
    source: AttributionSource = AttributionSource.OTHER


@dataclass(frozen=True)
class AttributionSnapshotOutput:
    """Read-only view for request building and diagnostics."""

    record: dict[str, Any]
    install_id: str
    sources: dict[str, dict[str, Any]] = field(default_factory=dict)
