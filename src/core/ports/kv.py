"""
Key-value store port.

Persisted scalar state owned by the gate components:
- pseudo install id (AttributionAggregator)
- notification prompt cooldown (NotificationGatePolicy)
- push token (PushTokenStore)

Each key is written only by the component that owns it.
"""

from __future__ import annotations

from typing import Protocol


class KeyValueStorePort(Protocol):
    """Collaborator-provided string key-value store."""

    def get(self, key: str) -> str | None:
        """Return the stored value, or None if the key is unset."""
        ...

    def set(self, key: str, value: str) -> None:
        """Store value under key (upsert)."""
        ...

    def delete(self, key: str) -> None:
        """Remove key. Missing keys are ignored."""
        ...
