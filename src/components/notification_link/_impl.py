"""
PendingLinkStore - one-shot link from a remote notification.

A tapped notification may carry a URL the web experience should open.
The link is stored until the web collaborator consumes it once.
"""

from __future__ import annotations

import threading
from collections.abc import Mapping
from typing import Any

from src.components.config_client import parse_absolute_url


def _nested(payload: Mapping[Any, Any], *path: str) -> Any:
    current: Any = payload
    for key in path:
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
    return current


# Lookup order for the link inside a notification payload
LINK_PATHS: tuple[tuple[str, ...], ...] = (
    ("url",),
    ("data", "url"),
    ("message", "url"),
    ("message", "data", "url"),
    ("link",),
    ("deep_link",),
)


def extract_link(payload: Mapping[Any, Any]) -> str | None:
    """First non-empty string found along LINK_PATHS."""
    for path in LINK_PATHS:
        candidate = _nested(payload, *path)
        if isinstance(candidate, str) and candidate.strip():
            return candidate.strip()
    return None


class PendingLinkStore:
    def __init__(self) -> None:
        self._pending: str | None = None
        self._lock = threading.Lock()

    def store_from_payload(self, payload: Mapping[Any, Any]) -> str | None:
        """Store the payload's link if it is an absolute URL; return it."""
        url = parse_absolute_url(extract_link(payload))
        if url is not None:
            self.store(url)
        return url

    def store(self, url: str) -> None:
        with self._lock:
            self._pending = url

    def consume(self) -> str | None:
        with self._lock:
            url, self._pending = self._pending, None
        return url

    def peek(self) -> str | None:
        with self._lock:
            return self._pending
