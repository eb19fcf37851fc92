"""
PushTokenStore - current push token for routing requests.

The platform publishes token changes; the store trims them, persists
non-empty tokens, and notifies listeners.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from src.core.ports.kv import KeyValueStorePort

logger = logging.getLogger(__name__)

PUSH_TOKEN_STORAGE_KEY = "push.token"

TokenListener = Callable[[str | None], None]


def redact_token(token: str | None) -> str:
    if not token:
        return "<none>"
    return f"{token[:6]}…({len(token)})"


class PushTokenStore:
    def __init__(self, store: KeyValueStorePort) -> None:
        self._store = store
        self._token: str | None = store.get(PUSH_TOKEN_STORAGE_KEY) or None
        self._listeners: list[TokenListener] = []
        self._lock = threading.Lock()

    @property
    def token(self) -> str | None:
        return self._token

    def update(self, token: str | None) -> None:
        trimmed = token.strip() if token is not None else None
        with self._lock:
            self._token = trimmed or None
            if trimmed:
                self._store.set(PUSH_TOKEN_STORAGE_KEY, trimmed)
            listeners = list(self._listeners)

        logger.info("Push token updated: %s", redact_token(self._token))
        for listener in listeners:
            try:
                listener(self._token)
            except Exception:
                logger.exception("Push token listener failed")

    def subscribe(self, listener: TokenListener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe
