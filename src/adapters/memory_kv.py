"""
In-memory key-value store.

Satisfies KeyValueStorePort for tests and for hosts that persist state
themselves.
"""

from __future__ import annotations

import threading


class InMemoryKeyValueStore:
    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def items(self) -> dict[str, str]:
        with self._lock:
            return dict(self._data)
