"""
AttributionAggregator - canonical attribution record for routing requests.

Merges attribution fragments from several asynchronous sources (SDK
conversion callbacks, deep links, install referrer) into one record and
owns the persisted pseudo install id.

Key behaviors:
- First-write-wins per top-level key, in arrival order
- A stored null is a placeholder; the first non-null value replaces it
- Fragments are sanitized first; bad fields are dropped, not the fragment
- Install id is generated once ("af-" + uuid4) and persisted
- Every update publishes an AttributionChange to subscribers
"""

from __future__ import annotations

import copy
import logging
import threading
import uuid
from collections.abc import Callable, Mapping
from typing import Any

from src.domain.sanitize import (
    AttributionRecord,
    dropped_keys,
    sanitize,
    sanitize_mapping,
)

from .models import AttributionChange, AttributionSource, MergeResult
from .ports import ChangeListener, KeyValueStorePort

logger = logging.getLogger(__name__)

INSTALL_ID_STORAGE_KEY = "attribution.install_id"
INSTALL_ID_FIELD = "af_id"
INSTALL_ID_PREFIX = "af-"


def _generate_install_id() -> str:
    return f"{INSTALL_ID_PREFIX}{uuid.uuid4()}"


def merge_first_write_wins(
    record: AttributionRecord,
    fragment: AttributionRecord,
) -> tuple[tuple[str, ...], tuple[str, ...]]:
    """
    Merge a sanitized fragment into record in place.

    Returns (accepted, ignored) key tuples.
    """
    accepted: list[str] = []
    ignored: list[str] = []
    for key, value in fragment.items():
        if key not in record:
            record[key] = value
            accepted.append(key)
        elif record[key] is None and value is not None:
            record[key] = value
            accepted.append(key)
        elif record[key] != value:
            ignored.append(key)
    return tuple(accepted), tuple(ignored)


class AttributionAggregator:
    """
    Process-wide attribution state.

    Construct once per launch and inject into the config client and
    the gate controller.
    """

    sanitize = staticmethod(sanitize)

    def __init__(
        self,
        store: KeyValueStorePort,
        *,
        id_factory: Callable[[], str] = _generate_install_id,
    ) -> None:
        self._store = store
        self._id_factory = id_factory
        self._record: AttributionRecord = {}
        self._latest: dict[AttributionSource, AttributionRecord] = {}
        self._install_id: str | None = store.get(INSTALL_ID_STORAGE_KEY) or None
        self._listeners: list[ChangeListener] = []
        self._lock = threading.RLock()

    # --- Updates ---

    def update(
        self,
        source_payload: Mapping[Any, Any],
        source: AttributionSource = AttributionSource.OTHER,
    ) -> MergeResult:
        """Merge a raw fragment and notify subscribers."""
        fragment = sanitize_mapping(source_payload)
        dropped = tuple(dropped_keys(source_payload, fragment))

        with self._lock:
            self._latest[source] = copy.deepcopy(fragment)
            accepted, ignored = merge_first_write_wins(self._record, fragment)

        if dropped:
            logger.debug("Attribution %s: dropped fields %s", source.value, list(dropped))
        if ignored:
            logger.debug(
                "Attribution %s: kept first value for %s", source.value, list(ignored)
            )

        result = MergeResult(
            source=source, accepted=accepted, ignored=ignored, dropped=dropped
        )
        self._publish(AttributionChange(source=source, accepted=accepted))
        return result

    def set_install_id(self, install_id: str | None) -> None:
        """Adopt a stable identifier supplied by an attribution SDK."""
        if not install_id or not install_id.strip():
            return
        install_id = install_id.strip()
        with self._lock:
            if install_id == self._install_id:
                return
            self._install_id = install_id
            self._store.set(INSTALL_ID_STORAGE_KEY, install_id)
        logger.info("Attribution install id set by source")
        self._publish(
            AttributionChange(source=AttributionSource.INSTALL_ID, install_id=install_id)
        )

    # --- Reads ---

    def ensure_install_id(self) -> str:
        """Return the install id, generating and persisting one if needed."""
        with self._lock:
            if self._install_id:
                return self._install_id

            stored = self._store.get(INSTALL_ID_STORAGE_KEY)
            if stored:
                self._install_id = stored
                return stored

            generated = self._id_factory()
            self._install_id = generated
            self._store.set(INSTALL_ID_STORAGE_KEY, generated)

        logger.info("Generated pseudo install id")
        return generated

    @property
    def install_id(self) -> str | None:
        """Current install id without generating one."""
        return self._install_id

    def snapshot(self) -> AttributionRecord:
        """Deep copy of the canonical record."""
        with self._lock:
            return copy.deepcopy(self._record)

    def latest(self, source: AttributionSource) -> AttributionRecord:
        """Most recent sanitized fragment from one source (empty if none)."""
        with self._lock:
            return copy.deepcopy(self._latest.get(source, {}))

    # --- Subscriptions ---

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """Register a change listener. Returns an unsubscribe callable."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _publish(self, change: AttributionChange) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(change)
            except Exception:
                logger.exception("Attribution listener failed")


def create_attribution_aggregator(store: KeyValueStorePort) -> AttributionAggregator:
    """Factory for AttributionAggregator."""
    return AttributionAggregator(store)
