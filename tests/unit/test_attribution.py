"""
Tests for AttributionAggregator.
"""

from __future__ import annotations

import threading

import pytest

from src.adapters.memory_kv import InMemoryKeyValueStore
from src.components.attribution import (
    INSTALL_ID_PREFIX,
    INSTALL_ID_STORAGE_KEY,
    AttributionAggregator,
    AttributionChange,
    AttributionSource,
    UpdateAttributionInput,
    merge_first_write_wins,
    run_snapshot,
    run_update,
)
from src.domain.sanitize import Boxed

# --- Fixtures ---


@pytest.fixture
def aggregator(kv: InMemoryKeyValueStore) -> AttributionAggregator:
    """Aggregator with deterministic install ids."""
    return AttributionAggregator(kv, id_factory=lambda: "af-fixed")


# --- Merge ---


class TestMergeFirstWriteWins:
    """Per-key first-write-wins merge."""

    def test_new_keys_accepted(self) -> None:
        """Keys not yet present are added."""
        record: dict = {}
        accepted, ignored = merge_first_write_wins(record, {"a": 1, "b": 2})
        assert record == {"a": 1, "b": 2}
        assert accepted == ("a", "b")
        assert ignored == ()

    def test_existing_value_kept(self) -> None:
        """A later value for an existing key is ignored."""
        record = {"a": 1}
        accepted, ignored = merge_first_write_wins(record, {"a": 2})
        assert record == {"a": 1}
        assert ignored == ("a",)

    def test_same_value_neither_accepted_nor_ignored(self) -> None:
        """Repeating the stored value is a no-op."""
        record = {"a": 1}
        assert merge_first_write_wins(record, {"a": 1}) == ((), ())

    def test_null_placeholder_filled(self) -> None:
        """A stored null is replaced by the first non-null value."""
        record = {"a": None}
        accepted, _ = merge_first_write_wins(record, {"a": "x"})
        assert record == {"a": "x"}
        assert accepted == ("a",)

    def test_nested_values_are_whole(self) -> None:
        """Merging is per top-level key; nested maps are not merged."""
        record = {"meta": {"a": 1}}
        merge_first_write_wins(record, {"meta": {"b": 2}})
        assert record == {"meta": {"a": 1}}


# --- Updates ---


class TestAttributionUpdate:
    """Merging raw fragments."""

    def test_first_write_wins_across_sources(self, aggregator: AttributionAggregator) -> None:
        """The earliest fragment defines each key."""
        aggregator.update({"campaign": "first", "media_source": "fb"}, AttributionSource.CONVERSION)
        aggregator.update({"campaign": "second", "adset": "x"}, AttributionSource.DEEP_LINK)
        assert aggregator.snapshot() == {
            "campaign": "first",
            "media_source": "fb",
            "adset": "x",
        }

    def test_snapshot_equals_fold_of_fragments(self, aggregator: AttributionAggregator) -> None:
        """Snapshot is the fold of sanitized fragments in arrival order."""
        fragments = [
            {"a": 1, "b": None},
            {"b": 2, "c": [1, 2]},
            {"a": 9, "c": [3], "d": "x"},
        ]
        expected: dict = {}
        for fragment in fragments:
            aggregator.update(fragment)
            merge_first_write_wins(expected, dict(fragment))
        assert aggregator.snapshot() == expected == {"a": 1, "b": 2, "c": [1, 2], "d": "x"}

    def test_bad_fields_dropped_not_fragment(self, aggregator: AttributionAggregator) -> None:
        """Unrepresentable fields are dropped individually."""
        result = aggregator.update({"ok": "yes", "bad": object(), "gone": Boxed(None)})
        assert aggregator.snapshot() == {"ok": "yes"}
        assert result.accepted == ("ok",)
        assert result.dropped == ("bad", "gone")

    def test_merge_result_reports_ignored(self, aggregator: AttributionAggregator) -> None:
        """Conflicting values are reported as ignored."""
        aggregator.update({"a": 1})
        result = aggregator.update({"a": 2, "b": 3})
        assert result.accepted == ("b",)
        assert result.ignored == ("a",)
        assert result.changed

    def test_snapshot_is_a_copy(self, aggregator: AttributionAggregator) -> None:
        """Mutating a snapshot does not touch the record."""
        aggregator.update({"meta": {"a": 1}})
        snapshot = aggregator.snapshot()
        snapshot["meta"]["a"] = 99
        snapshot["extra"] = True
        assert aggregator.snapshot() == {"meta": {"a": 1}}

    def test_latest_per_source(self, aggregator: AttributionAggregator) -> None:
        """latest() keeps the last fragment of each source, sanitized."""
        aggregator.update({"a": 1}, AttributionSource.CONVERSION)
        aggregator.update({"a": 2, "x": object()}, AttributionSource.CONVERSION)
        assert aggregator.latest(AttributionSource.CONVERSION) == {"a": 2}
        assert aggregator.latest(AttributionSource.DEEP_LINK) == {}

    def test_concurrent_updates(self, aggregator: AttributionAggregator) -> None:
        """Updates from several threads all land."""
        threads = [
            threading.Thread(target=aggregator.update, args=({f"k{i}": i},))
            for i in range(20)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert len(aggregator.snapshot()) == 20


# --- Notifications ---


class TestAttributionSubscribers:
    """Change notifications."""

    def test_every_update_notifies(self, aggregator: AttributionAggregator) -> None:
        """Subscribers hear about every update, even no-op ones."""
        changes: list[AttributionChange] = []
        aggregator.subscribe(changes.append)
        aggregator.update({"a": 1}, AttributionSource.CONVERSION)
        aggregator.update({"a": 1}, AttributionSource.DEEP_LINK)
        assert [c.source for c in changes] == [
            AttributionSource.CONVERSION,
            AttributionSource.DEEP_LINK,
        ]
        assert changes[0].accepted == ("a",)
        assert changes[1].accepted == ()

    def test_unsubscribe(self, aggregator: AttributionAggregator) -> None:
        """Unsubscribed listeners are not called."""
        changes: list[AttributionChange] = []
        unsubscribe = aggregator.subscribe(changes.append)
        unsubscribe()
        unsubscribe()
        aggregator.update({"a": 1})
        assert changes == []

    def test_failing_listener_does_not_break_update(
        self, aggregator: AttributionAggregator
    ) -> None:
        """A raising listener is logged and skipped."""
        changes: list[AttributionChange] = []

        def broken(change: AttributionChange) -> None:
            raise RuntimeError("listener bug")

        aggregator.subscribe(broken)
        aggregator.subscribe(changes.append)
        aggregator.update({"a": 1})
        assert aggregator.snapshot() == {"a": 1}
        assert len(changes) == 1


# --- Install Id ---


class TestInstallId:
    """Pseudo install id lifecycle."""

    def test_generated_once_and_persisted(
        self, aggregator: AttributionAggregator, kv: InMemoryKeyValueStore
    ) -> None:
        """The first call generates and stores the id."""
        assert aggregator.install_id is None
        assert aggregator.ensure_install_id() == "af-fixed"
        assert aggregator.ensure_install_id() == "af-fixed"
        assert kv.get(INSTALL_ID_STORAGE_KEY) == "af-fixed"

    def test_default_format(self, kv: InMemoryKeyValueStore) -> None:
        """Default ids are "af-" plus a UUID."""
        install_id = AttributionAggregator(kv).ensure_install_id()
        assert install_id.startswith(INSTALL_ID_PREFIX)
        assert len(install_id) == len(INSTALL_ID_PREFIX) + 36

    def test_survives_restart(self, kv: InMemoryKeyValueStore) -> None:
        """A new aggregator over the same store reuses the id."""
        first = AttributionAggregator(kv).ensure_install_id()
        second = AttributionAggregator(kv, id_factory=lambda: "af-other")
        assert second.install_id == first
        assert second.ensure_install_id() == first

    def test_set_install_id(
        self, aggregator: AttributionAggregator, kv: InMemoryKeyValueStore
    ) -> None:
        """An SDK-provided id replaces the pseudo id and is persisted."""
        changes: list[AttributionChange] = []
        aggregator.subscribe(changes.append)
        aggregator.set_install_id("  sdk-123 ")
        assert aggregator.ensure_install_id() == "sdk-123"
        assert kv.get(INSTALL_ID_STORAGE_KEY) == "sdk-123"
        assert changes == [
            AttributionChange(source=AttributionSource.INSTALL_ID, install_id="sdk-123")
        ]

    def test_set_install_id_ignores_blank(self, aggregator: AttributionAggregator) -> None:
        """Blank ids are ignored."""
        aggregator.set_install_id("   ")
        aggregator.set_install_id(None)
        assert aggregator.install_id is None


# --- Shell ---


class TestAttributionShell:
    """run_update / run_snapshot entry points."""

    def test_run_update(self, aggregator: AttributionAggregator) -> None:
        """run_update merges with the given source."""
        result = run_update(
            UpdateAttributionInput(payload={"a": 1}, source=AttributionSource.INSTALL_REFERRER),
            aggregator,
        )
        assert result.source == AttributionSource.INSTALL_REFERRER
        assert aggregator.snapshot() == {"a": 1}

    def test_run_snapshot(self, aggregator: AttributionAggregator) -> None:
        """Snapshot output carries the install id and per-source fragments."""
        aggregator.update({"a": 1}, AttributionSource.CONVERSION)
        output = run_snapshot(aggregator)
        assert output.record == {"a": 1}
        assert output.install_id == "af-fixed"
        assert output.sources == {"conversion": {"a": 1}}
