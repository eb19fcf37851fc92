"""
Tests for notification link extraction and the pending link store.
"""

from __future__ import annotations

import pytest

from src.components.notification_link import PendingLinkStore, extract_link


class TestExtractLink:
    """Link lookup inside notification payloads."""

    @pytest.mark.parametrize(
        "payload",
        [
            {"url": "https://a.example/x"},
            {"data": {"url": "https://a.example/x"}},
            {"message": {"url": "https://a.example/x"}},
            {"message": {"data": {"url": "https://a.example/x"}}},
            {"link": " https://a.example/x "},
            {"deep_link": "https://a.example/x"},
        ],
    )
    def test_known_paths(self, payload: dict) -> None:
        assert extract_link(payload) == "https://a.example/x"

    def test_first_path_wins(self) -> None:
        """Top-level url beats nested ones."""
        payload = {"data": {"url": "https://b.example"}, "url": "https://a.example"}
        assert extract_link(payload) == "https://a.example"

    def test_non_string_skipped(self) -> None:
        """Non-string candidates fall through to later paths."""
        payload = {"url": 5, "data": "flat", "link": "https://c.example"}
        assert extract_link(payload) == "https://c.example"

    def test_missing(self) -> None:
        assert extract_link({"aps": {"alert": "hi"}}) is None


class TestPendingLinkStore:
    """One-shot consumption."""

    def test_consume_once(self) -> None:
        """A stored link is returned exactly once."""
        store = PendingLinkStore()
        assert store.store_from_payload({"url": "https://a.example/x"}) == "https://a.example/x"
        assert store.peek() == "https://a.example/x"
        assert store.consume() == "https://a.example/x"
        assert store.consume() is None

    def test_non_web_links_rejected(self) -> None:
        """Only absolute http(s) links are stored."""
        store = PendingLinkStore()
        assert store.store_from_payload({"url": "myapp://open"}) is None
        assert store.store_from_payload({"url": "/relative"}) is None
        assert store.peek() is None

    def test_latest_link_replaces(self) -> None:
        """A newer notification replaces an unconsumed link."""
        store = PendingLinkStore()
        store.store("https://a.example")
        store.store("https://b.example")
        assert store.consume() == "https://b.example"
