"""
Tests for the pinned service.

Uses a real SQLite document store.
"""

from unittest.mock import MagicMock

import pytest

from launchindex.index.builder import build_entries
from launchindex.index.entries import RecordKey
from launchindex.services.pinned import PINNED_DOC_ID, PinnedService


@pytest.fixture
def entries(sample_apps, sample_plugins):
    parts = build_entries(sample_apps, sample_plugins)
    return {e.display_name: e for e in parts.fuzzy + parts.pattern}


@pytest.fixture
def pinned(writer):
    return PinnedService(writer)


def _names(service):
    return [r.name for r in service.list()]


class TestPin:
    def test_pin_appends(self, pinned, entries):
        pinned.pin(entries["Firefox"])
        pinned.pin(entries["苹果商店"])
        assert _names(pinned) == ["Firefox", "苹果商店"]

    def test_pin_twice_is_noop(self, pinned, entries):
        assert pinned.pin(entries["Firefox"]) is True
        assert pinned.pin(entries["Firefox"]) is False
        assert len(pinned.list()) == 1

    def test_pin_twice_does_not_emit(self, pinned, entries):
        pinned.pin(entries["Firefox"])
        callback = MagicMock()
        pinned.connect("changed", callback)
        pinned.pin(entries["Firefox"])
        callback.assert_not_called()

    def test_is_pinned(self, pinned, entries):
        pinned.pin(entries["Open URL"])
        assert pinned.is_pinned("/plugins/translate", "url")
        assert pinned.is_pinned("/plugins/translate")
        assert not pinned.is_pinned("/plugins/translate", "tr")
        assert not pinned.is_pinned("/apps/firefox")


class TestUnpin:
    def test_unpin_feature(self, pinned, entries):
        pinned.pin(entries["translate"])
        pinned.pin(entries["Open URL"])
        assert pinned.unpin("/plugins/translate", "tr") is True
        assert _names(pinned) == ["Open URL"]

    def test_unpin_path(self, pinned, entries):
        pinned.pin(entries["translate"])
        pinned.pin(entries["Open URL"])
        pinned.pin(entries["Firefox"])
        pinned.unpin("/plugins/translate")
        assert _names(pinned) == ["Firefox"]

    def test_unpin_missing(self, pinned):
        assert pinned.unpin("/nope") is False


class TestOrdering:
    """Order is user-controlled, never derived."""

    def test_reorder_replaces_order(self, pinned, entries):
        for name in ["Firefox", "苹果商店", "Visual Studio Code"]:
            pinned.pin(entries[name])
        records = pinned.list()
        pinned.reorder([records[2], records[0], records[1]])
        assert _names(pinned) == ["Visual Studio Code", "Firefox", "苹果商店"]

    def test_reorder_drops_duplicates(self, pinned, entries):
        pinned.reorder([entries["Firefox"], entries["Firefox"], entries["苹果商店"]])
        assert _names(pinned) == ["Firefox", "苹果商店"]

    def test_move(self, pinned, entries):
        for name in ["Firefox", "苹果商店", "Visual Studio Code"]:
            pinned.pin(entries[name])
        assert pinned.move(RecordKey("/apps/code"), 0) is True
        assert _names(pinned) == ["Visual Studio Code", "Firefox", "苹果商店"]

    def test_move_clamps_index(self, pinned, entries):
        pinned.pin(entries["Firefox"])
        pinned.pin(entries["苹果商店"])
        pinned.move(RecordKey("/apps/firefox"), 99)
        assert _names(pinned) == ["苹果商店", "Firefox"]

    def test_move_unknown(self, pinned):
        assert pinned.move(RecordKey("/nope"), 0) is False

    def test_clear(self, pinned, entries):
        pinned.pin(entries["Firefox"])
        pinned.clear()
        assert pinned.list() == []


class TestPersistence:
    def test_full_list_persisted(self, pinned, entries, tmp_store):
        pinned.pin(entries["Firefox"])
        pinned.pin(entries["translate"])
        doc = tmp_store.get(PINNED_DOC_ID)
        assert [d["name"] for d in doc.value] == ["Firefox", "translate"]
        assert doc.value[1]["feature_code"] == "tr"
        assert "use_count" not in doc.value[0]

    def test_restored_by_new_service(self, pinned, entries, writer):
        pinned.pin(entries["苹果商店"])
        pinned.pin(entries["Firefox"])
        pinned.move(RecordKey("/apps/firefox"), 0)
        assert _names(PinnedService(writer)) == ["Firefox", "苹果商店"]

    def test_duplicate_documents_collapse_on_load(self, writer, tmp_store):
        doc = {"name": "Firefox", "path": "/apps/firefox", "kind": "app"}
        tmp_store.put(PINNED_DOC_ID, [doc, doc])
        assert _names(PinnedService(writer)) == ["Firefox"]
