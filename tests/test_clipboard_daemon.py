# Tests for clipboard history and the clipboard daemon loop

from unittest.mock import MagicMock, patch

import pytest

from launcher_agent.cache.store import CLIPBOARD_CACHE
from launcher_agent.catalog.models import Item, ItemType
from launcher_agent.daemons.clipboard import ClipboardDaemon, ClipboardHistory, display_text


def test_history_is_most_recent_first_and_bounded():
    history = ClipboardHistory(max_entries=3)
    for text in ["a", "b", "c", "d"]:
        assert history.push(text) is True
    assert history.entries() == ["d", "c", "b"]


def test_repeating_the_front_entry_is_a_no_op():
    history = ClipboardHistory(max_entries=5)
    history.push("hello")
    assert history.push("  hello\n") is False
    assert history.entries() == ["hello"]


def test_older_duplicates_are_kept():
    history = ClipboardHistory(max_entries=5)
    for text in ["a", "b", "a"]:
        history.push(text)
    assert history.entries() == ["a", "b", "a"]


def test_blank_text_is_ignored():
    history = ClipboardHistory(max_entries=5)
    assert history.push("   \n\t") is False
    assert len(history) == 0


def test_seeded_history_respects_bound():
    history = ClipboardHistory(max_entries=2, entries=["newest", "middle", "oldest"])
    assert history.entries() == ["newest", "middle"]


def test_items_truncate_display_but_keep_content():
    content = "line one\nline two " + "x" * 200
    history = ClipboardHistory(max_entries=5, entries=[content])
    (item,) = history.items()
    assert item.type is ItemType.CLIPBOARD_HISTORY
    assert item.value == content
    assert item.name.startswith("line one line two ")
    assert item.name.endswith("...")
    assert len(item.name) == 83


def test_display_text_short_entries_unchanged():
    assert display_text("  short  text ") == "short text"


@pytest.fixture
def daemon(store):
    pasteboard = MagicMock()
    pasteboard.change_count.return_value = 0
    return ClipboardDaemon(store=store, pasteboard=pasteboard, max_entries=3, poll_interval=0.01)


def test_initialize_seeds_history_from_cache(daemon, store):
    store.save(CLIPBOARD_CACHE, [Item.clipboard_entry("old", "old")])
    daemon.initialize()
    assert daemon.history.entries() == ["old"]
    assert [item.value for item in store.load(CLIPBOARD_CACHE)] == ["old"]


def test_new_text_is_persisted(daemon, store):
    daemon.initialize()
    daemon.offer("first")
    daemon.step(timeout=0)
    daemon.offer("second")
    daemon.step(timeout=0)
    assert [item.value for item in store.load(CLIPBOARD_CACHE)] == ["second", "first"]


def test_duplicate_text_does_not_rewrite_cache(daemon):
    daemon.initialize()
    daemon.offer("same")
    daemon.step(timeout=0)

    with patch.object(daemon, "refresh") as refresh:
        daemon.offer("same ")
        daemon.step(timeout=0)
        refresh.assert_not_called()


def test_step_without_events_does_nothing(daemon):
    with patch.object(daemon, "refresh") as refresh:
        daemon.step(timeout=0)
        refresh.assert_not_called()


def test_explicit_zero_history_is_respected(store):
    daemon = ClipboardDaemon(store=store, pasteboard=MagicMock(), max_entries=0, poll_interval=0)
    assert daemon.max_entries == 0
    assert daemon.poll_interval == 0


def test_poller_survives_pasteboard_failing_at_startup(store):
    counts = [RuntimeError("pasteboard unavailable"), 1, 2]

    def change_count():
        value = counts.pop(0) if counts else 2
        if isinstance(value, Exception):
            raise value
        return value

    pasteboard = MagicMock()
    pasteboard.change_count.side_effect = change_count
    pasteboard.read_text.return_value = "copied"
    daemon = ClipboardDaemon(store=store, pasteboard=pasteboard, poll_interval=0.01)

    daemon.start_producer()
    try:
        assert daemon.events.get(timeout=2.0) == "copied"
    finally:
        daemon.stop_producer()
    pasteboard.read_text.assert_called_once()
