"""Clipboard daemon: records copied text into a bounded history."""

import queue
import threading
import time
from collections import deque
from typing import Callable, Iterable, List, Optional

from ..cache.store import CLIPBOARD_CACHE, CacheStore
from ..catalog.models import Item
from ..utils.pasteboard import Pasteboard
from .base import ContinuousDaemon


def normalize(text: str) -> str:
    return text.strip()


def display_text(text: str, limit: int = 80) -> str:
    """Single-line preview of a clipboard entry."""
    collapsed = " ".join(text.split())
    return collapsed if len(collapsed) <= limit else f"{collapsed[:limit]}..."


class ClipboardHistory:
    """Most-recent-first clipboard entries, bounded to ``max_entries``.

    A new entry equal (after trimming whitespace) to the current most
    recent one is ignored. Pushing past the bound evicts the oldest.
    """

    def __init__(self, max_entries: int, entries: Iterable[str] = ()):
        self.max_entries = max_entries
        self._entries: deque = deque(maxlen=max_entries)
        # Stored newest first; extend from the oldest end
        for entry in list(entries)[:max_entries][::-1]:
            self._entries.appendleft(entry)

    def __len__(self) -> int:
        return len(self._entries)

    def entries(self) -> List[str]:
        return list(self._entries)

    def push(self, text: str) -> bool:
        """
        Record a clipboard change.

        Returns:
            True if the history changed
        """
        if not normalize(text):
            return False
        if self._entries and normalize(self._entries[0]) == normalize(text):
            return False
        self._entries.appendleft(text)
        return True

    def items(self) -> List[Item]:
        return [Item.clipboard_entry(display_text(entry), entry) for entry in self._entries]

    @classmethod
    def from_items(cls, max_entries: int, items: Iterable[Item]) -> "ClipboardHistory":
        return cls(max_entries, (item.value for item in items))


class ClipboardDaemon(ContinuousDaemon):
    """Polls the pasteboard change counter and persists every new text entry.

    Only the change counter is read on each poll; the text is read when the
    counter moves. History survives restarts by being reseeded from the
    cache, which never expires.
    """

    name = "clipboard"
    cache_key = CLIPBOARD_CACHE

    def __init__(
        self,
        store: Optional[CacheStore] = None,
        pasteboard: Optional[Pasteboard] = None,
        max_entries: Optional[int] = None,
        poll_interval: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        super().__init__(store, clock)
        from ..config import CLIPBOARD_MAX_HISTORY, CLIPBOARD_POLL_INTERVAL

        self.pasteboard = pasteboard or Pasteboard()
        self.max_entries = max_entries if max_entries is not None else CLIPBOARD_MAX_HISTORY
        self.poll_interval = poll_interval if poll_interval is not None else CLIPBOARD_POLL_INTERVAL
        self.history = ClipboardHistory(self.max_entries)
        self._thread: Optional[threading.Thread] = None
        self._polling = False

    def initialize(self) -> None:
        cached = self.store.load(self.cache_key) or []
        self.history = ClipboardHistory.from_items(self.max_entries, cached)
        self.logger.info(f"Loaded {len(self.history)} history entries")
        self.refresh()

    def fetch(self) -> List[Item]:
        return self.history.items()

    def start_producer(self) -> None:
        if self._polling:
            return
        self._polling = True
        self._thread = threading.Thread(target=self._poll_loop, daemon=True)
        self._thread.start()

    def stop_producer(self) -> None:
        self._polling = False
        if self._thread:
            self._thread.join(timeout=2.0)
        self._thread = None

    def _poll_loop(self) -> None:
        last_count = None
        while self._polling:
            time.sleep(self.poll_interval)
            try:
                count = self.pasteboard.change_count()
                changed = last_count is not None and count != last_count
                # The first successful read only sets the baseline
                last_count = count
                text = self.pasteboard.read_text() if changed else None
            except Exception as e:
                # Keep polling; the pasteboard can be briefly unavailable
                self.logger.warning(f"Warning: Clipboard read failed: {e}")
                text = None
            if text:
                self.offer(text)

    def step(self, timeout: float) -> None:
        try:
            text = self.events.get(timeout=timeout) if timeout > 0 else self.events.get_nowait()
        except queue.Empty:
            return
        if self.history.push(text):
            self.logger.debug(f"New clipboard entry ({len(text)} chars)")
            self.refresh()
