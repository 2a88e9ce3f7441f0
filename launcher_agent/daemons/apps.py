"""Applications daemon: scans app bundles and rescans when they change."""

import os
import plistlib
import queue
import time
from typing import Callable, Iterable, List, Optional

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from ..cache.store import APPS_CACHE, CacheStore
from ..catalog.models import Item
from .base import ContinuousDaemon

APP_DIRS = [
    "/Applications",
    "/Applications/Utilities",
    "/System/Applications",
    "/System/Applications/Utilities",
    os.path.expanduser("~/Applications"),
]

# Folders such as /Applications/Adobe hold bundles one level down
_MAX_DEPTH = 2

_QUALIFYING_EVENTS = {"created", "deleted", "moved", "modified"}


def read_bundle_info(bundle_path: str) -> dict:
    """Parsed Contents/Info.plist, or an empty dict if missing or unreadable."""
    plist_path = os.path.join(bundle_path, "Contents", "Info.plist")
    try:
        with open(plist_path, "rb") as f:
            info = plistlib.load(f)
    except (OSError, plistlib.InvalidFileException, ValueError):
        return {}
    return info if isinstance(info, dict) else {}


def bundle_display_name(bundle_path: str, info: dict) -> str:
    for key in ("CFBundleDisplayName", "CFBundleName"):
        value = info.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return os.path.basename(bundle_path.rstrip("/"))[:-4]


def scan_applications(directories: Iterable[str]) -> List[Item]:
    """
    Find .app bundles under the given directories.

    Args:
        directories: Directories to scan (missing ones are skipped)

    Returns:
        Application items sorted by name, one per bundle path
    """
    seen = set()
    items: List[Item] = []

    def visit(directory: str, depth: int) -> None:
        try:
            entries = sorted(os.scandir(directory), key=lambda e: e.name)
        except OSError:
            return
        for entry in entries:
            if not entry.is_dir():
                continue
            if entry.name.endswith(".app"):
                path = os.path.realpath(entry.path)
                if path in seen:
                    continue
                seen.add(path)
                info = read_bundle_info(entry.path)
                # Agents and helpers with no user-facing UI
                if info.get("LSBackgroundOnly"):
                    continue
                items.append(Item.application(bundle_display_name(entry.path, info), entry.path))
            elif depth < _MAX_DEPTH and not entry.name.startswith("."):
                visit(entry.path, depth + 1)

    for directory in directories:
        if os.path.isdir(directory):
            visit(directory, 1)

    items.sort(key=lambda item: item.name.lower())
    return items


class _BundleEventHandler(FileSystemEventHandler):
    """Forwards bundle-level filesystem events to the daemon's queue."""

    def __init__(self, offer: Callable[[str], None]):
        super().__init__()
        self._offer = offer

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.event_type not in _QUALIFYING_EVENTS:
            return
        paths = [event.src_path, getattr(event, "dest_path", "")]
        if any(".app" in os.fsdecode(p) for p in paths if p):
            self._offer(os.fsdecode(event.src_path))


class ApplicationsDaemon(ContinuousDaemon):
    """Keeps the applications cache in sync with the installed bundles.

    Rescans are debounced: a burst of events (an install touches hundreds
    of files) produces one rescan, once no event has arrived for
    ``debounce`` seconds.
    """

    name = "apps"
    cache_key = APPS_CACHE

    def __init__(
        self,
        store: Optional[CacheStore] = None,
        directories: Optional[List[str]] = None,
        debounce: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        super().__init__(store, clock)
        if debounce is None:
            from ..config import APPS_DEBOUNCE
            debounce = APPS_DEBOUNCE
        self.directories = directories if directories is not None else list(APP_DIRS)
        self.debounce = debounce
        self.last_event: Optional[float] = None
        self.dirty = False
        self._observer: Optional[Observer] = None

    def fetch(self) -> List[Item]:
        items = scan_applications(self.directories)
        self.logger.info(f"Found {len(items)} applications")
        return items

    def start_producer(self) -> None:
        observer = Observer()
        handler = _BundleEventHandler(self.offer)
        for directory in self.directories:
            if os.path.isdir(directory):
                observer.schedule(handler, directory, recursive=True)
                self.logger.debug(f"Watching {directory}")
        observer.start()
        self._observer = observer

    def stop_producer(self) -> None:
        if self._observer is not None:
            self._observer.stop()
            self._observer.join(timeout=2.0)
            self._observer = None

    def step(self, timeout: float) -> None:
        """Record incoming events, then rescan once the burst has settled."""
        if self.dirty and self.last_event is not None:
            remaining = self.debounce - (self.clock() - self.last_event)
            timeout = max(0.0, min(timeout, remaining))

        try:
            event = self.events.get(timeout=timeout) if timeout > 0 else self.events.get_nowait()
        except queue.Empty:
            event = None

        if event is not None:
            self.logger.debug(f"Change detected: {event}")
            self.last_event = self.clock()
            self.dirty = True
            # Drain the rest of the burst without waiting
            while True:
                try:
                    self.events.get_nowait()
                except queue.Empty:
                    break

        if self.dirty and self.clock() - self.last_event >= self.debounce:
            self.dirty = False
            self.logger.info("Rescanning applications...")
            self.refresh()
