"""Search-mode state machine and remote-search debouncing."""

import time
from typing import Callable, Dict, Iterable, List, Optional

from ..exceptions import RemoteSearchError
from ..utils.log import get_logger
from .calculator import Calculator
from .catalog import Catalog
from .models import Item, SearchMode

RemoteSearch = Callable[[str], List[Item]]

STATUS_SEARCHING = "Searching..."
STATUS_NO_RESULTS = "No results"
STATUS_FAILED = "Search failed"

logger = get_logger("launcher")


class RemoteSearchDebouncer:
    """Decides when a remote search should actually run.

    Keystrokes only record a timestamp and mark the search pending. The
    periodic tick fires the search once the debounce interval has passed
    since the last keystroke and the query differs from the last one
    searched. Nothing is cancelled: a slow request finishes, and the next
    tick after a newer keystroke issues a fresh one.
    """

    def __init__(self, search: RemoteSearch, interval: float, clock: Callable[[], float] = time.monotonic):
        self.search = search
        self.interval = interval
        self.clock = clock
        self.pending = False
        self.last_keystroke: Optional[float] = None
        self.last_searched: Optional[str] = None
        self.failed_query: Optional[str] = None

    def keystroke(self) -> None:
        self.last_keystroke = self.clock()
        self.pending = True

    def due(self) -> bool:
        if not self.pending or self.last_keystroke is None:
            return False
        return self.clock() - self.last_keystroke >= self.interval

    def tick(self, query: str) -> Optional[List[Item]]:
        """
        Run the search if it is due.

        Returns:
            New results if a search ran and succeeded, otherwise None
        """
        if not self.due():
            return None

        self.pending = False
        if query == self.last_searched:
            return None
        if not query.strip():
            self.last_searched = query
            return []

        try:
            results = self.search(query)
        except RemoteSearchError as e:
            logger.error(f"Remote search for {query!r} failed: {e}")
            self.failed_query = query
            return None

        self.failed_query = None
        self.last_searched = query
        return results


class SearchModeMachine:
    """Owns the active search mode, its catalog and the current results.

    Normal mode searches the configured sources with the calculator overlay;
    clipboard mode searches the persisted clipboard list without it; the
    remote modes start empty and fill the catalog from a registry API.
    Only selecting a mode-switch item leaves Normal, and only a reload
    (``reset``) returns to it.
    """

    def __init__(
        self,
        normal_items: Iterable[Item],
        calculator: Optional[Calculator],
        remote_searches: Dict[SearchMode, RemoteSearch],
        clipboard_loader: Callable[[], List[Item]],
        debounce_interval: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.calculator = calculator
        self.remote_searches = remote_searches
        self.clipboard_loader = clipboard_loader
        self.debounce_interval = debounce_interval
        self.clock = clock

        self.mode = SearchMode.NORMAL
        self.catalog = Catalog(normal_items, calculator)
        self.debouncer: Optional[RemoteSearchDebouncer] = None
        self.results: List[Item] = self.catalog.search("")

    def reset(self, normal_items: Iterable[Item]) -> None:
        """Back to Normal mode with a freshly loaded catalog."""
        self.mode = SearchMode.NORMAL
        self.catalog = Catalog(normal_items, self.calculator)
        self.debouncer = None
        self.results = self.catalog.search("")

    def enter(self, mode: SearchMode) -> None:
        """
        Switch to a mode chosen through a mode-switch item.

        Raises:
            ValueError: If no search is configured for a remote mode
        """
        if mode is SearchMode.NORMAL:
            raise ValueError("Normal mode is only re-entered through a reload")

        if mode is SearchMode.CLIPBOARD_HISTORY:
            self.catalog = Catalog(self.clipboard_loader(), None)
            self.debouncer = None
            self.results = self.catalog.search("")
        else:
            if mode not in self.remote_searches:
                raise ValueError(f"No remote search configured for {mode.value}")
            self.catalog = Catalog([], None)
            self.debouncer = RemoteSearchDebouncer(self.remote_searches[mode], self.debounce_interval, self.clock)
            self.results = []

        logger.info(f"Entered {mode.value} mode")
        self.mode = mode

    def on_query_changed(self, query: str) -> None:
        """Local modes search immediately; remote modes only arm the debounce."""
        if self.debouncer is not None:
            self.debouncer.keystroke()
        else:
            self.results = self.catalog.search(query)

    def tick(self, query: str) -> bool:
        """
        Periodic check, driven by the redraw timer.

        Returns:
            True if the results changed
        """
        if self.debouncer is None:
            return False
        results = self.debouncer.tick(query)
        if results is None:
            return False
        self.catalog.replace(results)
        self.results = self.catalog.items
        return True

    def status(self, query: str) -> Optional[str]:
        """Distinguishes 'not searched yet' from 'searched, nothing found' in remote modes."""
        if self.debouncer is None or not query.strip():
            return None
        if not self.debouncer.pending and self.debouncer.failed_query == query:
            return STATUS_FAILED
        if self.debouncer.pending or self.debouncer.last_searched != query:
            return STATUS_SEARCHING
        if not self.results:
            return STATUS_NO_RESULTS
        return None
