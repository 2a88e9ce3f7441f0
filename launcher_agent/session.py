"""Launcher session: query, selection, search mode and incoming reloads."""

import time
from typing import Callable, Dict, List, Optional

from .cache.store import CacheStore
from .catalog.calculator import Calculator
from .catalog.loader import load_clipboard_items, load_items
from .catalog.models import Item, SearchMode
from .catalog.modes import RemoteSearch, SearchModeMachine
from .executor import ExecutionOutcome, ItemExecutor
from .ipc.coordinator import InstanceCoordinator
from .ipc.messages import ReloadMessage
from .registries import CratesSearch, HomebrewIndex, NixpkgsSearch
from .utils.log import get_logger

logger = get_logger("launcher")


def default_remote_searches(store: CacheStore) -> Dict[SearchMode, RemoteSearch]:
    """One search per remote mode; the Homebrew index is built once per process here."""
    return {
        SearchMode.NIXPKGS_SEARCH: NixpkgsSearch(),
        SearchMode.CRATES_SEARCH: CratesSearch(),
        SearchMode.HOMEBREW_SEARCH: HomebrewIndex(store),
    }


class LauncherSession:
    """State behind one launcher window.

    The rendering layer feeds keystrokes through ``set_query`` and
    ``move_cursor``, calls ``tick`` from its redraw timer and reads
    ``prompt``, ``query``, ``results``, ``cursor`` and ``status`` back.
    Everything runs on the caller's thread.
    """

    def __init__(
        self,
        request: ReloadMessage,
        store: Optional[CacheStore] = None,
        coordinator: Optional[InstanceCoordinator] = None,
        executor: Optional[ItemExecutor] = None,
        calculator: Optional[Calculator] = None,
        remote_searches: Optional[Dict[SearchMode, RemoteSearch]] = None,
        commands_file: Optional[str] = None,
        debounce_interval: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        from .config import PROMPT, SEARCH_DEBOUNCE

        self.store = store or CacheStore()
        self.coordinator = coordinator
        self.executor = executor or ItemExecutor()
        self.commands_file = commands_file

        self.request = request
        self.prompt = request.prompt or PROMPT
        self.query = ""
        self.cursor = 0

        self.machine = SearchModeMachine(
            load_items(request, self.store, commands_file),
            calculator if calculator is not None else Calculator(),
            remote_searches if remote_searches is not None else default_remote_searches(self.store),
            lambda: load_clipboard_items(self.store),
            debounce_interval if debounce_interval is not None else SEARCH_DEBOUNCE,
            clock,
        )

    @property
    def mode(self) -> SearchMode:
        return self.machine.mode

    @property
    def results(self) -> List[Item]:
        return self.machine.results

    @property
    def status(self) -> Optional[str]:
        return self.machine.status(self.query)

    @property
    def selected(self) -> Optional[Item]:
        results = self.results
        if not results:
            return None
        return results[min(self.cursor, len(results) - 1)]

    def set_query(self, query: str) -> None:
        self.query = query
        self.cursor = 0
        self.machine.on_query_changed(query)

    def move_cursor(self, delta: int) -> None:
        if not self.results:
            self.cursor = 0
            return
        self.cursor = max(0, min(self.cursor + delta, len(self.results) - 1))

    def handle_reload(self, message: ReloadMessage) -> None:
        """
        Apply a reload request from a secondary launch or a self-reload command.

        Clears the query and selection, reloads the requested sources,
        applies any prompt override and returns to Normal mode.
        """
        logger.info("Reloading sources")
        self.request = message
        self.query = ""
        self.cursor = 0
        if message.prompt is not None:
            self.prompt = message.prompt
        self.machine.reset(load_items(message, self.store, self.commands_file))

    def tick(self) -> bool:
        """
        Periodic work: apply queued reloads, then fire a due remote search.

        Returns:
            True if anything visible changed
        """
        changed = False
        if self.coordinator is not None:
            for message in self.coordinator.messages():
                self.handle_reload(message)
                changed = True

        if self.machine.tick(self.query):
            self.cursor = 0
            changed = True
        return changed

    def execute_selected(self) -> Optional[ExecutionOutcome]:
        """
        Execute the highlighted item.

        Returns:
            The outcome, or None if nothing is selected

        Raises:
            ExecutionError: If the launch or clipboard write fails
        """
        item = self.selected
        if item is None:
            return None

        outcome = self.executor.execute(item)
        if outcome.mode is not None:
            self.machine.enter(outcome.mode)
            self.query = ""
            self.cursor = 0
        elif outcome.reload is not None:
            self.handle_reload(outcome.reload)
        return outcome
