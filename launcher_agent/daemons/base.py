"""Base classes for the per-source cache daemons."""

import queue
import threading
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, List, Optional

from ..cache.store import CacheStore
from ..catalog.models import Item
from ..exceptions import FetchError
from ..utils.log import get_logger


class SourceDaemon(ABC):
    """Fetches one source and persists it under a fixed cache key."""

    name: str = ""
    cache_key: str = ""

    def __init__(self, store: Optional[CacheStore] = None):
        self.store = store or CacheStore()
        self.logger = get_logger(f"{self.name} daemon")

    @abstractmethod
    def fetch(self) -> List[Item]:
        """
        Produce the source's current items.

        Raises:
            FetchError: If the external collaborator fails
        """

    def persist(self, items: List[Item]) -> None:
        path = self.store.save(self.cache_key, items)
        self.logger.info(f"Saved {len(items)} items to {path}")

    def refresh(self) -> bool:
        """
        Fetch and persist once, logging instead of raising.

        Returns:
            True if the cache was rewritten
        """
        try:
            self.persist(self.fetch())
            return True
        except FetchError as e:
            self.logger.error(f"Failed to fetch: {e}")
        except OSError as e:
            self.logger.error(f"Failed to save: {e}")
        return False

    @abstractmethod
    def run(self) -> int:
        """Run the daemon; returns the process exit status."""


class OneShotDaemon(SourceDaemon):
    """Fetches once and exits; an external scheduler re-invokes it."""

    def run(self) -> int:
        self.logger.info("Starting...")
        if not self.refresh():
            return 1
        self.logger.info("Complete")
        return 0


class ContinuousDaemon(SourceDaemon):
    """Keeps a cache fresh until stopped.

    A background producer (filesystem watcher, clipboard poller) pushes
    events into a bounded queue; ``run`` consumes them on the calling thread
    through ``step``. Fetch failures are logged and never end the loop.
    """

    queue_size = 256

    def __init__(self, store: Optional[CacheStore] = None, clock: Callable[[], float] = time.monotonic):
        super().__init__(store)
        self.clock = clock
        self.events: "queue.Queue[Any]" = queue.Queue(maxsize=self.queue_size)
        self._stop_event = threading.Event()

    @property
    def running(self) -> bool:
        return not self._stop_event.is_set()

    def offer(self, event: Any) -> None:
        """Hand an event to the main loop; drops it if the queue is full."""
        try:
            self.events.put_nowait(event)
        except queue.Full:
            self.logger.debug("Event queue full, dropping event")

    def stop(self) -> None:
        self._stop_event.set()

    def initialize(self) -> None:
        """Initial fetch and persist before the loop starts."""
        self.refresh()

    @abstractmethod
    def start_producer(self) -> None:
        """Start the background thread feeding ``events``."""

    @abstractmethod
    def stop_producer(self) -> None:
        """Stop the background thread."""

    @abstractmethod
    def step(self, timeout: float) -> None:
        """Consume pending events for at most ``timeout`` seconds."""

    def run(self) -> int:
        self.logger.info("Starting...")
        self.initialize()
        self.start_producer()
        self.logger.info("Ready, watching for changes...")
        try:
            while self.running:
                self.step(timeout=0.5)
        except KeyboardInterrupt:
            self.logger.info("Interrupted")
        finally:
            self.stop_producer()
        return 0
