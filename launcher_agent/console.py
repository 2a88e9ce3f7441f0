"""Line-oriented front end: stdin lines become queries, ``!N`` runs result N."""

import sys
import threading
import time
from queue import Empty, Queue
from typing import List, Optional, TextIO

from .exceptions import ExecutionError
from .session import LauncherSession
from .utils.log import get_logger

logger = get_logger("launcher")

_EOF = None


class ConsoleFrontend:
    """Drives a session from a text stream.

    A reader thread pushes input lines into a queue; the main loop drains it
    between ticks, the same way keystrokes arrive from a window.
    """

    def __init__(
        self,
        session: LauncherSession,
        stdin: TextIO = sys.stdin,
        stdout: TextIO = sys.stdout,
        tick_interval: Optional[float] = None,
        max_rows: int = 10,
    ):
        from .config import TICK_INTERVAL

        self.session = session
        self.stdin = stdin
        self.stdout = stdout
        self.tick_interval = tick_interval or TICK_INTERVAL
        self.max_rows = max_rows
        self._lines: "Queue[Optional[str]]" = Queue()

    def _read_loop(self) -> None:
        for line in self.stdin:
            self._lines.put(line.rstrip("\n"))
        self._lines.put(_EOF)

    def _drain(self) -> List[Optional[str]]:
        collected: List[Optional[str]] = []
        while True:
            try:
                collected.append(self._lines.get_nowait())
            except Empty:
                return collected

    def render(self) -> None:
        session = self.session
        out = self.stdout
        out.write(f"\n{session.prompt}{session.query}\n")
        if session.status:
            out.write(f"  {session.status}\n")
        for index, item in enumerate(session.results[:self.max_rows], start=1):
            marker = ">" if index - 1 == session.cursor else " "
            out.write(f"{marker} {index:2d}. {item.name}\n")
        out.flush()

    def handle_line(self, line: str) -> bool:
        """
        Apply one input line.

        Returns:
            False once an executed item asks the launcher to exit
        """
        if line.startswith("!") and line[1:].strip().isdigit():
            index = int(line[1:].strip()) - 1
            if not 0 <= index < len(self.session.results):
                self.stdout.write(f"No result {index + 1}\n")
                return True
            self.session.cursor = index
            try:
                outcome = self.session.execute_selected()
            except ExecutionError as e:
                logger.error(f"Execution failed: {e}")
                return True
            return not (outcome is not None and outcome.exit)

        self.session.set_query(line)
        return True

    def run(self) -> int:
        reader = threading.Thread(target=self._read_loop, daemon=True)
        reader.start()
        self.render()

        while True:
            changed = False
            for line in self._drain():
                if line is _EOF:
                    return 0
                if not self.handle_line(line):
                    return 0
                changed = True

            if self.session.tick():
                changed = True
            if changed:
                self.render()
            time.sleep(self.tick_interval)
