"""System clipboard access through AppKit's general pasteboard."""

from typing import Optional

from ..exceptions import ExecutionError


class Pasteboard:
    """Thin wrapper over ``NSPasteboard.generalPasteboard()``.

    AppKit is imported on first use so that modules depending on this class
    stay importable on machines without PyObjC.
    """

    def __init__(self):
        self._board = None
        self._string_type = None

    def _general(self):
        if self._board is None:
            from AppKit import NSPasteboard, NSPasteboardTypeString

            self._board = NSPasteboard.generalPasteboard()
            self._string_type = NSPasteboardTypeString
        return self._board

    def change_count(self) -> int:
        """Monotonic counter the system bumps on every clipboard write."""
        return int(self._general().changeCount())

    def read_text(self) -> Optional[str]:
        """Current clipboard text, or None if it holds no string."""
        text = self._general().stringForType_(self._string_type)
        return str(text) if text is not None else None

    def write_text(self, text: str) -> None:
        board = self._general()
        board.clearContents()
        if not board.setString_forType_(text, self._string_type):
            raise ExecutionError("Failed to copy to clipboard")
