"""Carries out the action behind a selected item."""

from dataclasses import dataclass
from typing import Optional

from .catalog.models import Item, ItemType, SearchMode
from .cli import parse_reload_action
from .exceptions import ExecutionError
from .ipc.messages import ReloadMessage
from .utils.log import get_logger
from .utils.pasteboard import Pasteboard
from .utils.shell import ShellExecutor

logger = get_logger("launcher")

_COPY_TYPES = {
    ItemType.CALCULATOR_RESULT,
    ItemType.CLIPBOARD_HISTORY,
    ItemType.NIX_PACKAGE,
}

_URL_TYPES = {
    ItemType.RUST_CRATE,
    ItemType.HOMEBREW_PACKAGE,
}


@dataclass
class ExecutionOutcome:
    """What the launcher should do after an item was executed.

    ``exit`` closes the launcher. ``mode`` and ``reload`` keep it open and
    change what it shows.
    """
    exit: bool = True
    mode: Optional[SearchMode] = None
    reload: Optional[ReloadMessage] = None


class ItemExecutor:
    """Dispatches on item type."""

    def __init__(self, shell: Optional[ShellExecutor] = None, pasteboard: Optional[Pasteboard] = None):
        self.shell = shell or ShellExecutor()
        self.pasteboard = pasteboard or Pasteboard()

    def execute(self, item: Item) -> ExecutionOutcome:
        """
        Execute an item.

        Args:
            item: The selected item

        Returns:
            Outcome telling the session whether to exit, switch mode or reload

        Raises:
            ExecutionError: If the launch or clipboard write fails
        """
        if item.type is ItemType.MODE_SWITCH:
            if item.mode is None:
                raise ExecutionError(f"Mode switch {item.name!r} has no target mode")
            return ExecutionOutcome(exit=False, mode=item.mode)

        if item.type is ItemType.APPLICATION:
            logger.info(f"Opening {item.name}")
            self.shell.open_path(item.value)
        elif item.type in _COPY_TYPES:
            self.pasteboard.write_text(item.value)
            logger.info(f"Copied {item.value[:40]!r} to clipboard")
        elif item.type in _URL_TYPES:
            self.shell.open_path(item.value)
        elif item.type is ItemType.SYSTEM_COMMAND:
            reload = parse_reload_action(item.value)
            if reload is not None:
                return ExecutionOutcome(exit=False, reload=reload)
            logger.info(f"Running {item.name}")
            self.shell.run_shell(item.value)
        else:
            raise ExecutionError(f"Don't know how to execute {item.type.value}")

        return ExecutionOutcome(exit=True)
