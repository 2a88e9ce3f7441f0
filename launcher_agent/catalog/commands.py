"""Custom commands loaded from a TOML file."""

import os
import tomllib
from dataclasses import dataclass
from typing import List, Optional

from ..exceptions import CommandsConfigError
from ..utils.log import get_logger
from .models import Item, SearchMode

logger = get_logger("launcher")

DEFAULT_COMMANDS = '''# Custom commands for launcher-agent
# Add your own commands here

[[command]]
name = "Empty Trash"
action = "osascript -e 'tell application \\"Finder\\" to empty trash'"

[[command]]
name = "Show Trash"
action = "osascript -e 'tell application \\"Finder\\" to open trash' && open -a finder"

[[command]]
name = "Restart"
action = "osascript -e 'tell application \\"System Events\\" to restart'"

[[command]]
name = "Shut Down"
action = "osascript -e 'tell application \\"System Events\\" to shut down'"

[[command]]
name = "Sleep"
action = "osascript -e 'tell application \\"System Events\\" to sleep'"

[[command]]
name = "Lock Screen"
action = "pmset displaysleepnow"
'''

# Entries that switch the search mode instead of running anything
MODE_SWITCH_ITEMS = [
    Item.mode_switch("Clipboard History", SearchMode.CLIPBOARD_HISTORY),
    Item.mode_switch("Search Nixpkgs", SearchMode.NIXPKGS_SEARCH),
    Item.mode_switch("Search Crates", SearchMode.CRATES_SEARCH),
    Item.mode_switch("Search Homebrew", SearchMode.HOMEBREW_SEARCH),
]


@dataclass
class CustomCommand:
    name: str
    action: str


def load_commands(path: Optional[str] = None) -> List[CustomCommand]:
    """
    Load custom commands, creating the default file on first use.

    Args:
        path: Commands file (defaults to LAUNCHER_AGENT_COMMANDS_FILE)

    Returns:
        Commands in file order

    Raises:
        CommandsConfigError: If the file is not valid TOML or an entry is malformed
        OSError: If the file cannot be read or the default cannot be written
    """
    if path is None:
        from ..config import COMMANDS_FILE
        path = COMMANDS_FILE

    if not os.path.exists(path):
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(DEFAULT_COMMANDS)
        logger.info(f"Created default commands config at: {path}")

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise CommandsConfigError(f"Invalid commands file {path}: {e}") from e

    commands = []
    for entry in data.get("command", []):
        if not isinstance(entry, dict) or not isinstance(entry.get("name"), str) \
                or not isinstance(entry.get("action"), str):
            raise CommandsConfigError(f"Command entries need string 'name' and 'action': {entry!r}")
        commands.append(CustomCommand(name=entry["name"], action=entry["action"]))
    return commands


def command_items(path: Optional[str] = None) -> List[Item]:
    """System-command items for every custom command, followed by the mode switches."""
    items = [Item.system_command(cmd.name, cmd.action) for cmd in load_commands(path)]
    return items + list(MODE_SWITCH_ITEMS)
