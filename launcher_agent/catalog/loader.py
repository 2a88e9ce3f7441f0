"""Build the Normal-mode item list from cached sources and custom files."""

from typing import List, Optional

from ..cache.store import (
    APPS_CACHE,
    CLIPBOARD_CACHE,
    HOMEBREW_CACHE,
    NIXPKGS_CACHE,
    CacheStore,
)
from ..exceptions import CommandsConfigError
from ..ipc.messages import ReloadMessage
from ..utils.log import get_logger
from .commands import command_items
from .models import Item

logger = get_logger("launcher")


def load_items(
    request: ReloadMessage,
    store: CacheStore,
    commands_file: Optional[str] = None,
) -> List[Item]:
    """
    Load every source a request asks for, in a fixed order.

    Readers never apply a TTL here: the daemons own freshness, and stale data
    is better than an empty launcher. Missing or corrupt sources are skipped.

    Args:
        request: Which caches/files to load
        store: Cache store to read from
        commands_file: Custom commands file (defaults to config)

    Returns:
        Concatenated items: apps, homebrew, clipboard, nixpkgs, custom source
        files, then custom commands
    """
    items: List[Item] = []

    for enabled, name in (
        (request.apps, APPS_CACHE),
        (request.homebrew, HOMEBREW_CACHE),
        (request.clipboard, CLIPBOARD_CACHE),
        (request.nixpkgs, NIXPKGS_CACHE),
    ):
        if not enabled:
            continue
        loaded = store.load(name)
        if loaded is None:
            logger.warning(f"Warning: No usable cache for {name}; is its daemon running?")
            continue
        items.extend(loaded)

    for source in request.sources:
        loaded = store.load_file(source)
        if loaded is None:
            logger.warning(f"Warning: Could not load source file {source}")
            continue
        items.extend(loaded)

    if request.commands:
        try:
            items.extend(command_items(commands_file))
        except (CommandsConfigError, OSError) as e:
            logger.warning(f"Warning: Failed to load custom commands: {e}")

    logger.info(f"Loaded {len(items)} items")
    return items


def load_clipboard_items(store: CacheStore) -> List[Item]:
    """Persisted clipboard history, most recent first (empty if none yet)."""
    return store.load(CLIPBOARD_CACHE) or []
