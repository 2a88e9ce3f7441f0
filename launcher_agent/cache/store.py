"""TTL-gated binary persistence of item lists under the platform cache directory."""

import os
import time
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

from ..catalog.models import Item
from ..exceptions import CacheError
from ..utils.log import get_logger
from .codec import decode_items, encode_items

APP_DIR_NAME = "launcher-agent"

# Fixed cache keys, one per source daemon
APPS_CACHE = "apps.bin"
HOMEBREW_CACHE = "homebrew.bin"
CLIPBOARD_CACHE = "clipboard.bin"
NIXPKGS_CACHE = "nixpkgs.bin"

logger = get_logger("cache")


def default_cache_dir() -> Path:
    """
    Resolve the cache directory.

    Order: LAUNCHER_AGENT_CACHE_DIR, then $XDG_CACHE_HOME/launcher-agent,
    then ~/.cache/launcher-agent.
    """
    from ..config import CACHE_DIR

    if CACHE_DIR:
        return Path(CACHE_DIR)
    xdg = os.environ.get("XDG_CACHE_HOME", "").strip()
    base = Path(xdg) if xdg else Path.home() / ".cache"
    return base / APP_DIR_NAME


class CacheStore:
    """Reads and writes one binary file per named source.

    There is no stored expiry: an entry is valid while the file's age (now
    minus mtime) is below the TTL the reader asks for.
    """

    def __init__(self, cache_dir: Optional[Union[str, Path]] = None, clock: Callable[[], float] = time.time):
        """
        Initialize the cache store.

        Args:
            cache_dir: Directory for cache files (defaults to default_cache_dir())
            clock: Wall-clock source compared against file mtimes
        """
        self._cache_dir = Path(cache_dir) if cache_dir is not None else None
        self._clock = clock

    @property
    def cache_dir(self) -> Path:
        """Cache directory; only ``save`` creates it."""
        return self._cache_dir if self._cache_dir is not None else default_cache_dir()

    def path_for(self, name: str) -> Path:
        return self.cache_dir / name

    def save(self, name: str, items: Sequence[Item]) -> Path:
        """
        Encode items and write them to ``cache_dir/name``.

        The file is replaced atomically so concurrent readers never see a
        partial payload. I/O failures propagate.

        Returns:
            Path of the written file
        """
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        path = self.path_for(name)
        tmp_path = path.with_name(f".{path.name}.{os.getpid()}.tmp")
        try:
            with open(tmp_path, "wb") as f:
                f.write(encode_items(items))
            os.replace(tmp_path, path)
        finally:
            if tmp_path.exists():
                tmp_path.unlink()
        logger.debug(f"Saved {len(items)} items to {name}")
        return path

    def age(self, name: str) -> Optional[float]:
        """Seconds since the entry was written, or None if it cannot be stat'ed."""
        try:
            mtime = self.path_for(name).stat().st_mtime
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning(f"Warning: Cannot stat cache {name}: {e}")
            return None
        return max(0.0, self._clock() - mtime)

    def load(self, name: str, ttl: Optional[float] = None) -> Optional[List[Item]]:
        """
        Load a named entry if it is still fresh.

        Args:
            name: Cache key (file name)
            ttl: Maximum age in seconds; None means the entry never expires

        Returns:
            The cached items, or None if the file is missing, too old, or
            cannot be decoded. All three mean "needs refresh".
        """
        age = self.age(name)
        if age is None:
            return None
        if ttl is not None and age >= ttl:
            logger.debug(f"Cache {name} expired ({age:.0f}s >= {ttl:.0f}s)")
            return None
        return self.load_file(self.path_for(name))

    def load_file(self, path: Union[str, Path]) -> Optional[List[Item]]:
        """
        Decode an arbitrary cache-format file (e.g. a custom source).

        Returns:
            The items, or None if the file is unreadable or corrupt
        """
        try:
            with open(path, "rb") as f:
                data = f.read()
        except OSError as e:
            logger.debug(f"Cannot read {path}: {e}")
            return None

        try:
            return decode_items(data)
        except CacheError as e:
            logger.warning(f"Warning: Ignoring cache file {path}: {e}")
            return None
