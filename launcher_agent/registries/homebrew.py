"""Homebrew formulae/cask index and the Homebrew search mode."""

import threading
from typing import List, Optional

import httpx

from ..cache.store import HOMEBREW_CACHE, CacheStore
from ..catalog.models import Item
from ..exceptions import FetchError
from ..utils.log import get_logger
from .http import build_client

FORMULA_URL = "https://formulae.brew.sh/api/formula.json"
CASK_URL = "https://formulae.brew.sh/api/cask.json"

logger = get_logger("launcher")


def formula_item(formula: dict) -> Optional[Item]:
    name = formula.get("name")
    if not name:
        return None
    version = (formula.get("versions") or {}).get("stable")
    display = f"{name} v{version}" if version else name
    url = formula.get("homepage") or f"https://formulae.brew.sh/formula/{name}"
    return Item.homebrew_package(display, url)


def cask_item(cask: dict) -> Optional[Item]:
    token = cask.get("token")
    if not token:
        return None
    names = cask.get("name") or []
    display_name = names[0] if names else token
    version = cask.get("version")
    display = f"{display_name} (cask) v{version}" if version else f"{display_name} (cask)"
    url = cask.get("homepage") or f"https://formulae.brew.sh/cask/{token}"
    return Item.homebrew_package(display, url)


def fetch_homebrew(client: httpx.Client) -> List[Item]:
    """
    Download every formula and cask.

    Raises:
        FetchError: On transport errors, HTTP errors or bad JSON
    """
    items: List[Item] = []
    try:
        logger.info("Fetching formulae...")
        response = client.get(FORMULA_URL)
        response.raise_for_status()
        items.extend(filter(None, (formula_item(f) for f in response.json())))

        logger.info("Fetching casks...")
        response = client.get(CASK_URL)
        response.raise_for_status()
        items.extend(filter(None, (cask_item(c) for c in response.json())))
    except (httpx.HTTPError, ValueError, TypeError, AttributeError) as e:
        raise FetchError(f"Homebrew fetch failed: {e}") from e
    return items


class HomebrewIndex:
    """Package list for the Homebrew search mode.

    Built once per process and passed to the search mode. The list is read
    from the homebrew daemon's cache on first search and downloaded only
    when that cache is missing or stale.
    """

    def __init__(
        self,
        store: CacheStore,
        ttl: Optional[float] = None,
        client: Optional[httpx.Client] = None,
    ):
        from ..config import FETCH_TIMEOUT, HOMEBREW_TTL

        self.store = store
        self.ttl = ttl if ttl is not None else HOMEBREW_TTL
        self._client = client
        self._fetch_timeout = FETCH_TIMEOUT
        self._packages: Optional[List[Item]] = None
        self._lock = threading.Lock()

    @property
    def packages(self) -> List[Item]:
        with self._lock:
            if self._packages is None:
                self._packages = self._load()
            return self._packages

    def _load(self) -> List[Item]:
        cached = self.store.load(HOMEBREW_CACHE, self.ttl)
        if cached is not None:
            return cached

        logger.info("Downloading Homebrew data...")
        client = self._client or build_client(self._fetch_timeout)
        try:
            packages = fetch_homebrew(client)
        except FetchError as e:
            logger.error(f"Failed to download Homebrew data: {e}")
            return []

        try:
            self.store.save(HOMEBREW_CACHE, packages)
        except OSError as e:
            logger.warning(f"Warning: Failed to save Homebrew cache: {e}")
        return packages

    def search(self, query: str) -> List[Item]:
        """Packages whose display name contains the query, case-insensitively."""
        query_lower = query.strip().lower()
        if not query_lower:
            return []
        return [item for item in self.packages if query_lower in item.name.lower()]

    __call__ = search
