"""Homebrew daemon: one-shot download of all formulae and casks."""

from typing import List, Optional

import httpx

from ..cache.store import HOMEBREW_CACHE, CacheStore
from ..catalog.models import Item
from ..registries.homebrew import fetch_homebrew
from ..registries.http import build_client
from .base import OneShotDaemon


class HomebrewDaemon(OneShotDaemon):
    name = "homebrew"
    cache_key = HOMEBREW_CACHE

    def __init__(self, store: Optional[CacheStore] = None, client: Optional[httpx.Client] = None):
        super().__init__(store)
        self.client = client

    def fetch(self) -> List[Item]:
        if self.client is None:
            from ..config import FETCH_TIMEOUT
            self.client = build_client(FETCH_TIMEOUT)
        items = fetch_homebrew(self.client)
        self.logger.info(f"Fetched {len(items)} packages")
        return items
