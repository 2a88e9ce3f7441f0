"""Nixpkgs daemon: one-shot download of the full package index."""

from typing import List, Optional

import httpx

from ..cache.store import NIXPKGS_CACHE, CacheStore
from ..catalog.models import Item
from ..exceptions import FetchError
from ..registries.http import build_client
from ..registries.nixpkgs import NixpkgsClient
from .base import OneShotDaemon

BATCH_SIZE = 5000


class NixpkgsDaemon(OneShotDaemon):
    """Pages through the index with ``search_after`` until a short batch."""

    name = "nixpkgs"
    cache_key = NIXPKGS_CACHE

    def __init__(
        self,
        store: Optional[CacheStore] = None,
        client: Optional[httpx.Client] = None,
        batch_size: int = BATCH_SIZE,
    ):
        super().__init__(store)
        self.client = client
        self.batch_size = batch_size

    def fetch(self) -> List[Item]:
        if self.client is None:
            from ..config import FETCH_TIMEOUT
            self.client = build_client(FETCH_TIMEOUT)
        nixpkgs = NixpkgsClient(self.client)

        items: List[Item] = []
        search_after = None
        try:
            while True:
                batch, last_sort = nixpkgs.fetch_batch(self.batch_size, search_after)
                items.extend(batch)
                self.logger.info(f"Fetched {len(items)} packages so far...")
                if len(batch) < self.batch_size or last_sort is None:
                    break
                search_after = last_sort
        except (httpx.HTTPError, ValueError, TypeError, AttributeError) as e:
            raise FetchError(f"nixpkgs fetch failed: {e}") from e
        return items
