"""crates.io search for the Crates search mode."""

from typing import List, Optional

import httpx

from ..catalog.models import Item
from ..exceptions import RemoteSearchError
from ..utils.log import get_logger
from .http import build_client

CRATES_API_URL = "https://crates.io/api/v1/crates"

logger = get_logger("launcher")


def format_downloads(downloads: int) -> str:
    """Format a download count with K/M suffixes (1500 -> 1.5K)."""
    if downloads >= 1_000_000:
        return f"{downloads / 1_000_000:.1f}M"
    if downloads >= 1_000:
        return f"{downloads / 1_000:.1f}K"
    return str(downloads)


def parse_crates(payload: dict) -> List[Item]:
    """Turn a crates.io search response into RustCrate items."""
    items = []
    for crate in payload.get("crates", []):
        name = crate.get("name")
        if not name:
            continue
        version = crate.get("max_version") or "?"
        downloads = format_downloads(int(crate.get("downloads") or 0))
        items.append(Item.rust_crate(
            f"{name} v{version} (↓ {downloads})",
            f"https://crates.io/crates/{name}",
        ))
    return items


class CratesSearch:
    """Searches crates.io; one request per debounced query, up to 100 results."""

    def __init__(self, client: Optional[httpx.Client] = None, timeout: Optional[float] = None):
        if client is None:
            from ..config import SEARCH_TIMEOUT
            client = build_client(timeout or SEARCH_TIMEOUT)
        self.client = client

    def __call__(self, query: str) -> List[Item]:
        """
        Search crates.io.

        Raises:
            RemoteSearchError: On transport errors, HTTP errors or bad JSON
        """
        if not query.strip():
            return []
        logger.debug(f"Searching crates.io: {query!r}")
        try:
            response = self.client.get(CRATES_API_URL, params={"page": 1, "per_page": 100, "q": query})
            response.raise_for_status()
            items = parse_crates(response.json())
        except (httpx.HTTPError, ValueError, TypeError, AttributeError) as e:
            raise RemoteSearchError(f"crates.io search failed: {e}") from e
        logger.debug(f"Found {len(items)} crates")
        return items
