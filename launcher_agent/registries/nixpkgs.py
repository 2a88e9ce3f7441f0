"""search.nixos.org client: interactive search and full-index paging."""

import re
from typing import List, Optional, Tuple

import httpx

from ..catalog.models import Item
from ..exceptions import RemoteSearchError
from ..utils.log import get_logger
from .http import build_client

VERSION_URL = "https://raw.githubusercontent.com/NixOS/nixos-search/main/version.nix"
SEARCH_URL_TEMPLATE = "https://search.nixos.org/backend/latest-{frontend}-nixos-unstable/_search"
# Public read-only credentials used by the search.nixos.org frontend
AUTH_HEADER = "Basic YVdWU0FMWHBadjpYOGdQSG56TDUyd0ZFZWt1eHNmUTljU2g="

_FRONTEND = re.compile(r'frontend\s*=\s*"([^"]+)"\s*;')

QUERY_FIELDS = [
    "package_attr_name^9",
    "package_attr_name.edge^9",
    "package_pname^6",
    "package_pname.edge^6",
    "package_attr_name_query^4",
    "package_attr_name_query.edge^4",
    "package_description^1.3",
    "package_description.edge^1.3",
    "package_longDescription^1",
    "package_longDescription.edge^1",
    "flake_name^0.5",
    "flake_name.edge^0.5",
]

logger = get_logger("launcher")


def parse_frontend_version(text: str) -> str:
    """
    Extract the frontend version from nixos-search's version.nix.

    Raises:
        ValueError: If no ``frontend = "...";`` line is present
    """
    match = _FRONTEND.search(text)
    if not match:
        raise ValueError("Cannot parse frontend version from version.nix")
    return match.group(1)


def build_search_query(query: str, size: int = 50) -> dict:
    """Elasticsearch body for an interactive package search."""
    reversed_query = query[::-1]
    multi_match = {
        "type": "cross_fields",
        "analyzer": "whitespace",
        "auto_generate_synonyms_phrase_query": False,
        "operator": "and",
        "fields": QUERY_FIELDS,
    }
    return {
        "size": size,
        "sort": [{"_score": "desc"}, {"package_attr_name": "desc"}, {"package_pversion": "desc"}],
        "query": {
            "bool": {
                "filter": [{"term": {"type": {"value": "package", "_name": "filter_packages"}}}],
                "must": [{
                    "dis_max": {
                        "tie_breaker": 0.7,
                        "queries": [
                            {"multi_match": dict(multi_match, query=query, _name=f"multi_match_{query}")},
                            {"multi_match": dict(multi_match, query=reversed_query,
                                                 _name=f"multi_match_{reversed_query}")},
                            {"wildcard": {"package_attr_name": {"value": f"*{query}*"}}},
                        ],
                    }
                }],
            }
        },
    }


def _truncate(text: str, limit: int = 80) -> str:
    return text if len(text) <= limit else f"{text[:limit]}..."


def parse_search_hits(payload: dict) -> List[Item]:
    """Turn an interactive search response into NixPackage items (value = attr name)."""
    items = []
    for hit in payload.get("hits", {}).get("hits", []):
        source = hit.get("_source", {})
        attr = source.get("package_attr_name")
        if not attr:
            continue
        description = source.get("package_description")
        display = f"{attr} - {_truncate(description)}" if description else attr
        items.append(Item.nix_package(display, attr))
    return items


def parse_index_hits(payload: dict) -> Tuple[List[Item], Optional[list]]:
    """
    Turn a paged index response into NixPackage items.

    Returns:
        (items, sort key of the last hit for ``search_after``, or None)
    """
    items = []
    last_sort = None
    for hit in payload.get("hits", {}).get("hits", []):
        source = hit.get("_source", {})
        attr = source.get("package_attr_name")
        if not attr:
            continue
        pname = source.get("package_pname") or attr
        version = source.get("package_pversion")
        display = f"{pname} v{version}" if version else pname
        items.append(Item.nix_package(display, f"https://search.nixos.org/packages?channel=unstable&query={attr}"))
        last_sort = hit.get("sort") or last_sort
    return items, last_sort


class NixpkgsClient:
    """Talks to the search.nixos.org Elasticsearch backend."""

    def __init__(self, client: httpx.Client):
        self.client = client
        self._search_url: Optional[str] = None

    def search_url(self) -> str:
        """Backend URL for the current frontend version (fetched once per client)."""
        if self._search_url is None:
            response = self.client.get(VERSION_URL)
            response.raise_for_status()
            frontend = parse_frontend_version(response.text)
            self._search_url = SEARCH_URL_TEMPLATE.format(frontend=frontend)
            logger.debug(f"Using nixpkgs search URL: {self._search_url}")
        return self._search_url

    def post(self, body: dict) -> dict:
        response = self.client.post(
            self.search_url(),
            json=body,
            headers={"Authorization": AUTH_HEADER},
        )
        response.raise_for_status()
        return response.json()

    def fetch_batch(self, size: int, search_after: Optional[list] = None) -> Tuple[List[Item], Optional[list]]:
        """One page of the full package index, ordered by attribute name."""
        body = {
            "size": size,
            "sort": [{"package_attr_name": "asc"}],
            "query": {"bool": {"filter": [{"term": {"type": {"value": "package"}}}]}},
        }
        if search_after is not None:
            body["search_after"] = search_after
        return parse_index_hits(self.post(body))


class NixpkgsSearch:
    """Interactive search for the Nixpkgs search mode."""

    def __init__(self, client: Optional[httpx.Client] = None, timeout: Optional[float] = None):
        if client is None:
            from ..config import SEARCH_TIMEOUT
            client = build_client(timeout or SEARCH_TIMEOUT)
        self.nixpkgs = NixpkgsClient(client)

    def __call__(self, query: str) -> List[Item]:
        """
        Search nixpkgs.

        Raises:
            RemoteSearchError: On transport errors, HTTP errors or bad payloads
        """
        if not query.strip():
            return []
        try:
            return parse_search_hits(self.nixpkgs.post(build_search_query(query)))
        except (httpx.HTTPError, ValueError, TypeError, AttributeError) as e:
            raise RemoteSearchError(f"nixpkgs search failed: {e}") from e
