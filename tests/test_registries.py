# Tests for the crates.io, nixpkgs and Homebrew registry clients

import json

import httpx
import pytest

from launcher_agent.cache.store import HOMEBREW_CACHE
from launcher_agent.catalog.models import Item, ItemType
from launcher_agent.exceptions import RemoteSearchError
from launcher_agent.registries import CratesSearch, HomebrewIndex, NixpkgsSearch, format_downloads
from launcher_agent.registries.homebrew import CASK_URL, FORMULA_URL, cask_item, formula_item
from launcher_agent.registries.http import USER_AGENT, build_client
from launcher_agent.registries.nixpkgs import (
    AUTH_HEADER,
    VERSION_URL,
    build_search_query,
    parse_frontend_version,
    parse_search_hits,
)


VERSION_NIX = '{\n  import = "44";\n  frontend = "44";\n}\n'

FORMULAE = [
    {"name": "git", "versions": {"stable": "2.44.0"}, "homepage": "https://git-scm.com"},
    {"name": "ripgrep", "versions": {"stable": "14.1.0"}, "homepage": None},
]
CASKS = [
    {"token": "firefox", "name": ["Firefox"], "version": "124.0", "homepage": "https://www.mozilla.org/firefox/"},
]


def mock_client(handler):
    return httpx.Client(transport=httpx.MockTransport(handler))


def test_format_downloads():
    assert format_downloads(999) == "999"
    assert format_downloads(1500) == "1.5K"
    assert format_downloads(42_100_000) == "42.1M"


def test_build_client_sets_user_agent_and_timeout():
    client = build_client(5.0)
    assert client.headers["User-Agent"] == USER_AGENT
    assert client.timeout.read == 5.0


def test_crates_search_parses_results():
    seen = {}

    def handler(request):
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json={"crates": [
            {"name": "serde", "max_version": "1.0.197", "downloads": 1_500_000},
            {"name": "serde_json", "max_version": "1.0.114", "downloads": 900},
        ]})

    items = CratesSearch(client=mock_client(handler))("serde")

    assert seen["params"] == {"page": "1", "per_page": "100", "q": "serde"}
    assert [item.name for item in items] == ["serde v1.0.197 (↓ 1.5M)", "serde_json v1.0.114 (↓ 900)"]
    assert items[0].value == "https://crates.io/crates/serde"
    assert items[0].type is ItemType.RUST_CRATE


def test_crates_search_http_error_raises():
    search = CratesSearch(client=mock_client(lambda request: httpx.Response(503)))
    with pytest.raises(RemoteSearchError):
        search("serde")


@pytest.mark.parametrize("payload", [{"crates": None}, [], {"crates": ["serde"]}])
def test_crates_search_unexpected_payload_raises(payload):
    search = CratesSearch(client=mock_client(lambda request: httpx.Response(200, json=payload)))
    with pytest.raises(RemoteSearchError):
        search("serde")


def test_parse_frontend_version():
    assert parse_frontend_version(VERSION_NIX) == "44"
    with pytest.raises(ValueError):
        parse_frontend_version("{ }")


def test_search_query_embeds_query_and_size():
    body = build_search_query("ripgrep")
    assert body["size"] == 50
    queries = body["query"]["bool"]["must"][0]["dis_max"]["queries"]
    assert queries[0]["multi_match"]["query"] == "ripgrep"
    assert queries[1]["multi_match"]["query"] == "perggpir"
    assert queries[2]["wildcard"]["package_attr_name"]["value"] == "*ripgrep*"


def test_parse_search_hits_truncates_descriptions():
    payload = {"hits": {"hits": [
        {"_source": {"package_attr_name": "hello", "package_description": "A program that says hello"}},
        {"_source": {"package_attr_name": "long", "package_description": "d" * 100}},
        {"_source": {"package_attr_name": "bare"}},
        {"_source": {}},
    ]}}
    items = parse_search_hits(payload)
    assert [item.value for item in items] == ["hello", "long", "bare"]
    assert items[0].name == "hello - A program that says hello"
    assert items[1].name == "long - " + "d" * 80 + "..."
    assert items[2].name == "bare"


def test_nixpkgs_search_discovers_backend_url():
    requests = []

    def handler(request):
        requests.append(request)
        if str(request.url) == VERSION_URL:
            return httpx.Response(200, text=VERSION_NIX)
        return httpx.Response(200, json={"hits": {"hits": [
            {"_source": {"package_attr_name": "ripgrep", "package_description": "Fast grep"}},
        ]}})

    search = NixpkgsSearch(client=mock_client(handler))
    items = search("ripgrep")
    search("fd")

    assert [item.name for item in items] == ["ripgrep - Fast grep"]
    # version.nix is fetched once per client
    assert [r.method for r in requests] == ["GET", "POST", "POST"]
    post = requests[1]
    assert "latest-44-nixos-unstable" in str(post.url)
    assert post.headers["Authorization"] == AUTH_HEADER
    assert json.loads(post.content)["size"] == 50


def test_nixpkgs_search_failure_raises():
    search = NixpkgsSearch(client=mock_client(lambda request: httpx.Response(200, text="garbage")))
    with pytest.raises(RemoteSearchError):
        search("ripgrep")


@pytest.mark.parametrize("payload", [[], {"hits": None}, {"hits": {"hits": [None]}}])
def test_nixpkgs_search_unexpected_payload_raises(payload):
    def handler(request):
        if str(request.url) == VERSION_URL:
            return httpx.Response(200, text=VERSION_NIX)
        return httpx.Response(200, json=payload)

    search = NixpkgsSearch(client=mock_client(handler))
    with pytest.raises(RemoteSearchError):
        search("ripgrep")


def test_formula_and_cask_display():
    git = formula_item(FORMULAE[0])
    assert git.name == "git v2.44.0"
    assert git.value == "https://git-scm.com"
    assert formula_item(FORMULAE[1]).value == "https://formulae.brew.sh/formula/ripgrep"
    firefox = cask_item(CASKS[0])
    assert firefox.name == "Firefox (cask) v124.0"
    assert firefox.type is ItemType.HOMEBREW_PACKAGE


def homebrew_handler(request):
    if str(request.url) == FORMULA_URL:
        return httpx.Response(200, json=FORMULAE)
    if str(request.url) == CASK_URL:
        return httpx.Response(200, json=CASKS)
    return httpx.Response(404)


def test_homebrew_index_uses_fresh_cache(store):
    store.save(HOMEBREW_CACHE, [
        Item.homebrew_package("git v2.44.0", "https://git-scm.com"),
        Item.homebrew_package("GitHub Desktop (cask) v3.3", "https://desktop.github.com"),
        Item.homebrew_package("ripgrep v14.1.0", "https://github.com/BurntSushi/ripgrep"),
    ])

    def fail(request):
        raise AssertionError("cache hit must not touch the network")

    index = HomebrewIndex(store, ttl=3600, client=mock_client(fail))
    assert [item.name for item in index("GIT")] == ["git v2.44.0", "GitHub Desktop (cask) v3.3"]
    assert index("") == []


def test_homebrew_index_downloads_and_saves_on_miss(store):
    index = HomebrewIndex(store, ttl=3600, client=mock_client(homebrew_handler))
    assert [item.name for item in index.search("fire")] == ["Firefox (cask) v124.0"]
    assert len(store.load(HOMEBREW_CACHE)) == 3


def test_homebrew_index_download_failure_is_empty(store):
    index = HomebrewIndex(store, ttl=3600, client=mock_client(lambda request: httpx.Response(500)))
    assert index.search("git") == []
