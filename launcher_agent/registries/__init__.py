"""Remote package registries used by the search modes and one-shot daemons."""

from .crates import CratesSearch, format_downloads
from .homebrew import HomebrewIndex, fetch_homebrew
from .http import build_client
from .nixpkgs import NixpkgsClient, NixpkgsSearch

__all__ = [
    'build_client',
    'CratesSearch',
    'format_downloads',
    'HomebrewIndex',
    'fetch_homebrew',
    'NixpkgsClient',
    'NixpkgsSearch',
]
