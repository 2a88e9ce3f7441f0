"""Cache package for per-source binary item caches."""

from .codec import FORMAT_VERSION, decode_items, encode_items
from .store import (
    APPS_CACHE,
    CLIPBOARD_CACHE,
    HOMEBREW_CACHE,
    NIXPKGS_CACHE,
    CacheStore,
    default_cache_dir,
)

__all__ = [
    'CacheStore',
    'default_cache_dir',
    'encode_items',
    'decode_items',
    'FORMAT_VERSION',
    'APPS_CACHE',
    'HOMEBREW_CACHE',
    'CLIPBOARD_CACHE',
    'NIXPKGS_CACHE',
]
