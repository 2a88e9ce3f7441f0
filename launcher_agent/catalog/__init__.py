"""Catalog package: items, fuzzy search and the calculator overlay.

``loader`` and ``modes`` are imported from their modules directly; they
depend on the cache and registry packages, which themselves import
``catalog.models``.
"""

from .models import Item, ItemType, SearchMode
from .calculator import Calculator
from .catalog import Catalog

__all__ = [
    'Item',
    'ItemType',
    'SearchMode',
    'Calculator',
    'Catalog',
]
