"""In-memory catalog with fuzzy search and an optional calculator overlay."""

from typing import Iterable, List, Optional

from ..fuzzy_matcher import rank
from .calculator import Calculator
from .models import Item


class Catalog:
    """Ordered collection of items currently subject to search.

    A catalog is owned by the thread driving the event loop and is only ever
    replaced wholesale; ``replace`` swaps the whole item list at once.
    """

    def __init__(self, items: Optional[Iterable[Item]] = None, calculator: Optional[Calculator] = None):
        """
        Initialize the catalog.

        Args:
            items: Initial items, in display order
            calculator: Calculator for the arithmetic overlay (None disables it)
        """
        self._items: List[Item] = list(items or [])
        self._names: List[str] = [item.name for item in self._items]
        self.calculator = calculator

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(self._items)

    @property
    def items(self) -> List[Item]:
        return list(self._items)

    def replace(self, items: Iterable[Item]) -> None:
        """Swap in a new item list."""
        self._items = list(items)
        self._names = [item.name for item in self._items]

    def search(self, query: str) -> List[Item]:
        """
        Rank items against a query.

        An empty query returns the whole catalog in its existing order. A
        non-empty query returns fuzzy matches best first (ties keep insertion
        order), with a calculator result prepended when the query evaluates.

        Args:
            query: Current query text

        Returns:
            Matching items
        """
        if not query.strip():
            return list(self._items)

        results = [self._items[index] for index in rank(query, self._names)]

        if self.calculator is not None:
            calc_item = self.calculator.result_item(query)
            if calc_item is not None:
                results.insert(0, calc_item)

        return results
