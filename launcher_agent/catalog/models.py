"""Data models for catalog entries and search modes."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class SearchMode(Enum):
    """Which catalog and search strategy is active."""
    NORMAL = "normal"
    CLIPBOARD_HISTORY = "clipboard_history"
    NIXPKGS_SEARCH = "nixpkgs_search"
    CRATES_SEARCH = "crates_search"
    HOMEBREW_SEARCH = "homebrew_search"


class ItemType(Enum):
    """What kind of entry an item is, which decides how it is executed."""
    APPLICATION = "application"
    CALCULATOR_RESULT = "calculator_result"
    SYSTEM_COMMAND = "system_command"
    CLIPBOARD_HISTORY = "clipboard_history"
    NIX_PACKAGE = "nix_package"
    RUST_CRATE = "rust_crate"
    HOMEBREW_PACKAGE = "homebrew_package"
    MODE_SWITCH = "mode_switch"


@dataclass(frozen=True)
class Item:
    """A single searchable/executable entry.

    ``name`` is the display text used for matching; ``value`` is what gets
    launched or copied. Mode-switch items carry their target in ``mode``.
    """
    name: str
    value: str
    type: ItemType = ItemType.APPLICATION
    mode: Optional[SearchMode] = None

    @classmethod
    def application(cls, name: str, path: str) -> "Item":
        return cls(name, path, ItemType.APPLICATION)

    @classmethod
    def calculator_result(cls, expression: str, result: str) -> "Item":
        return cls(f"{expression} = {result}", result, ItemType.CALCULATOR_RESULT)

    @classmethod
    def system_command(cls, name: str, action: str) -> "Item":
        return cls(name, action, ItemType.SYSTEM_COMMAND)

    @classmethod
    def clipboard_entry(cls, display: str, content: str) -> "Item":
        return cls(display, content, ItemType.CLIPBOARD_HISTORY)

    @classmethod
    def nix_package(cls, display: str, value: str) -> "Item":
        return cls(display, value, ItemType.NIX_PACKAGE)

    @classmethod
    def rust_crate(cls, display: str, url: str) -> "Item":
        return cls(display, url, ItemType.RUST_CRATE)

    @classmethod
    def homebrew_package(cls, display: str, url: str) -> "Item":
        return cls(display, url, ItemType.HOMEBREW_PACKAGE)

    @classmethod
    def mode_switch(cls, name: str, mode: SearchMode) -> "Item":
        return cls(name, mode.value, ItemType.MODE_SWITCH, mode)

    def to_record(self) -> list:
        """Plain-data form used by the cache codec."""
        return [self.name, self.value, self.type.value]

    @classmethod
    def from_record(cls, record) -> "Item":
        """
        Rebuild an item from ``to_record`` output.

        Raises:
            ValueError: If the record is malformed or names an unknown type
        """
        if not isinstance(record, list) or len(record) != 3:
            raise ValueError(f"Malformed item record: {record!r}")
        name, value, type_name = record
        if not isinstance(name, str) or not isinstance(value, str):
            raise ValueError(f"Malformed item record: {record!r}")
        item_type = ItemType(type_name)
        mode = SearchMode(value) if item_type is ItemType.MODE_SWITCH else None
        return cls(name, value, item_type, mode)
