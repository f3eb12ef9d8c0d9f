# _errors.py
"""Exceptions raised by regommend."""

from __future__ import annotations

from typing import Any


class RegommendError(Exception):
    """Base class for errors raised on purpose by this package."""


class KeyNotFoundError(RegommendError, KeyError):
    """
    Raised when a key is not resident in a table.

    Also a KeyError, so ``except KeyError`` keeps working for callers that
    treat a Table like a dict.

    Attributes:
        key: The key that was looked up.
        table: Name of the table, or None when raised outside a table.
    """

    reason = "not found"

    def __init__(self, key: Any, table: str | None = None):
        self.key = key
        self.table = table
        super().__init__(key)

    def __str__(self) -> str:
        where = f" in table {self.table!r}" if self.table is not None else ""
        return f"Key {self.key!r} {self.reason}{where}"


class KeyNotLoadableError(KeyNotFoundError):
    """Raised when a key is missing and the data loader returned no item."""

    reason = "not found and could not be loaded"
