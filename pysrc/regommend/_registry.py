# _registry.py
"""Process-wide registry of named tables."""

from __future__ import annotations

import threading

from ._errors import KeyNotFoundError
from .table import Table

_tables: dict[str, Table] = {}
_tables_lock = threading.Lock()


def table(name: str) -> Table:
    """
    Return the table registered under ``name``, creating it on first use.

    Concurrent first calls for the same name all get the same Table.
    """
    with _tables_lock:
        t = _tables.get(name)
        if t is None:
            t = Table(name)
            _tables[name] = t
        return t


def drop_table(name: str) -> Table:
    """
    Unregister and return the table registered under ``name``.

    The returned Table still works for anyone holding it; a later
    ``table(name)`` creates a fresh, empty one.

    Raises:
        KeyNotFoundError: If no table is registered under ``name``.
    """
    with _tables_lock:
        t = _tables.pop(name, None)
    if t is None:
        raise KeyNotFoundError(name)
    return t
