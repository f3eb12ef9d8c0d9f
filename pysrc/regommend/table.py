# table.py
"""Table - thread-safe item store with lazy loading and lifecycle callbacks."""

from __future__ import annotations

import logging
from typing import Any, Iterator

from ._common import DataLoader, Key, ItemCallback, validate_callback
from ._errors import KeyNotFoundError, KeyNotLoadableError
from ._item import Item
from ._rwlock import RWLock
from .similarity import similarity_matrix


class Table:
    """
    A named, thread-safe collection of Items keyed by opaque identity.

    The table's lock guards the key -> Item mapping only, never an Item's
    contents. Every callback runs with no table lock held, so callbacks may
    call back into the table.

    Callbacks:
        data_loader(key) -> Item | None: called by ``value`` on a miss.
        added_item(item): called after every successful ``add``, including
            adds triggered by the loader.
        about_to_delete_item(item): called before every successful
            ``delete``. Not called by ``flush``.

    Exceptions raised by a callback propagate to whoever triggered it.

    Args:
        name: Label used in diagnostics.
        data_loader: Optional loader for missing keys.
        added_item: Optional add callback.
        about_to_delete_item: Optional pre-delete callback.
        logger: Optional diagnostic sink. Without one, diagnostics are dropped.

    Example:
        ```python
        t = Table("users")
        t.add("u1", {"f1": 2.0, "f2": 0.0})
        t.add("u2", {"f1": 1.0, "f3": 3.0})
        t.similarity("u1", "u2")  # 1.0
        ```
    """

    __slots__ = (
        "_about_to_delete_item",
        "_added_item",
        "_data_loader",
        "_items",
        "_lock",
        "_logger",
        "_name",
    )

    def __init__(
        self,
        name: str,
        *,
        data_loader: DataLoader | None = None,
        added_item: ItemCallback | None = None,
        about_to_delete_item: ItemCallback | None = None,
        logger: logging.Logger | None = None,
    ):
        validate_callback(data_loader, "data_loader")
        validate_callback(added_item, "added_item")
        validate_callback(about_to_delete_item, "about_to_delete_item")

        self._name = name
        self._items: dict[Key, Item] = {}
        self._lock = RWLock()
        self._logger = logger
        self._data_loader = data_loader
        self._added_item = added_item
        self._about_to_delete_item = about_to_delete_item

    @property
    def name(self) -> str:
        return self._name

    # ---- Configuration ----

    def set_data_loader(self, f: DataLoader | None) -> None:
        """Set the callback used by ``value`` to load missing keys."""
        validate_callback(f, "data_loader")
        with self._lock.write_lock():
            self._data_loader = f

    def set_added_item_callback(self, f: ItemCallback | None) -> None:
        """Set the callback fired after an item is added."""
        validate_callback(f, "added_item")
        with self._lock.write_lock():
            self._added_item = f

    def set_about_to_delete_item_callback(self, f: ItemCallback | None) -> None:
        """Set the callback fired before an item is deleted."""
        validate_callback(f, "about_to_delete_item")
        with self._lock.write_lock():
            self._about_to_delete_item = f

    def set_logger(self, logger: logging.Logger | None) -> None:
        """Set the diagnostic logger. None discards diagnostics."""
        with self._lock.write_lock():
            self._logger = logger

    # ---- Core operations ----

    def count(self) -> int:
        """Return the number of resident items."""
        with self._lock.read_lock():
            return len(self._items)

    def add(self, key: Key, data: Any) -> Item:
        """
        Store a new item under ``key``, replacing any existing entry.

        Args:
            key: Hashable item key.
            data: Mapping of feature -> weight. Copied into the new item.

        Returns:
            The newly stored Item.

        Raises:
            TypeError: If key is unhashable or data is not a numeric mapping.
        """
        item = Item(key, data)

        with self._lock.write_lock():
            self._items[key] = item
            added_item = self._added_item

        self._log(logging.DEBUG, "added item %r", key)
        if added_item is not None:
            added_item(item)
        return item

    def delete(self, key: Key) -> Item:
        """
        Remove the item stored under ``key``.

        The about-to-delete callback sees the live item before removal. The
        removal itself waits for any writer holding the item's lock.

        Returns:
            The removed Item. Callers holding it may keep reading it.

        Raises:
            KeyNotFoundError: If key is not resident.
        """
        with self._lock.read_lock():
            item = self._items.get(key)
            about_to_delete_item = self._about_to_delete_item
        if item is None:
            raise KeyNotFoundError(key, self._name)

        if about_to_delete_item is not None:
            about_to_delete_item(item)

        with item.lock.read_lock():
            with self._lock.write_lock():
                # a concurrent add may have replaced the entry; leave it
                if self._items.get(key) is item:
                    del self._items[key]

        self._log(logging.DEBUG, "deleted item %r", key)
        return item

    def exists(self, key: Key) -> bool:
        """
        Return True if ``key`` is resident.

        Unlike ``value``, never calls the data loader.
        """
        with self._lock.read_lock():
            return key in self._items

    def value(self, key: Key) -> Item:
        """
        Return the item stored under ``key``, loading it on a miss.

        On a miss with a data loader configured, the loader is called once,
        outside the lock. A returned Item's data is stored via ``add`` (so
        ``added_item`` fires) and the stored Item is returned.

        Raises:
            KeyNotLoadableError: If the loader returned None.
            KeyNotFoundError: If key is missing and no loader is configured.
            TypeError: If the loader returned something other than an Item.
        """
        with self._lock.read_lock():
            item = self._items.get(key)
            data_loader = self._data_loader
        if item is not None:
            return item

        if data_loader is None:
            raise KeyNotFoundError(key, self._name)

        loaded = data_loader(key)
        if loaded is None:
            raise KeyNotLoadableError(key, self._name)
        if not isinstance(loaded, Item):
            raise TypeError(
                f"data loader must return an Item or None, got {type(loaded).__name__}"
            )
        self._log(logging.DEBUG, "loaded item %r", key)
        return self.add(key, loaded.snapshot())

    def flush(self) -> None:
        """
        Remove every item at once.

        The about-to-delete callback is not invoked for flushed items.
        """
        with self._lock.write_lock():
            dropped = len(self._items)
            self._items = {}
        self._log(logging.INFO, "flushed %d items", dropped)

    # ---- Snapshots ----

    def keys(self) -> list[Key]:
        """Return a snapshot list of resident keys."""
        with self._lock.read_lock():
            return list(self._items)

    def items(self) -> list[Item]:
        """Return a snapshot list of resident Items."""
        with self._lock.read_lock():
            return list(self._items.values())

    # ---- Similarity ----

    def similarity(self, key_a: Key, key_b: Key, *, full_magnitude: bool = False) -> float:
        """
        Cosine similarity between the items stored under two keys.

        Both keys are resolved through ``value``, so the loader may fire.

        Raises:
            KeyNotFoundError: If either key cannot be resolved.
        """
        a = self.value(key_a)
        b = self.value(key_b)
        return a.similarity(b, full_magnitude=full_magnitude)

    def similarity_matrix(
        self, keys: list[Key] | None = None, *, full_magnitude: bool = False
    ) -> tuple[list[Key], Any]:
        """
        Exact pairwise similarity matrix over a set of keys.

        Args:
            keys: Keys to compare. Defaults to every resident key.
            full_magnitude: See :func:`regommend.cosine_similarity`.

        Returns:
            Tuple of (keys, matrix) where matrix[i, j] compares keys[i] and
            keys[j].

        Raises:
            KeyNotFoundError: If a key cannot be resolved.
            ImportError: If NumPy is not installed.
        """
        keys = self.keys() if keys is None else list(keys)
        vectors = [self.value(k).snapshot() for k in keys]
        return keys, similarity_matrix(vectors, full_magnitude=full_magnitude)

    # ---- Utilities ----

    def __len__(self) -> int:
        return self.count()

    def __contains__(self, key: Key) -> bool:
        return self.exists(key)

    def __iter__(self) -> Iterator[Item]:
        """Iterate over a snapshot of resident Items."""
        return iter(self.items())

    def __repr__(self) -> str:
        return f"Table(name={self._name!r}, count={self.count()})"

    def _log(self, level: int, msg: str, *args: Any) -> None:
        logger = self._logger
        if logger is None:
            return
        logger.log(level, "[%s] " + msg, self._name, *args)
