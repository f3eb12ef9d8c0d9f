# _item.py
"""Item - a keyed record holding a sparse feature vector."""

from __future__ import annotations

from typing import Any

from ._common import Features, Key, validate_features
from ._rwlock import RWLock
from .similarity import cosine_similarity


class Item:
    """
    A stored record: an immutable key plus a mutable feature vector.

    Attributes:
        key: Opaque hashable identifier. Read-only.
        data: Mapping of feature key to float weight.
        lock: Reader/writer lock private to this item. Hold the write lock
            while mutating ``data`` in place; Table.delete waits for it.

    Notes:
        - The supplied mapping is copied and its weights coerced to float.
        - Items compare by identity. Two items with equal keys and data are
          still distinct objects.
    """

    __slots__ = ("__weakref__", "_key", "data", "lock")

    def __init__(self, key: Key, data: Any = None):
        hash(key)  # unhashable keys fail here, not on insertion
        self._key = key
        self.data: Features = validate_features({} if data is None else data)
        self.lock = RWLock()

    @property
    def key(self) -> Key:
        return self._key

    def snapshot(self) -> Features:
        """Return a copy of ``data`` taken under this item's read lock."""
        with self.lock.read_lock():
            return dict(self.data)

    def similarity(self, other: Item, *, full_magnitude: bool = False) -> float:
        """
        Cosine similarity between this item's features and another's.

        Each side is copied under its own read lock, one at a time, so the
        two locks are never held together.

        Args:
            other: Item to compare against.
            full_magnitude: See :func:`regommend.cosine_similarity`.

        Returns:
            Similarity score, 0.0 when the items share no weighted feature.
        """
        return cosine_similarity(
            self.snapshot(), other.snapshot(), full_magnitude=full_magnitude
        )

    def __repr__(self) -> str:
        return f"Item(key={self._key!r}, features={len(self.data)})"
