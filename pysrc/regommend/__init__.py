"""regommend - Thread-safe in-memory item store with cosine similarity."""

from ._errors import KeyNotFoundError, KeyNotLoadableError, RegommendError
from ._item import Item
from ._registry import drop_table, table
from ._rwlock import RWLock
from .similarity import cosine_similarity, cosine_similarity_np, similarity_matrix
from .table import Table

__all__ = [
    "Item",
    "KeyNotFoundError",
    "KeyNotLoadableError",
    "RWLock",
    "RegommendError",
    "Table",
    "cosine_similarity",
    "cosine_similarity_np",
    "drop_table",
    "similarity_matrix",
    "table",
]
