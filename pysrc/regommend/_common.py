# _common.py
"""Common type aliases and validation helpers shared across the package."""

from __future__ import annotations

import math
from collections.abc import Hashable, Mapping
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional

if TYPE_CHECKING:
    from ._item import Item

# Type aliases
Key = Hashable
"""Opaque item identifier. Anything hashable and equality-comparable."""

FeatureKey = Hashable
"""Opaque feature identifier inside an item's feature vector."""

Features = Dict[FeatureKey, float]
"""Sparse feature vector as {feature: weight}."""

DataLoader = Callable[[Key], Optional["Item"]]
"""Called on a lookup miss; returns an Item to store or None."""

ItemCallback = Callable[["Item"], None]
"""Called with the affected Item on add or before delete."""


def _is_np_array(x: Any) -> bool:
    """
    Check if x is a NumPy array without importing NumPy.

    This allows type checking without forcing NumPy as a hard dependency.

    Args:
        x: Object to check.

    Returns:
        True if x is a NumPy array.
    """
    mod = getattr(x.__class__, "__module__", "")
    return mod.startswith("numpy") and hasattr(x, "ndim") and hasattr(x, "shape")


def validate_features(data: Any) -> Features:
    """
    Validate and normalize a feature mapping to a fresh dict of floats.

    Args:
        data: Mapping of feature key to numeric weight.

    Returns:
        New dict with every weight coerced to float.

    Raises:
        TypeError: If data is not a mapping or a weight is not numeric.
        ValueError: If a weight does not parse as a float or is NaN or infinite.
    """
    if not isinstance(data, Mapping):
        raise TypeError(
            f"feature data must be a mapping of feature -> weight, got {type(data).__name__}"
        )
    out: Features = {}
    for feature, weight in data.items():
        if isinstance(weight, bool):
            raise TypeError(f"weight for feature {feature!r} must be numeric, got bool")
        value = float(weight)
        if not math.isfinite(value):
            raise ValueError(f"weight for feature {feature!r} must be finite, got {value!r}")
        out[feature] = value
    return out


def validate_callback(f: Any, name: str) -> None:
    """
    Validate that f is callable or None.

    Raises:
        TypeError: If f is neither None nor callable.
    """
    if f is not None and not callable(f):
        raise TypeError(f"{name} must be callable or None, got {type(f).__name__}")
