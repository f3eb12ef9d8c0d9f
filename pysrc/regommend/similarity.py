# similarity.py
"""Cosine similarity over sparse feature vectors."""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from typing import Any, Iterable

from ._common import FeatureKey, _is_np_array


def _clamp(score: float) -> float:
    # rounding can push |score| a hair past 1.0; NaN passes through
    if math.isnan(score):
        return score
    return max(-1.0, min(1.0, score))


def _scale(values: Iterable[float]) -> float:
    """Largest absolute weight, or NaN if any weight is not finite."""
    scale = 0.0
    for v in values:
        if not math.isfinite(v):
            return math.nan
        scale = max(scale, abs(v))
    return scale


def cosine_similarity(
    a: Mapping[FeatureKey, float],
    b: Mapping[FeatureKey, float],
    *,
    full_magnitude: bool = False,
) -> float:
    """
    Cosine similarity between two sparse feature vectors.

    The dot product only ever involves features present in both vectors.
    By default the magnitudes are also accumulated over those shared
    features alone, which makes the score a measure of how well the two
    vectors agree where they overlap. Pass ``full_magnitude=True`` for the
    textbook definition, where each magnitude covers every feature of its
    own vector.

    Each vector is divided by its largest absolute weight before summing,
    so very large finite weights do not overflow.

    Args:
        a: First vector as {feature: weight}.
        b: Second vector as {feature: weight}.
        full_magnitude: Use each vector's full magnitude instead of the
            shared-feature magnitude.

    Returns:
        Score in [-1, 1] ([0, 1] for non-negative weights). Exactly 0.0 when
        either magnitude is zero, e.g. no shared features. NaN when a
        contributing weight is NaN or infinite.

    Example:
        ```python
        cosine_similarity({"f1": 2.0, "f2": 0.0}, {"f1": 1.0, "f3": 3.0})
        # 1.0
        ```
    """
    # iterate the smaller side for the intersection
    small, large = (a, b) if len(a) <= len(b) else (b, a)

    pairs = []
    for key, x in small.items():
        y = large.get(key)
        if y is not None:
            pairs.append((x, y))

    if full_magnitude:
        xs = list(small.values())
        ys = list(large.values())
    else:
        xs = [x for x, _ in pairs]
        ys = [y for _, y in pairs]

    sx = _scale(xs)
    sy = _scale(ys)
    if math.isnan(sx) or math.isnan(sy):
        return math.nan
    if sx == 0 or sy == 0:
        return 0.0

    dot = math.fsum((x / sx) * (y / sy) for x, y in pairs)
    denominator = math.hypot(*(x / sx for x in xs)) * math.hypot(*(y / sy for y in ys))
    if denominator == 0:
        return 0.0
    return _clamp(dot / denominator)


def cosine_similarity_np(a: Any, b: Any) -> float:
    """
    Cosine similarity between two dense NumPy vectors.

    Args:
        a: 1-D NumPy array.
        b: 1-D NumPy array with the same length as ``a``.

    Returns:
        Score in [-1, 1]; 0.0 if either vector has zero norm, NaN if
        either holds a non-finite value.

    Raises:
        TypeError: If either argument is not a NumPy array.
        ValueError: If the vectors are not 1-D or differ in length.
        ImportError: If NumPy is not installed.
    """
    if not (_is_np_array(a) and _is_np_array(b)):
        raise TypeError("cosine_similarity_np requires NumPy arrays")

    import numpy as np

    if a.ndim != 1 or b.ndim != 1:
        raise ValueError("cosine_similarity_np requires 1-D vectors")
    if a.shape[0] != b.shape[0]:
        raise ValueError(
            f"vector length mismatch: {a.shape[0]} != {b.shape[0]}"
        )

    va = a.astype(np.float64, copy=False)
    vb = b.astype(np.float64, copy=False)
    if not (np.isfinite(va).all() and np.isfinite(vb).all()):
        return math.nan
    if va.size == 0:
        return 0.0
    sa = float(np.abs(va).max())
    sb = float(np.abs(vb).max())
    if sa == 0 or sb == 0:
        return 0.0
    va = va / sa
    vb = vb / sb
    norm = float(np.linalg.norm(va)) * float(np.linalg.norm(vb))
    if norm == 0:
        return 0.0
    return _clamp(float(np.dot(va, vb)) / norm)


def similarity_matrix(
    vectors: Sequence[Mapping[FeatureKey, float]],
    *,
    full_magnitude: bool = False,
) -> Any:
    """
    Exact pairwise cosine similarity for a list of sparse vectors.

    Args:
        vectors: Sparse vectors as {feature: weight} mappings.
        full_magnitude: See :func:`cosine_similarity`.

    Returns:
        Symmetric float64 array of shape (n, n) where entry [i, j] is
        ``cosine_similarity(vectors[i], vectors[j])``.

    Raises:
        ImportError: If NumPy is not installed.
    """
    import numpy as np

    n = len(vectors)
    out = np.zeros((n, n), dtype=np.float64)
    for i in range(n):
        for j in range(i, n):
            score = cosine_similarity(
                vectors[i], vectors[j], full_magnitude=full_magnitude
            )
            out[i, j] = score
            out[j, i] = score
    return out
