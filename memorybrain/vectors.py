"""Vector similarity helpers used for embedding comparison."""

from __future__ import annotations

import math
from collections.abc import Sequence


def dot_product(a: Sequence[float], b: Sequence[float]) -> float:
    """Dot product; 0.0 when lengths differ or the vectors are empty."""
    if len(a) != len(b) or not a:
        return 0.0
    return sum(x * y for x, y in zip(a, b))


def l2_norm(v: Sequence[float]) -> float:
    """Euclidean length of ``v``."""
    return math.sqrt(sum(x * x for x in v))


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine of the angle between ``a`` and ``b``.

    Returns 0.0 for mismatched lengths, empty input or a zero vector.
    """
    if len(a) != len(b) or not a:
        return 0.0
    norm_a = l2_norm(a)
    norm_b = l2_norm(b)
    if norm_a > 0.0 and norm_b > 0.0:
        return dot_product(a, b) / (norm_a * norm_b)
    return 0.0


def batch_cosine_similarity(
    query: Sequence[float], vectors: Sequence[Sequence[float]]
) -> list[float]:
    """Similarity of ``query`` to each of ``vectors``, in order."""
    return [cosine_similarity(query, v) for v in vectors]


def top_k_similar(
    query: Sequence[float], vectors: Sequence[Sequence[float]], k: int
) -> list[tuple[int, float]]:
    """The ``k`` most similar vectors as (index, similarity), best first."""
    scored = list(enumerate(batch_cosine_similarity(query, vectors)))
    scored.sort(key=lambda pair: pair[1], reverse=True)
    return scored[:k]