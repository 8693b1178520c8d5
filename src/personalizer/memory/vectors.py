"""Vector primitives for comparing and composing embeddings."""

from typing import Sequence

import numpy as np

KEY_WEIGHT = 0.3
VALUE_WEIGHT = 0.7


def _as_vector(values: Sequence[float]) -> np.ndarray:
    vector = np.asarray(values, dtype=np.float64)
    if vector.ndim != 1:
        raise ValueError(f"Expected a 1-D vector, got shape {vector.shape}")
    return vector


def _check_lengths(a: np.ndarray, b: np.ndarray) -> None:
    if a.shape[0] != b.shape[0]:
        raise ValueError(f"Vector length mismatch: {a.shape[0]} != {b.shape[0]}")


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Return the cosine similarity of two equal-length vectors.

    A zero-magnitude vector has no direction, so it scores 0.0 against
    anything instead of producing NaN.

    Raises:
        ValueError: If the vectors differ in length.
    """
    va = _as_vector(a)
    vb = _as_vector(b)
    _check_lengths(va, vb)

    norm = np.linalg.norm(va) * np.linalg.norm(vb)
    if norm == 0:
        return 0.0
    return float(np.clip(np.dot(va, vb) / norm, -1.0, 1.0))


def cosine_similarities(
    query: Sequence[float], vectors: Sequence[Sequence[float]]
) -> list[float]:
    """Score every row of ``vectors`` against ``query`` in one pass."""
    q = _as_vector(query)
    if len(vectors) == 0:
        return []

    matrix = np.asarray(vectors, dtype=np.float64)
    if matrix.ndim != 2:
        raise ValueError("Vectors must all have the same length")
    if matrix.shape[1] != q.shape[0]:
        raise ValueError(f"Vector length mismatch: {matrix.shape[1]} != {q.shape[0]}")

    norms = np.linalg.norm(matrix, axis=1) * np.linalg.norm(q)
    dots = matrix @ q
    scores = np.zeros(len(matrix), dtype=np.float64)
    nonzero = norms > 0
    scores[nonzero] = dots[nonzero] / norms[nonzero]
    return np.clip(scores, -1.0, 1.0).tolist()


def weighted_average(
    a: Sequence[float],
    b: Sequence[float],
    weight_a: float = KEY_WEIGHT,
    weight_b: float = VALUE_WEIGHT,
) -> list[float]:
    """Combine two vectors element-wise as ``a * weight_a + b * weight_b``.

    The result is not renormalized.
    """
    va = _as_vector(a)
    vb = _as_vector(b)
    _check_lengths(va, vb)
    return (va * weight_a + vb * weight_b).tolist()
