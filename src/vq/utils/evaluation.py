"""
Evaluation helpers for the vq library.

These functions measure how well a quantizer preserves the geometry of its
input: element-wise reconstruction error and neighborhood recall.
"""

from typing import Any

import numpy as np
from sklearn.metrics.pairwise import euclidean_distances

from ..exceptions import DimensionMismatchError, InvalidParameterError
from .validation import as_matrix


def generate_synthetic_data(n_samples: int, n_dims: int, seed: int = 66) -> np.ndarray:
    """
    Generate uniformly distributed vectors in [0, 1).

    Args:
        n_samples: Number of vectors
        n_dims: Dimension of each vector
        seed: Random seed

    Returns:
        float32 array of shape (n_samples, n_dims)
    """
    rng = np.random.default_rng(seed)
    return rng.random((n_samples, n_dims), dtype=np.float32)


def reconstruction_error(original: Any, reconstructed: Any) -> float:
    """
    Mean squared error per element between two batches of vectors.

    Raises:
        DimensionMismatchError: If the batches differ in shape
    """
    original = as_matrix(original, dtype=np.float64)
    reconstructed = as_matrix(reconstructed, dtype=np.float64)

    if original.shape[0] != reconstructed.shape[0]:
        raise DimensionMismatchError(original.shape[0], reconstructed.shape[0])
    if original.shape[1] != reconstructed.shape[1]:
        raise DimensionMismatchError(original.shape[1], reconstructed.shape[1])

    return float(np.mean((original - reconstructed) ** 2))


def recall_at_k(original: Any, approx: Any, k: int = 10, max_queries: int = 1000) -> float:
    """
    Compute recall@k of neighborhoods found in the reconstructed space.

    For a spread of query points (at most ``max_queries``), the ``k`` nearest
    neighbors among the original vectors are compared with the ``k`` nearest
    neighbors among the reconstructed vectors.

    Args:
        original: Original vectors, shape (n, dim)
        approx: Reconstructed vectors, shape (n, dim)
        k: Number of neighbors
        max_queries: Maximum number of query points evaluated

    Returns:
        Average fraction of true neighbors recovered, in [0, 1]
    """
    original = as_matrix(original)
    approx = as_matrix(approx)
    if original.shape != approx.shape:
        raise DimensionMismatchError(original.shape[0], approx.shape[0])

    n = original.shape[0]
    if k < 1 or k >= n:
        raise InvalidParameterError("k must be between 1 and the number of vectors minus 1")

    step = max(1, n // max_queries)
    queries = np.arange(0, n, step)

    true_dist = euclidean_distances(original[queries], original)
    approx_dist = euclidean_distances(approx[queries], approx)

    # Exclude each query from its own neighborhood
    true_dist[np.arange(len(queries)), queries] = np.inf
    approx_dist[np.arange(len(queries)), queries] = np.inf

    true_nn = np.argsort(true_dist, axis=1, kind="stable")[:, :k]
    approx_nn = np.argsort(approx_dist, axis=1, kind="stable")[:, :k]

    hits = [len(np.intersect1d(t, a)) for t, a in zip(true_nn, approx_nn)]
    return float(np.mean(hits) / k)


def memory_reduction_ratio(dim: int, code_bytes: float, input_bytes_per_value: int = 4) -> float:
    """Ratio of input storage to code storage for one vector."""
    if code_bytes <= 0:
        raise InvalidParameterError("code_bytes must be positive")
    return float(dim * input_bytes_per_value / code_bytes)
