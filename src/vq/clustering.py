"""
LBG (Linde-Buzo-Gray) clustering for the vq library.

This is the codebook learning primitive shared by the product, optimized
product and residual quantizers: a seeded generalized k-means that refines
``k`` centroids sampled from the training data until no assignment changes.
"""

from typing import Any, Tuple

import numpy as np
from sklearn.metrics.pairwise import euclidean_distances

from .exceptions import InvalidParameterError
from .utils.logging import get_logger
from .utils.parallel import chunked_map
from .utils.validation import as_matrix

logger = get_logger(__name__)


def _assign(data: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """
    Index of the nearest centroid (squared distance) for every point.

    Distances use the expanded form ``|x|^2 - 2 x.y + |y|^2``, so exact ties
    go to the lowest index but near-equal distances may resolve differently
    from a direct per-coordinate difference.
    """

    def nearest(start: int, end: int) -> np.ndarray:
        distances = euclidean_distances(data[start:end], centroids, squared=True)
        return np.argmin(distances, axis=1)

    return np.concatenate(chunked_map(nearest, data.shape[0]))


def _cluster_sums(
    data: np.ndarray, assignments: np.ndarray, k: int
) -> Tuple[np.ndarray, np.ndarray]:
    """Per-cluster coordinate sums and member counts."""

    def accumulate(start: int, end: int) -> Tuple[np.ndarray, np.ndarray]:
        sums = np.zeros((k, data.shape[1]), dtype=np.float64)
        np.add.at(sums, assignments[start:end], data[start:end])
        counts = np.bincount(assignments[start:end], minlength=k)
        return sums, counts

    partials = chunked_map(accumulate, data.shape[0])
    sums = np.sum([p[0] for p in partials], axis=0)
    counts = np.sum([p[1] for p in partials], axis=0)
    return sums, counts


def lbg_quantize(data: Any, k: int, max_iters: int, seed: int) -> np.ndarray:
    """
    Learn ``k`` centroids from ``data`` with the LBG algorithm.

    Initial centroids are ``k`` distinct training vectors drawn with a
    generator seeded from ``seed``. Each iteration assigns every point to its
    nearest centroid (exact ties go to the lowest index; see ``_assign`` for
    near-ties), moves each centroid to the
    mean of its members and reseeds empty clusters with a random training
    vector. Iteration stops early once no assignment changes.

    Args:
        data: Training vectors, shape (n, dim)
        k: Number of clusters (must be > 0 and <= number of data points)
        max_iters: Maximum number of refinement iterations
        seed: Seed for the random number generator

    Returns:
        Centroids as a float32 array of shape (k, dim)

    Raises:
        InvalidParameterError: If ``k`` is 0 or there are fewer points than ``k``
    """
    if k == 0:
        raise InvalidParameterError("k must be greater than 0")
    if k < 0:
        raise InvalidParameterError("k must be a positive integer")
    if max_iters < 0:
        raise InvalidParameterError("max_iters must be non-negative")
    if len(data) < k:
        raise InvalidParameterError("Not enough data points for k clusters")

    data = as_matrix(data)
    n = data.shape[0]

    rng = np.random.default_rng(seed)
    centroids = data[rng.choice(n, size=k, replace=False)].copy()
    assignments = np.zeros(n, dtype=np.intp)

    for iteration in range(max_iters):
        new_assignments = _assign(data, centroids)
        n_changed = int(np.count_nonzero(new_assignments != assignments))
        assignments = new_assignments

        sums, counts = _cluster_sums(data, assignments, k)
        occupied = counts > 0
        centroids[occupied] = (sums[occupied] / counts[occupied, np.newaxis]).astype(np.float32)

        # Reinitialize empty clusters with random data points, in cluster order
        empty = np.flatnonzero(~occupied)
        for j in empty:
            centroids[j] = data[rng.integers(n)]

        logger.debug(
            "LBG iteration %d: %d assignments changed, %d empty clusters",
            iteration + 1, n_changed, len(empty),
        )

        if n_changed == 0:
            break

    return centroids
