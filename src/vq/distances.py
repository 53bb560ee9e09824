"""
Distance metrics for the vq library.

A ``Distance`` compares two equal-length vectors under one of a closed set of
metrics. Reductions over operands longer than ``PARALLEL_THRESHOLD`` are split
into chunks on the shared worker pool and merged with a single reduction.
"""

from typing import Any, Callable, Optional

import numpy as np

from .exceptions import DimensionMismatchError, InvalidMetricParameterError, InvalidParameterError
from .utils.parallel import chunked_map
from .vector import REAL_TYPES, Vector


def _as_operand(value: Any) -> np.ndarray:
    array = value.data if isinstance(value, Vector) else np.asarray(value)
    if array.ndim != 1:
        raise InvalidParameterError("Distance operands must be one-dimensional")
    return array


def _accumulator(*arrays: np.ndarray) -> np.dtype:
    dtypes = [
        REAL_TYPES[a.dtype].accumulator if a.dtype in REAL_TYPES else np.dtype(np.float64)
        for a in arrays
    ]
    return np.result_type(*dtypes)


def _zip_map_sum(a: np.ndarray, b: np.ndarray, f: Callable) -> Any:
    """Sum of ``f`` applied element-wise over two arrays."""
    partials = chunked_map(lambda start, end: np.sum(f(a[start:end], b[start:end])), len(a))
    return np.sum(partials, dtype=a.dtype)


def _zip_map_max(a: np.ndarray, b: np.ndarray, f: Callable) -> Any:
    """Maximum of ``f`` applied element-wise over two arrays (zero when empty)."""
    partials = chunked_map(
        lambda start, end: np.max(f(a[start:end], b[start:end]), initial=0), len(a)
    )
    return np.max(np.asarray(partials, dtype=a.dtype), initial=0)


def _map_sum(a: np.ndarray, f: Callable) -> Any:
    partials = chunked_map(lambda start, end: np.sum(f(a[start:end])), len(a))
    return np.sum(partials, dtype=a.dtype)


def _squared_diff(x: np.ndarray, y: np.ndarray) -> np.ndarray:
    diff = x - y
    return diff * diff


def _abs_diff(x: np.ndarray, y: np.ndarray) -> np.ndarray:
    return np.abs(x - y)


class Distance:
    """
    A distance metric.

    Use the constructors (``Distance.euclidean()``, ``Distance.minkowski(3)``,
    ...) or ``Distance.from_name`` rather than instantiating directly.
    """

    SQUARED_EUCLIDEAN = "squared_euclidean"
    EUCLIDEAN = "euclidean"
    COSINE = "cosine"
    MANHATTAN = "manhattan"
    CHEBYSHEV = "chebyshev"
    MINKOWSKI = "minkowski"
    HAMMING = "hamming"

    METRICS = (
        SQUARED_EUCLIDEAN,
        EUCLIDEAN,
        COSINE,
        MANHATTAN,
        CHEBYSHEV,
        MINKOWSKI,
        HAMMING,
    )

    def __init__(self, metric: str, p: Optional[float] = None):
        if metric not in self.METRICS:
            raise InvalidParameterError(f"Unknown distance metric: {metric}")
        if metric == self.MINKOWSKI and p is None:
            raise InvalidMetricParameterError("Minkowski", "p must be given")
        self._metric = metric
        self._p = float(p) if metric == self.MINKOWSKI else None

    @classmethod
    def squared_euclidean(cls) -> "Distance":
        return cls(cls.SQUARED_EUCLIDEAN)

    @classmethod
    def euclidean(cls) -> "Distance":
        return cls(cls.EUCLIDEAN)

    @classmethod
    def cosine(cls) -> "Distance":
        """Cosine distance (1 minus cosine similarity; 1 if either norm is zero)."""
        return cls(cls.COSINE)

    @classmethod
    def manhattan(cls) -> "Distance":
        return cls(cls.MANHATTAN)

    @classmethod
    def chebyshev(cls) -> "Distance":
        return cls(cls.CHEBYSHEV)

    @classmethod
    def minkowski(cls, p: float) -> "Distance":
        """Minkowski distance of order ``p``; ``p`` must be positive when computing."""
        return cls(cls.MINKOWSKI, p)

    @classmethod
    def hamming(cls) -> "Distance":
        """Number of positions where the elements differ."""
        return cls(cls.HAMMING)

    @classmethod
    def from_name(cls, name: str, p: Optional[float] = None) -> "Distance":
        """
        Build a distance from its configuration name.

        Args:
            name: Metric name, case-insensitive (``"cosine"``, ``"l2"``, ...)
            p: Order for the Minkowski metric

        Returns:
            Distance instance
        """
        aliases = {
            "l2": cls.EUCLIDEAN,
            "sqeuclidean": cls.SQUARED_EUCLIDEAN,
            "l1": cls.MANHATTAN,
            "cityblock": cls.MANHATTAN,
            "linf": cls.CHEBYSHEV,
        }
        key = name.strip().lower().replace("-", "_")
        return cls(aliases.get(key, key), p)

    @property
    def metric(self) -> str:
        return self._metric

    @property
    def p(self) -> Optional[float]:
        return self._p

    def _check_parameters(self) -> None:
        if self._metric == self.MINKOWSKI and self._p <= 0:
            raise InvalidMetricParameterError("Minkowski", "p must be positive")

    def compute(self, a: Any, b: Any) -> float:
        """
        Compute the distance between ``a`` and ``b``.

        Args:
            a: First vector (Vector, numpy array or sequence)
            b: Second vector

        Returns:
            The distance as a float

        Raises:
            DimensionMismatchError: If the lengths of ``a`` and ``b`` differ
            InvalidMetricParameterError: If the Minkowski order is not positive
        """
        a = _as_operand(a)
        b = _as_operand(b)
        if len(a) != len(b):
            raise DimensionMismatchError(len(a), len(b))
        self._check_parameters()

        dtype = _accumulator(a, b)
        a = a.astype(dtype, copy=False)
        b = b.astype(dtype, copy=False)

        metric = self._metric
        if metric == self.SQUARED_EUCLIDEAN:
            return float(_zip_map_sum(a, b, _squared_diff))
        if metric == self.EUCLIDEAN:
            return float(np.sqrt(_zip_map_sum(a, b, _squared_diff)))
        if metric == self.COSINE:
            dot = _zip_map_sum(a, b, np.multiply)
            norm_a = np.sqrt(_map_sum(a, np.square))
            norm_b = np.sqrt(_map_sum(b, np.square))
            if norm_a == 0 or norm_b == 0:
                return 1.0
            return float(1.0 - dot / (norm_a * norm_b))
        if metric == self.MANHATTAN:
            return float(_zip_map_sum(a, b, _abs_diff))
        if metric == self.CHEBYSHEV:
            return float(_zip_map_max(a, b, _abs_diff))
        if metric == self.MINKOWSKI:
            p = dtype.type(self._p)
            total = _zip_map_sum(a, b, lambda x, y: np.power(np.abs(x - y), p))
            return float(np.power(total, dtype.type(1.0) / p))
        # Hamming
        return float(_zip_map_sum(a, b, np.not_equal))

    def compute_many(self, x: Any, rows: Any) -> np.ndarray:
        """
        Compute the distance from ``x`` to every row of a 2-D array.

        Each entry equals ``compute(x, rows[i])``; rows are fanned out over the
        worker pool when there are many of them.

        Raises:
            DimensionMismatchError: If the row length differs from ``len(x)``
        """
        x = _as_operand(x)
        rows = np.asarray(rows)
        if rows.ndim != 2:
            raise InvalidParameterError("rows must be a 2-D array")
        if rows.shape[1] != len(x):
            raise DimensionMismatchError(len(x), rows.shape[1])
        self._check_parameters()

        dtype = _accumulator(x, rows[0] if len(rows) else x)
        x = x.astype(dtype, copy=False)
        rows = rows.astype(dtype, copy=False)

        partials = chunked_map(lambda start, end: self._rows(x, rows[start:end]), rows.shape[0])
        return np.concatenate(partials) if partials else np.empty(0, dtype=dtype)

    def _rows(self, x: np.ndarray, rows: np.ndarray) -> np.ndarray:
        metric = self._metric
        if metric in (self.SQUARED_EUCLIDEAN, self.EUCLIDEAN):
            total = np.sum(_squared_diff(rows, x), axis=1)
            return total if metric == self.SQUARED_EUCLIDEAN else np.sqrt(total)
        if metric == self.COSINE:
            dots = rows @ x
            norm_x = np.sqrt(np.sum(x * x))
            norms = np.sqrt(np.sum(rows * rows, axis=1))
            denom = norms * norm_x
            with np.errstate(divide="ignore", invalid="ignore"):
                result = 1.0 - dots / denom
            return np.where(denom == 0, rows.dtype.type(1.0), result).astype(rows.dtype)
        if metric == self.MANHATTAN:
            return np.sum(_abs_diff(rows, x), axis=1)
        if metric == self.CHEBYSHEV:
            return np.max(_abs_diff(rows, x), axis=1, initial=0)
        if metric == self.MINKOWSKI:
            p = rows.dtype.type(self._p)
            total = np.sum(np.power(_abs_diff(rows, x), p), axis=1)
            return np.power(total, rows.dtype.type(1.0) / p)
        return np.sum(rows != x, axis=1).astype(rows.dtype)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Distance):
            return NotImplemented
        return self._metric == other._metric and self._p == other._p

    def __hash__(self) -> int:
        return hash((self._metric, self._p))

    def __repr__(self) -> str:
        if self._metric == self.MINKOWSKI:
            return f"Distance.minkowski({self._p})"
        return f"Distance.{self._metric}()"
