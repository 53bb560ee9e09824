"""
Validation utilities for the vq library.

Every public ``fit``/``quantize`` entry point coerces its inputs through these
helpers so that malformed data is rejected before any work is done.
"""

from typing import Any, Optional

import numpy as np

from ..exceptions import DimensionMismatchError, EmptyInputError, InvalidParameterError
from ..vector import Vector


def as_array(vector: Any, dim: Optional[int] = None, dtype: Any = np.float32) -> np.ndarray:
    """
    Coerce a single vector to a 1-D numpy array.

    Args:
        vector: Vector, numpy array or sequence of numbers
        dim: Expected dimension, if known
        dtype: Element type of the returned array

    Returns:
        1-D array of ``dtype``

    Raises:
        InvalidParameterError: If the input is not one-dimensional
        DimensionMismatchError: If ``dim`` is given and does not match
    """
    array = vector.data if isinstance(vector, Vector) else np.asarray(vector)
    if array.ndim != 1:
        raise InvalidParameterError("Vector must be 1D")

    if dim is not None and array.shape[0] != dim:
        raise DimensionMismatchError(dim, array.shape[0])

    return array.astype(dtype, copy=False)


def as_matrix(vectors: Any, dtype: Any = np.float32) -> np.ndarray:
    """
    Coerce a batch of vectors to a 2-D numpy array of shape (n, dim).

    Args:
        vectors: 2-D array, or a sequence of Vectors / arrays / sequences
        dtype: Element type of the returned array

    Returns:
        2-D array of ``dtype``

    Raises:
        EmptyInputError: If the batch is empty
        DimensionMismatchError: If the vectors differ in length
    """
    if isinstance(vectors, np.ndarray):
        if vectors.ndim != 2:
            if vectors.ndim == 1 and vectors.shape[0] == 0:
                raise EmptyInputError()
            raise InvalidParameterError("Vectors must be 2D array")
        if vectors.shape[0] == 0:
            raise EmptyInputError()
        return vectors.astype(dtype, copy=False)

    if len(vectors) == 0:
        raise EmptyInputError()

    rows = [as_array(v, dtype=dtype) for v in vectors]
    dim = rows[0].shape[0]
    for row in rows:
        if row.shape[0] != dim:
            raise DimensionMismatchError(dim, row.shape[0])

    return np.stack(rows)


def validate_positive_int(value: Any, name: str, minimum: int = 1) -> int:
    """Validate an integer hyperparameter and return it as ``int``."""
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidParameterError(f"{name} must be an integer")
    if value < minimum:
        raise InvalidParameterError(f"{name} must be at least {minimum}")
    return int(value)
