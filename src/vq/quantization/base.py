"""
Base quantization interface for the vq library.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict

import numpy as np

from ..distances import Distance
from ..utils.parallel import parallel_map
from ..utils.validation import as_matrix
from ..vector import Vector


class Quantizer(ABC):
    """
    Abstract base class for vector quantizers.

    Quantizers are built once by their ``fit`` classmethod and are read-only
    afterwards, so a fitted quantizer can be shared between threads calling
    ``quantize`` concurrently.
    """

    quantizer_type = "base"

    def __init__(self, config: Dict[str, Any]):
        """Initialize the quantizer with the hyperparameters it was fit with."""
        self._config = dict(config)

    @property
    def config(self) -> Dict[str, Any]:
        """Hyperparameters used to fit this quantizer."""
        return dict(self._config)

    @classmethod
    @abstractmethod
    def fit(cls, *args: Any, **kwargs: Any) -> "Quantizer":
        """Build a quantizer from hyperparameters (and training data, if any)."""
        pass

    @abstractmethod
    def quantize(self, vector: Any) -> Vector:
        """
        Quantize a single vector.

        Args:
            vector: Input vector

        Returns:
            Quantized vector (codes or reduced-precision reconstruction)
        """
        pass

    def quantize_batch(self, vectors: Any) -> np.ndarray:
        """
        Quantize a batch of vectors.

        Args:
            vectors: 2-D array or sequence of vectors

        Returns:
            2-D array with one quantized vector per row
        """
        matrix = as_matrix(vectors)
        rows = parallel_map(lambda v: self.quantize(v).data, matrix, size=matrix.shape[0])
        return np.stack(rows)

    def dequantize(self, quantized: Any) -> np.ndarray:
        """
        Map quantized output back to 32-bit floats in the input space.

        Args:
            quantized: A quantized Vector, or an array of them

        Returns:
            float32 array with the same shape as the input
        """
        data = quantized.data if isinstance(quantized, Vector) else np.asarray(quantized)
        return data.astype(np.float32)

    @abstractmethod
    def get_stats(self) -> Dict[str, Any]:
        """Get quantizer statistics."""
        pass

    def __repr__(self) -> str:
        params = ", ".join(f"{key}={value!r}" for key, value in self._config.items())
        return f"{type(self).__name__}({params})"


def freeze(array: np.ndarray) -> np.ndarray:
    """Mark an array read-only and return it."""
    array.setflags(write=False)
    return array


def index_dtype(k: int) -> np.dtype:
    """Smallest unsigned integer type that can index ``k`` codewords."""
    if k - 1 <= np.iinfo(np.uint8).max:
        return np.dtype(np.uint8)
    if k - 1 <= np.iinfo(np.uint16).max:
        return np.dtype(np.uint16)
    return np.dtype(np.uint32)


def nearest_index(distance: Distance, vector: np.ndarray, codebook: np.ndarray) -> int:
    """
    Index of the codeword closest to ``vector`` under ``distance``.

    Ties keep the first (lowest) index. A single-entry codebook always
    yields index 0 without computing any distance.
    """
    if codebook.shape[0] < 2:
        return 0
    return int(np.argmin(distance.compute_many(vector, codebook)))
