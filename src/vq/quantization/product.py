"""
Product quantization implementation for the vq library.
"""

from typing import Any, Dict, Optional

import numpy as np

from ..clustering import lbg_quantize
from ..distances import Distance
from ..exceptions import DimensionMismatchError, InvalidParameterError
from ..utils.logging import get_logger
from ..utils.parallel import parallel_map
from ..utils.validation import as_array, as_matrix, validate_positive_int
from ..vector import Vector
from .base import Quantizer, freeze, index_dtype, nearest_index

logger = get_logger(__name__)


def subspace_layout(dim: int, m: int) -> int:
    """
    Validate that ``dim`` splits into ``m`` equal subspaces.

    Returns:
        The subspace dimension

    Raises:
        InvalidParameterError: If ``dim < m`` or ``dim`` is not divisible by ``m``
    """
    if dim < m:
        raise InvalidParameterError("Data dimension must be at least m")
    if dim % m != 0:
        raise InvalidParameterError("Data dimension must be divisible by m")
    return dim // m


def learn_subspace_codebooks(
    data: np.ndarray, m: int, k: int, max_iters: int, seed: int
) -> np.ndarray:
    """
    Learn one LBG codebook per contiguous subspace.

    Subspace ``i`` is clustered with seed ``seed + i``. Subspaces are
    independent and are learned concurrently for large training sets.

    Returns:
        Array of shape (m, k, dim // m)
    """
    sub_dim = data.shape[1] // m

    def learn(i: int) -> np.ndarray:
        sub_training = np.ascontiguousarray(data[:, i * sub_dim:(i + 1) * sub_dim])
        return lbg_quantize(sub_training, k, max_iters, seed + i)

    return np.stack(parallel_map(learn, range(m), size=data.shape[0]))


def subspace_indices(distance: Distance, vector: np.ndarray, codebooks: np.ndarray) -> np.ndarray:
    """Nearest codeword index in each subspace codebook."""
    m, k, sub_dim = codebooks.shape
    codes = np.empty(m, dtype=index_dtype(k))
    for i in range(m):
        codes[i] = nearest_index(distance, vector[i * sub_dim:(i + 1) * sub_dim], codebooks[i])
    return codes


def reconstruct(codebooks: np.ndarray, codes: np.ndarray) -> np.ndarray:
    """Concatenate the codewords selected by ``codes``."""
    m = codebooks.shape[0]
    codes = np.asarray(codes, dtype=np.intp)
    if codes.shape[-1] != m:
        raise DimensionMismatchError(m, codes.shape[-1])
    if codes.size and (codes.min() < 0 or codes.max() >= codebooks.shape[1]):
        raise InvalidParameterError("Codeword index out of range")
    return codebooks[np.arange(m), codes].reshape(*codes.shape[:-1], -1)


class ProductQuantizer(Quantizer):
    """
    Product quantization implementation.

    Product quantization divides vectors into ``m`` contiguous subvectors and
    quantizes each one against its own codebook. The quantized vector is the
    concatenation of the chosen codewords in 16-bit floating point.
    """

    quantizer_type = "product"

    def __init__(self, codebooks: np.ndarray, distance: Distance, config: Dict[str, Any]):
        super().__init__(config)
        self._codebooks = freeze(np.asarray(codebooks, dtype=np.float32))
        self._m, self._k, self._sub_dim = self._codebooks.shape
        self._distance = distance

    @classmethod
    def fit(
        cls,
        training_data: Any,
        m: int,
        k: int,
        max_iters: int = 10,
        distance: Optional[Distance] = None,
        seed: int = 42,
    ) -> "ProductQuantizer":
        """
        Fit a product quantizer.

        Args:
            training_data: Training vectors, shape (n, dim)
            m: Number of subspaces
            k: Number of centroids per subspace
            max_iters: Maximum LBG iterations per subspace
            distance: Metric used to select codewords (Euclidean by default)
            seed: Random seed; subspace ``i`` uses ``seed + i``

        Raises:
            EmptyInputError: If ``training_data`` is empty
            InvalidParameterError: If the dimension cannot be split into ``m``
                subspaces or there are fewer training vectors than ``k``
        """
        data = as_matrix(training_data)
        m = validate_positive_int(m, "m")
        sub_dim = subspace_layout(data.shape[1], m)
        distance = distance or Distance.euclidean()

        logger.info(
            "Fitting product quantizer: n=%d dim=%d m=%d k=%d",
            data.shape[0], data.shape[1], m, k,
        )
        codebooks = learn_subspace_codebooks(data, m, k, max_iters, seed)
        logger.debug("Learned %d codebooks of shape %s", m, (k, sub_dim))

        config = {"m": m, "k": k, "max_iters": max_iters, "distance": distance, "seed": seed}
        return cls(codebooks, distance, config)

    @property
    def m(self) -> int:
        return self._m

    @property
    def k(self) -> int:
        return self._k

    @property
    def sub_dim(self) -> int:
        return self._sub_dim

    @property
    def dim(self) -> int:
        return self._m * self._sub_dim

    @property
    def distance(self) -> Distance:
        return self._distance

    @property
    def codebooks(self) -> np.ndarray:
        """Codebooks of shape (m, k, sub_dim); read-only."""
        return self._codebooks

    def encode(self, vector: Any) -> np.ndarray:
        """
        Compute the codeword index of each subvector.

        Raises:
            DimensionMismatchError: If the input length is not ``m * sub_dim``
        """
        data = as_array(vector, dim=self.dim)
        return subspace_indices(self._distance, data, self._codebooks)

    def decode(self, codes: Any) -> Vector:
        """Concatenate the codewords selected by ``codes`` (16-bit floats)."""
        return Vector(reconstruct(self._codebooks, codes).astype(np.float16), dtype=np.float16)

    def quantize(self, vector: Any) -> Vector:
        """Replace each subvector by its nearest codeword."""
        return self.decode(self.encode(vector))

    def get_stats(self) -> Dict[str, Any]:
        """Get product quantizer statistics."""
        return _subspace_stats(self)


def _subspace_stats(quantizer: Any) -> Dict[str, Any]:
    bits_per_subvector = float(np.log2(quantizer.k)) if quantizer.k > 1 else 1.0
    code_bits = quantizer.m * bits_per_subvector
    return {
        "quantizer_type": quantizer.quantizer_type,
        "m": quantizer.m,
        "k": quantizer.k,
        "dimensions": quantizer.dim,
        "subvector_dimensions": quantizer.sub_dim,
        "distance": repr(quantizer.distance),
        "bits_per_subvector": bits_per_subvector,
        "total_bits": code_bits,
        # Original bits per vector / code bits per vector
        "compression_ratio": 32.0 * quantizer.dim / code_bits,
        "centroids_shape": quantizer.codebooks.shape,
    }
