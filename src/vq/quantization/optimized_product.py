"""
Optimized product quantization implementation for the vq library.
"""

from typing import Any, Dict, Optional

import numpy as np

from ..distances import Distance
from ..exceptions import DimensionMismatchError
from ..utils.logging import get_logger
from ..utils.parallel import chunked_map
from ..utils.validation import as_array, as_matrix, validate_positive_int
from ..vector import Vector
from .base import Quantizer, freeze
from .product import (
    _subspace_stats,
    learn_subspace_codebooks,
    reconstruct,
    subspace_indices,
    subspace_layout,
)

logger = get_logger(__name__)


def _reconstruct_all(
    data: np.ndarray, codebooks: np.ndarray, distance: Distance
) -> np.ndarray:
    """Replace every row of ``data`` by its nearest-codeword concatenation."""

    def rebuild(start: int, end: int) -> np.ndarray:
        codes = np.stack(
            [subspace_indices(distance, row, codebooks) for row in data[start:end]]
        )
        return reconstruct(codebooks, codes)

    return np.concatenate(chunked_map(rebuild, data.shape[0]))


def procrustes_rotation(originals: np.ndarray, reconstructions: np.ndarray) -> np.ndarray:
    """
    Orthogonal rotation aligning reconstructions back onto the originals.

    With ``A = Yᵀ X = U Σ Vᵀ`` (rows of ``Y`` are reconstructions, rows of
    ``X`` the vectors they approximate) the rotation is ``V Uᵀ``.
    """
    cross = reconstructions.astype(np.float64).T @ originals.astype(np.float64)
    u, _, vt = np.linalg.svd(cross)
    return (vt.T @ u.T).astype(np.float32)


class OptimizedProductQuantizer(Quantizer):
    """
    Optimized product quantization (OPQ) implementation.

    OPQ learns an orthogonal rotation of the input space together with the
    product codebooks, alternating between fitting codebooks on the rotated
    data and re-solving the rotation that best aligns the reconstructions
    with the data. Vectors are rotated before being split into subspaces,
    both during fitting and when quantizing.
    """

    quantizer_type = "optimized_product"

    def __init__(
        self,
        rotation: np.ndarray,
        codebooks: np.ndarray,
        distance: Distance,
        config: Dict[str, Any],
    ):
        super().__init__(config)
        self._rotation = freeze(np.asarray(rotation, dtype=np.float32))
        self._codebooks = freeze(np.asarray(codebooks, dtype=np.float32))
        self._m, self._k, self._sub_dim = self._codebooks.shape
        self._dim = self._rotation.shape[0]
        self._distance = distance

    @classmethod
    def fit(
        cls,
        training_data: Any,
        m: int,
        k: int,
        max_iters: int = 10,
        opq_iters: int = 10,
        distance: Optional[Distance] = None,
        seed: int = 42,
    ) -> "OptimizedProductQuantizer":
        """
        Fit an optimized product quantizer.

        Args:
            training_data: Training vectors, shape (n, dim)
            m: Number of subspaces
            k: Number of centroids per subspace
            max_iters: Maximum LBG iterations per subspace and OPQ iteration
            opq_iters: Number of alternating rotation/codebook iterations
            distance: Metric used to select codewords (Euclidean by default)
            seed: Random seed; subspace ``i`` uses ``seed + i``

        Raises:
            EmptyInputError: If ``training_data`` is empty
            InvalidParameterError: If the dimension cannot be split into ``m``
                subspaces, ``opq_iters < 1`` or there are fewer training
                vectors than ``k``
        """
        data = as_matrix(training_data)
        m = validate_positive_int(m, "m")
        subspace_layout(data.shape[1], m)
        opq_iters = validate_positive_int(opq_iters, "opq_iters")
        distance = distance or Distance.euclidean()

        n, dim = data.shape
        logger.info(
            "Fitting optimized product quantizer: n=%d dim=%d m=%d k=%d opq_iters=%d",
            n, dim, m, k, opq_iters,
        )

        rotation = np.eye(dim, dtype=np.float32)
        rotated = data
        codebooks = None

        for iteration in range(opq_iters):
            codebooks = learn_subspace_codebooks(rotated, m, k, max_iters, seed)
            reconstructions = _reconstruct_all(rotated, codebooks, distance)

            distortion = float(np.mean(np.sum((rotated - reconstructions) ** 2, axis=1)))
            logger.debug("OPQ iteration %d: distortion %.6f", iteration + 1, distortion)

            rotation = procrustes_rotation(rotated, reconstructions)
            rotated = data @ rotation.T

        config = {
            "m": m,
            "k": k,
            "max_iters": max_iters,
            "opq_iters": opq_iters,
            "distance": distance,
            "seed": seed,
        }
        return cls(rotation, codebooks, distance, config)

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
        return self._dim

    @property
    def distance(self) -> Distance:
        return self._distance

    @property
    def codebooks(self) -> np.ndarray:
        """Codebooks of shape (m, k, sub_dim), in the rotated space; read-only."""
        return self._codebooks

    @property
    def rotation(self) -> np.ndarray:
        """Learned orthogonal rotation, shape (dim, dim); read-only."""
        return self._rotation

    def rotate(self, vector: Any) -> np.ndarray:
        """
        Apply the learned rotation to a vector.

        Raises:
            DimensionMismatchError: If the input length differs from ``dim``
        """
        data = as_array(vector, dim=self._dim)
        rotated = self._rotation @ data
        if rotated.shape[0] != self._m * self._sub_dim:
            raise DimensionMismatchError(self._m * self._sub_dim, rotated.shape[0])
        return rotated

    def encode(self, vector: Any) -> np.ndarray:
        """Rotate the vector and compute the codeword index of each subvector."""
        return subspace_indices(self._distance, self.rotate(vector), self._codebooks)

    def decode(self, codes: Any) -> Vector:
        """Concatenate the selected codewords (rotated space, 16-bit floats)."""
        return Vector(reconstruct(self._codebooks, codes).astype(np.float16), dtype=np.float16)

    def quantize(self, vector: Any) -> Vector:
        """
        Quantize a vector.

        The result lives in the rotated space; use ``dequantize`` to map it
        back to the input space.
        """
        return self.decode(self.encode(vector))

    def dequantize(self, quantized: Any) -> np.ndarray:
        """Undo the rotation (``Rᵀ``) of quantized vectors."""
        data = super().dequantize(quantized)
        if data.shape[-1] != self._dim:
            raise DimensionMismatchError(self._dim, data.shape[-1])
        return (data @ self._rotation).astype(np.float32)

    def get_stats(self) -> Dict[str, Any]:
        """Get optimized product quantizer statistics."""
        stats = _subspace_stats(self)
        stats["opq_iters"] = self._config["opq_iters"]
        stats["rotation_shape"] = self._rotation.shape
        return stats
