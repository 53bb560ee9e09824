"""
Residual quantization implementation for the vq library.
"""

from typing import Any, Dict, List, Optional

import numpy as np

from ..clustering import lbg_quantize
from ..distances import Distance
from ..exceptions import InvalidParameterError
from ..utils.logging import get_logger
from ..utils.parallel import chunked_map
from ..utils.validation import as_array, as_matrix, validate_positive_int
from ..vector import Vector
from .base import Quantizer, freeze, index_dtype, nearest_index

logger = get_logger(__name__)


def _subtract_nearest(
    residuals: np.ndarray, codebook: np.ndarray, distance: Distance
) -> np.ndarray:
    """Subtract each residual's nearest codeword (rows handled independently)."""

    def update(start: int, end: int) -> np.ndarray:
        block = residuals[start:end]
        chosen = [nearest_index(distance, row, codebook) for row in block]
        return block - codebook[chosen]

    return np.concatenate(chunked_map(update, residuals.shape[0]))


class ResidualQuantizer(Quantizer):
    """
    Residual vector quantization (RVQ) implementation.

    Each stage quantizes what the previous stages left over: stage ``i``'s
    codebook is learned on the residuals remaining after stages ``0..i-1``.
    A vector is approximated by the sum of one codeword per stage. Stages
    stop being added once the mean residual norm falls below ``epsilon``.
    """

    quantizer_type = "residual"

    def __init__(
        self,
        codebooks: List[np.ndarray],
        dim: int,
        epsilon: float,
        distance: Distance,
        config: Dict[str, Any],
    ):
        super().__init__(config)
        self._codebooks = tuple(freeze(np.asarray(cb, dtype=np.float32)) for cb in codebooks)
        self._dim = int(dim)
        self._epsilon = float(epsilon)
        self._distance = distance

    @classmethod
    def fit(
        cls,
        training_data: Any,
        stages: int,
        k: int,
        max_iters: int = 10,
        epsilon: float = 1e-3,
        distance: Optional[Distance] = None,
        seed: int = 42,
    ) -> "ResidualQuantizer":
        """
        Fit a residual quantizer.

        Args:
            training_data: Training vectors, shape (n, dim)
            stages: Maximum number of quantization stages
            k: Number of centroids per stage
            max_iters: Maximum LBG iterations per stage
            epsilon: Mean residual norm below which no further stages are added
            distance: Metric used to select codewords (Euclidean by default)
            seed: Random seed; stage ``i`` uses ``seed + i``

        Raises:
            EmptyInputError: If ``training_data`` is empty
            InvalidParameterError: If ``stages < 1``, ``epsilon`` is negative or
                there are fewer training vectors than ``k``
        """
        data = as_matrix(training_data)
        stages = validate_positive_int(stages, "stages")
        if not epsilon >= 0:
            raise InvalidParameterError("epsilon must be non-negative")
        distance = distance or Distance.euclidean()

        n, dim = data.shape
        logger.info(
            "Fitting residual quantizer: n=%d dim=%d stages=%d k=%d", n, dim, stages, k
        )

        codebooks = []
        residuals = data.copy()

        for stage in range(stages):
            codebook = lbg_quantize(residuals, k, max_iters, seed + stage)
            codebooks.append(codebook)

            residuals = _subtract_nearest(residuals, codebook, distance)

            avg_norm = float(np.mean(np.linalg.norm(residuals, axis=1)))
            logger.debug("RVQ stage %d: mean residual norm %.6f", stage + 1, avg_norm)
            if avg_norm < epsilon:
                logger.debug("RVQ early termination after %d stages", stage + 1)
                break

        config = {
            "stages": stages,
            "k": k,
            "max_iters": max_iters,
            "epsilon": epsilon,
            "distance": distance,
            "seed": seed,
        }
        return cls(codebooks, dim, epsilon, distance, config)

    @property
    def stages(self) -> int:
        """Number of stages actually retained."""
        return len(self._codebooks)

    @property
    def dim(self) -> int:
        return self._dim

    @property
    def epsilon(self) -> float:
        return self._epsilon

    @property
    def distance(self) -> Distance:
        return self._distance

    @property
    def codebooks(self) -> tuple:
        """Per-stage codebooks, each of shape (k, dim); read-only."""
        return self._codebooks

    def encode(self, vector: Any) -> np.ndarray:
        """
        Compute one codeword index per stage.

        Encoding stops early once the residual norm drops below ``epsilon``,
        so the result may be shorter than ``stages``.

        Raises:
            DimensionMismatchError: If the input length differs from ``dim``
        """
        residual = as_array(vector, dim=self._dim)
        k = max((cb.shape[0] for cb in self._codebooks), default=1)
        codes = []

        for codebook in self._codebooks:
            index = nearest_index(self._distance, residual, codebook)
            codes.append(index)
            residual = residual - codebook[index]
            if np.linalg.norm(residual) < self._epsilon:
                break

        return np.asarray(codes, dtype=index_dtype(k))

    def decode(self, codes: Any) -> Vector:
        """Sum the selected codeword of each stage (16-bit floats)."""
        codes = np.asarray(codes, dtype=np.intp).reshape(-1)
        if codes.shape[0] > len(self._codebooks):
            raise InvalidParameterError(
                f"Got {codes.shape[0]} codes for {len(self._codebooks)} stages"
            )

        total = np.zeros(self._dim, dtype=np.float32)
        for codebook, index in zip(self._codebooks, codes):
            if not 0 <= index < codebook.shape[0]:
                raise InvalidParameterError("Codeword index out of range")
            total = total + codebook[index]

        return Vector(total.astype(np.float16), dtype=np.float16)

    def quantize(self, vector: Any) -> Vector:
        """Approximate a vector by the sum of its per-stage codewords."""
        return self.decode(self.encode(vector))

    def get_stats(self) -> Dict[str, Any]:
        """Get residual quantizer statistics."""
        k = self._config["k"]
        bits_per_stage = float(np.log2(k)) if k > 1 else 1.0
        total_bits = bits_per_stage * self.stages
        return {
            "quantizer_type": self.quantizer_type,
            "stages": self.stages,
            "requested_stages": self._config["stages"],
            "k": k,
            "dimensions": self._dim,
            "epsilon": self._epsilon,
            "distance": repr(self._distance),
            "total_bits": total_bits,
            "compression_ratio": 32.0 * self._dim / total_bits,
        }
