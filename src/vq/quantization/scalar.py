"""
Scalar quantization implementation for the vq library.
"""

from typing import Any, Dict

import numpy as np

from ..exceptions import InvalidParameterError
from ..utils.parallel import chunked_map
from ..utils.validation import as_array
from ..vector import Vector
from .base import Quantizer

MAX_LEVELS = 256


class ScalarQuantizer(Quantizer):
    """
    Scalar quantization implementation.

    Scalar quantization maps each element independently onto one of
    ``levels`` evenly spaced values between ``min`` and ``max``. Elements are
    clamped to the range first, so the reconstruction error of any element
    within the range is at most half a step.
    """

    quantizer_type = "scalar"

    def __init__(self, min_value: float, max_value: float, levels: int):
        super().__init__({"min": min_value, "max": max_value, "levels": levels})
        self._min = np.float32(min_value)
        self._max = np.float32(max_value)
        self._levels = int(levels)
        self._step = np.float32((self._max - self._min) / np.float32(self._levels - 1))

    @classmethod
    def fit(cls, min: float, max: float, levels: int = MAX_LEVELS) -> "ScalarQuantizer":
        """
        Create a scalar quantizer.

        Args:
            min: Lower bound of the quantization range
            max: Upper bound of the quantization range
            levels: Number of quantization levels (2-256)

        Raises:
            InvalidParameterError: If ``max <= min`` or ``levels`` is out of range
        """
        if not (np.isfinite(min) and np.isfinite(max)):
            raise InvalidParameterError("min and max must be finite")
        if max <= min:
            raise InvalidParameterError("max must be greater than min")
        if levels < 2:
            raise InvalidParameterError("levels must be at least 2")
        if levels > MAX_LEVELS:
            raise InvalidParameterError("levels must be no more than 256")
        return cls(float(min), float(max), int(levels))

    @property
    def min(self) -> float:
        return float(self._min)

    @property
    def max(self) -> float:
        return float(self._max)

    @property
    def levels(self) -> int:
        return self._levels

    @property
    def step(self) -> float:
        return float(self._step)

    def _quantize_values(self, values: np.ndarray) -> np.ndarray:
        clamped = np.clip(values, self._min, self._max)
        # Round half away from zero in float64; the offset is never negative
        ratio = ((clamped - self._min) / self._step).astype(np.float64)
        index = np.floor(ratio + 0.5)
        return np.clip(index, 0, self._levels - 1).astype(np.uint8)

    def quantize(self, vector: Any) -> Vector:
        """Quantize each element to its 8-bit level index."""
        data = as_array(vector)
        codes = np.concatenate(
            chunked_map(lambda start, end: self._quantize_values(data[start:end]), data.shape[0])
        )
        return Vector(codes.astype(np.uint8), dtype=np.uint8)

    def dequantize(self, quantized: Any) -> np.ndarray:
        """Reconstruct values as ``min + index * step``."""
        codes = super().dequantize(quantized)
        return (self._min + codes * self._step).astype(np.float32)

    def get_stats(self) -> Dict[str, Any]:
        """Get scalar quantizer statistics."""
        return {
            "quantizer_type": self.quantizer_type,
            "min": self.min,
            "max": self.max,
            "levels": self.levels,
            "step": self.step,
            "bits_per_value": int(np.ceil(np.log2(self.levels))),
            # Codes are stored one byte per element
            "compression_ratio": 32.0 / 8.0,
        }
