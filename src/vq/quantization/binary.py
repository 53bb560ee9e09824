"""
Binary quantization implementation for the vq library.
"""

from typing import Any, Dict

import numpy as np

from ..exceptions import InvalidParameterError
from ..utils.parallel import chunked_map
from ..utils.validation import as_array
from ..vector import Vector
from .base import Quantizer


class BinaryQuantizer(Quantizer):
    """
    Binary quantization implementation.

    Each element is mapped to one of two 8-bit codes depending on whether it
    lies at or above a threshold. No training data is involved.
    """

    quantizer_type = "binary"

    def __init__(self, threshold: float, low: int, high: int):
        super().__init__({"threshold": threshold, "low": low, "high": high})
        self._threshold = np.float32(threshold)
        self._low = np.uint8(low)
        self._high = np.uint8(high)

    @classmethod
    def fit(cls, threshold: float = 0.0, low: int = 0, high: int = 1) -> "BinaryQuantizer":
        """
        Create a binary quantizer.

        Args:
            threshold: Values >= threshold map to ``high``, the rest to ``low``
            low: Code for values below the threshold (0-255)
            high: Code for values at or above the threshold (0-255)

        Raises:
            InvalidParameterError: If ``low >= high`` or a code is outside 0-255
        """
        if low >= high:
            raise InvalidParameterError(
                "Low quantization level must be less than high quantization level"
            )
        if low < 0 or high > np.iinfo(np.uint8).max:
            raise InvalidParameterError("Quantization levels must fit in 8 bits")
        if not np.isfinite(threshold):
            raise InvalidParameterError("threshold must be finite")
        return cls(float(threshold), int(low), int(high))

    @property
    def threshold(self) -> float:
        return float(self._threshold)

    @property
    def low(self) -> int:
        return int(self._low)

    @property
    def high(self) -> int:
        return int(self._high)

    def quantize(self, vector: Any) -> Vector:
        """Map each element to ``high`` if it is >= threshold, else ``low``."""
        data = as_array(vector)

        def binarize(start: int, end: int) -> np.ndarray:
            return np.where(data[start:end] >= self._threshold, self._high, self._low)

        codes = np.concatenate(chunked_map(binarize, data.shape[0])).astype(np.uint8)
        return Vector(codes, dtype=np.uint8)

    def get_stats(self) -> Dict[str, Any]:
        """Get binary quantizer statistics."""
        return {
            "quantizer_type": self.quantizer_type,
            "threshold": self.threshold,
            "low": self.low,
            "high": self.high,
            "bits_per_value": 8,
            # One byte per element is stored; the information content is one bit
            "compression_ratio": 32.0 / 8.0,
        }
