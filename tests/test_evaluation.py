"""
Tests for evaluation helpers.
"""

import numpy as np
import pytest

from vq.exceptions import DimensionMismatchError, InvalidParameterError
from vq.quantization import ProductQuantizer
from vq.utils.evaluation import (
    generate_synthetic_data,
    memory_reduction_ratio,
    recall_at_k,
    reconstruction_error,
)


class TestEvaluation:
    """Test quality metrics."""

    def test_synthetic_data(self):
        """Test generated data shape, type and range."""
        data = generate_synthetic_data(100, 8, seed=1)
        assert data.shape == (100, 8)
        assert data.dtype == np.float32
        assert np.all((data >= 0) & (data < 1))
        np.testing.assert_array_equal(data, generate_synthetic_data(100, 8, seed=1))

    def test_reconstruction_error(self):
        """Test mean squared error."""
        original = np.zeros((2, 2), dtype=np.float32)
        assert reconstruction_error(original, original) == 0.0
        assert reconstruction_error(original, np.ones((2, 2))) == pytest.approx(1.0)

        with pytest.raises(DimensionMismatchError):
            reconstruction_error(original, np.ones((2, 3)))

    def test_recall_identical(self):
        """Test that unchanged vectors have perfect recall."""
        data = generate_synthetic_data(200, 8)
        assert recall_at_k(data, data, k=5) == 1.0

    def test_recall_of_quantized_data(self):
        """Test recall of product-quantized vectors."""
        data = generate_synthetic_data(300, 8)
        quantizer = ProductQuantizer.fit(data, 2, 16)
        reconstructed = quantizer.dequantize(quantizer.quantize_batch(data))

        recall = recall_at_k(data, reconstructed, k=10)
        assert 0.0 <= recall <= 1.0
        assert reconstruction_error(data, reconstructed) < reconstruction_error(
            data, np.zeros_like(data)
        )

    def test_recall_invalid_k(self):
        """Test neighborhood sizes that cannot be evaluated."""
        data = generate_synthetic_data(10, 4)
        with pytest.raises(InvalidParameterError):
            recall_at_k(data, data, k=10)

    def test_memory_reduction_ratio(self):
        """Test storage ratios."""
        assert memory_reduction_ratio(128, 128) == 4.0
        assert memory_reduction_ratio(128, 16) == 32.0
        with pytest.raises(InvalidParameterError):
            memory_reduction_ratio(128, 0)
