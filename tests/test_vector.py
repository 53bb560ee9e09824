"""
Tests for the vector abstraction and element types.
"""

import numpy as np
import pytest

from vq.exceptions import DimensionMismatchError, EmptyInputError, InvalidParameterError
from vq.vector import FLOAT16, FLOAT32, UINT8, Vector, mean_vector, real_type


class TestRealType:
    """Test the numeric capability set."""

    def test_float32_operations(self):
        """Test float32 arithmetic helpers."""
        assert FLOAT32.zero() == 0.0
        assert FLOAT32.one() == 1.0
        assert FLOAT32.sqrt(4.0) == 2.0
        assert FLOAT32.abs(-3.5) == 3.5
        assert FLOAT32.powf(2.0, 3.0) == 8.0
        assert FLOAT32.from_f64(0.5).dtype == np.float32

    def test_uint8_saturates(self):
        """Test uint8 conversion truncates and saturates."""
        assert UINT8.from_f64(3.9) == 3
        assert UINT8.from_f64(300.7) == 255
        assert UINT8.from_f64(-4.0) == 0
        assert UINT8.sqrt(17) == 4

    def test_float16_conversion(self):
        """Test float16 conversion from float64."""
        value = FLOAT16.from_f64(1.5)
        assert value.dtype == np.float16
        assert value == 1.5

    def test_unsupported_dtype(self):
        """Test lookup of an unsupported element type."""
        with pytest.raises(InvalidParameterError):
            real_type(np.int64)


class TestVector:
    """Test vector construction and arithmetic."""

    def test_construction(self):
        """Test creating vectors from sequences and arrays."""
        v = Vector([1.0, 2.0, 3.0])
        assert len(v) == 3
        assert v.len() == 3
        assert v.dtype == np.float32
        assert v[1] == 2.0
        assert not v.is_empty()

        codes = Vector(np.array([1, 2], dtype=np.uint8))
        assert codes.dtype == np.uint8

    def test_rejects_matrices(self):
        """Test that vectors must be one-dimensional."""
        with pytest.raises(InvalidParameterError):
            Vector(np.zeros((2, 2)))

    def test_add_sub_mul(self):
        """Test element-wise arithmetic."""
        a = Vector([1.0, 2.0])
        b = Vector([3.0, 4.0])
        assert a + b == Vector([4.0, 6.0])
        assert b - a == Vector([2.0, 2.0])
        assert a * 2.0 == Vector([2.0, 4.0])
        assert 2.0 * a == Vector([2.0, 4.0])

    def test_dimension_mismatch(self):
        """Test arithmetic on vectors of different lengths."""
        a = Vector([1.0, 2.0])
        b = Vector([1.0])

        with pytest.raises(DimensionMismatchError) as excinfo:
            a - b
        assert excinfo.value.expected == 2
        assert excinfo.value.found == 1
        assert "expected 2, got 1" in str(excinfo.value)

        with pytest.raises(DimensionMismatchError):
            a + b
        with pytest.raises(DimensionMismatchError):
            a.dot(b)

    def test_dot_norm_distance(self):
        """Test reductions."""
        assert Vector([1.0, 2.0, 3.0]).dot(Vector([4.0, 5.0, 6.0])) == 32.0
        assert Vector([3.0, 4.0]).norm() == 5.0
        assert Vector([1.0, 2.0]).distance2(Vector([4.0, 6.0])) == 25.0

    def test_uint8_arithmetic_saturates(self):
        """Test that integer vectors do not wrap around."""
        a = Vector(np.array([250, 5], dtype=np.uint8))
        b = Vector(np.array([10, 10], dtype=np.uint8))
        assert list((a + b).data) == [255, 15]
        assert list((a - b).data) == [240, 0]

    def test_astype(self):
        """Test conversion between element types."""
        v = Vector([0.5, 1.25]).astype(np.float16)
        assert v.dtype == np.float16
        np.testing.assert_array_equal(v.data, np.array([0.5, 1.25], dtype=np.float16))

    def test_str(self):
        """Test the display format."""
        assert str(Vector([1.0, 2.0])) == "Vector [1.0, 2.0]"

    def test_parallel_dot_matches_sequential(self, long_vectors, two_worker_pool):
        """Test the fan-out dot product against a float64 reference."""
        a, b = long_vectors
        expected = np.dot(a.astype(np.float64), b.astype(np.float64))
        assert float(Vector(a).dot(Vector(b))) == pytest.approx(expected, rel=1e-4, abs=1e-2)

        short = Vector(a[:100]).dot(Vector(b[:100]))
        assert float(short) == pytest.approx(
            np.dot(a[:100].astype(np.float64), b[:100].astype(np.float64)), rel=1e-4, abs=1e-3
        )


class TestMeanVector:
    """Test mean vector computation."""

    def test_mean(self):
        """Test the coordinate-wise mean."""
        result = mean_vector([Vector([1.0, 2.0]), Vector([3.0, 4.0])])
        assert result == Vector([2.0, 3.0])

    def test_mean_of_matrix(self, sample_vectors):
        """Test the mean of a 2-D array."""
        result = mean_vector(sample_vectors)
        np.testing.assert_allclose(result.data, sample_vectors.mean(axis=0), atol=1e-5)

    def test_empty(self):
        """Test the mean of no vectors."""
        with pytest.raises(EmptyInputError):
            mean_vector([])

    def test_mismatched(self):
        """Test the mean of vectors of different lengths."""
        with pytest.raises(DimensionMismatchError):
            mean_vector([Vector([1.0, 2.0]), Vector([1.0])])

    def test_parallel_mean_matches_sequential(self, two_worker_pool):
        """Test the fan-out mean over many vectors."""
        np.random.seed(7)
        vectors = np.random.randn(3000, 8).astype(np.float32)
        result = mean_vector(vectors)
        np.testing.assert_allclose(
            result.data, vectors.astype(np.float64).mean(axis=0), atol=1e-5
        )
