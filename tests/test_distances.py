"""
Tests for distance metrics.
"""

import numpy as np
import pytest

from vq.distances import Distance
from vq.exceptions import (
    DimensionMismatchError,
    InvalidMetricParameterError,
    InvalidParameterError,
)
from vq.vector import Vector

ALL_METRICS = [
    Distance.squared_euclidean(),
    Distance.euclidean(),
    Distance.cosine(),
    Distance.manhattan(),
    Distance.chebyshev(),
    Distance.minkowski(3.0),
    Distance.hamming(),
]


class TestDistanceValues:
    """Test each metric on known inputs."""

    def test_euclidean_family(self):
        """Test squared and plain Euclidean distance."""
        a = [0.0, 0.0]
        b = [3.0, 4.0]
        assert Distance.squared_euclidean().compute(a, b) == pytest.approx(25.0)
        assert Distance.euclidean().compute(a, b) == pytest.approx(5.0)

    def test_manhattan_and_chebyshev(self):
        """Test L1 and L-infinity distances."""
        a = [0.0, 0.0]
        b = [3.0, -4.0]
        assert Distance.manhattan().compute(a, b) == pytest.approx(7.0)
        assert Distance.chebyshev().compute(a, b) == pytest.approx(4.0)

    def test_minkowski(self):
        """Test that Minkowski generalizes L1 and L2."""
        a = [0.0, 0.0]
        b = [3.0, 4.0]
        assert Distance.minkowski(1.0).compute(a, b) == pytest.approx(7.0, rel=1e-5)
        assert Distance.minkowski(2.0).compute(a, b) == pytest.approx(5.0, rel=1e-5)

    def test_cosine(self):
        """Test cosine distance."""
        assert Distance.cosine().compute([1.0, 0.0], [0.0, 1.0]) == pytest.approx(1.0)
        assert Distance.cosine().compute([1.0, 0.0], [2.0, 0.0]) == pytest.approx(0.0, abs=1e-6)
        assert Distance.cosine().compute([1.0, 0.0], [-1.0, 0.0]) == pytest.approx(2.0)

    def test_cosine_zero_vector(self):
        """Test that a zero-norm operand gives distance 1."""
        assert Distance.cosine().compute([0.0, 0.0], [1.0, 2.0]) == 1.0

    def test_hamming(self):
        """Test counting differing positions."""
        assert Distance.hamming().compute([1.0, 2.0, 3.0], [1.0, 0.0, 3.0]) == 1.0

        a = Vector(np.array([0, 1, 1], dtype=np.uint8))
        b = Vector(np.array([1, 1, 0], dtype=np.uint8))
        assert Distance.hamming().compute(a, b) == 2.0

    def test_uint8_operands_do_not_wrap(self):
        """Test that differences of 8-bit codes are taken in float precision."""
        a = Vector(np.array([0], dtype=np.uint8))
        b = Vector(np.array([255], dtype=np.uint8))
        assert Distance.manhattan().compute(a, b) == 255.0

    def test_return_type(self):
        """Test that distances are plain floats."""
        assert isinstance(Distance.euclidean().compute([1.0], [2.0]), float)


class TestDistanceProperties:
    """Test metric properties over random vectors."""

    @pytest.mark.parametrize("distance", ALL_METRICS, ids=repr)
    def test_symmetry(self, distance):
        """Test that compute(a, b) equals compute(b, a)."""
        np.random.seed(11)
        a = np.random.randn(32).astype(np.float32)
        b = np.random.randn(32).astype(np.float32)
        assert distance.compute(a, b) == pytest.approx(distance.compute(b, a), rel=1e-6)

    @pytest.mark.parametrize("distance", ALL_METRICS, ids=repr)
    def test_self_distance_is_zero(self, distance):
        """Test that every vector is at distance zero from itself."""
        np.random.seed(12)
        a = np.random.randn(32).astype(np.float32)
        assert distance.compute(a, a) == pytest.approx(0.0, abs=1e-5)

    @pytest.mark.parametrize("distance", ALL_METRICS, ids=repr)
    def test_dimension_mismatch(self, distance):
        """Test operands of different lengths."""
        with pytest.raises(DimensionMismatchError):
            distance.compute([1.0, 2.0], [1.0])

    @pytest.mark.parametrize("distance", ALL_METRICS, ids=repr)
    def test_compute_many_matches_compute(self, distance, sample_vectors, query_vector):
        """Test the row-wise variant against single computations."""
        rows = sample_vectors[:20]
        expected = [distance.compute(query_vector, row) for row in rows]
        np.testing.assert_allclose(
            distance.compute_many(query_vector, rows), expected, rtol=1e-5, atol=1e-5
        )

    @pytest.mark.parametrize("distance", ALL_METRICS, ids=repr)
    def test_parallel_matches_sequential(self, distance, long_vectors, two_worker_pool):
        """Test fan-out reductions against the first half computed inline."""
        a, b = long_vectors
        full = distance.compute(a, b)
        assert np.isfinite(full)

        if distance.metric == Distance.EUCLIDEAN:
            expected = np.sqrt(np.sum((a.astype(np.float64) - b.astype(np.float64)) ** 2))
            assert full == pytest.approx(expected, rel=1e-4)
        if distance.metric == Distance.MANHATTAN:
            expected = np.sum(np.abs(a.astype(np.float64) - b.astype(np.float64)))
            assert full == pytest.approx(expected, rel=1e-4)
        if distance.metric == Distance.CHEBYSHEV:
            assert full == pytest.approx(float(np.max(np.abs(a - b))))


class TestDistanceParameters:
    """Test metric construction and parameter checks."""

    @pytest.mark.parametrize("p", [0.0, -1.0])
    def test_minkowski_requires_positive_p(self, p):
        """Test that a non-positive order fails when computing."""
        distance = Distance.minkowski(p)
        with pytest.raises(InvalidMetricParameterError) as excinfo:
            distance.compute([1.0, 2.0], [3.0, 4.0])
        assert excinfo.value.metric == "Minkowski"
        assert "p must be positive" in str(excinfo.value)

    def test_dimension_checked_before_parameters(self):
        """Test that a length mismatch is reported first."""
        with pytest.raises(DimensionMismatchError):
            Distance.minkowski(0.0).compute([1.0, 2.0], [1.0])

    def test_from_name(self):
        """Test building metrics from names and aliases."""
        assert Distance.from_name("euclidean") == Distance.euclidean()
        assert Distance.from_name("L2") == Distance.euclidean()
        assert Distance.from_name("cityblock") == Distance.manhattan()
        assert Distance.from_name("squared-euclidean") == Distance.squared_euclidean()
        assert Distance.from_name("minkowski", 3) == Distance.minkowski(3.0)

    def test_unknown_metric(self):
        """Test an unknown metric name."""
        with pytest.raises(InvalidParameterError):
            Distance.from_name("unknown")

    def test_minkowski_requires_p(self):
        """Test building Minkowski without an order."""
        with pytest.raises(InvalidMetricParameterError):
            Distance.from_name("minkowski")

    def test_repr_and_hash(self):
        """Test display and use as dictionary keys."""
        assert repr(Distance.cosine()) == "Distance.cosine()"
        assert repr(Distance.minkowski(3)) == "Distance.minkowski(3.0)"
        assert len({Distance.cosine(), Distance.cosine(), Distance.hamming()}) == 2
