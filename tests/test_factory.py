"""
Tests for configuration templates and the quantizer factory.
"""

import pytest

from vq.configs import QUANTIZER_CONFIGS, get_config, list_configs
from vq.distances import Distance
from vq.exceptions import EmptyInputError, InvalidParameterError
from vq.factory import create_quantizer
from vq.quantization import (
    TSVQ,
    BinaryQuantizer,
    OptimizedProductQuantizer,
    ProductQuantizer,
    ResidualQuantizer,
    ScalarQuantizer,
)


class TestConfigs:
    """Test configuration templates."""

    def test_get_config(self):
        """Test default and named templates."""
        assert get_config("product")["m"] == 16
        assert get_config("pq", "fast")["k"] == 16
        assert get_config("SQ")["levels"] == 256

    def test_get_config_returns_copy(self):
        """Test that templates cannot be modified through the result."""
        config = get_config("product")
        config["m"] = 2
        assert QUANTIZER_CONFIGS["product"]["default"]["m"] == 16

    def test_unknown_kind_or_template(self):
        """Test lookups that do not exist."""
        with pytest.raises(InvalidParameterError):
            get_config("unknown")
        with pytest.raises(InvalidParameterError):
            get_config("product", "unknown")

    def test_list_configs(self):
        """Test listing templates."""
        configs = list_configs()
        assert set(configs) == {
            "binary",
            "scalar",
            "product",
            "optimized_product",
            "residual",
            "tree_structured",
        }
        assert list_configs("tsvq") == {"tree_structured": ["default", "shallow"]}


class TestFactory:
    """Test create_quantizer."""

    def test_untrained_kinds(self):
        """Test quantizers that need no training data."""
        binary = create_quantizer("bq")
        assert isinstance(binary, BinaryQuantizer)
        assert binary.threshold == 0.0

        scalar = create_quantizer("scalar", levels=16)
        assert isinstance(scalar, ScalarQuantizer)
        assert scalar.levels == 16

    def test_trained_kinds(self, sample_vectors):
        """Test every trained kind with small templates."""
        pq = create_quantizer("pq", sample_vectors, template="fast", m=4)
        assert isinstance(pq, ProductQuantizer)
        assert (pq.m, pq.k) == (4, 16)

        opq = create_quantizer("opq", sample_vectors, template="fast", m=4, opq_iters=1)
        assert isinstance(opq, OptimizedProductQuantizer)

        rvq = create_quantizer("rvq", sample_vectors, template="fast")
        assert isinstance(rvq, ResidualQuantizer)

        tsvq = create_quantizer("tsvq", sample_vectors, template="shallow")
        assert isinstance(tsvq, TSVQ)
        assert tsvq.depth <= 4

    def test_metric_override(self, sample_vectors):
        """Test selecting the metric by name or instance."""
        tsvq = create_quantizer("tsvq", sample_vectors, max_depth=2, metric="manhattan")
        assert tsvq.distance == Distance.manhattan()

        pq = create_quantizer(
            "pq", sample_vectors, template="fast", m=4, metric="minkowski", p=3
        )
        assert pq.distance == Distance.minkowski(3)

        rvq = create_quantizer(
            "rvq", sample_vectors, template="fast", distance=Distance.cosine()
        )
        assert rvq.distance == Distance.cosine()

    def test_missing_training_data(self):
        """Test trained kinds without data."""
        with pytest.raises(EmptyInputError):
            create_quantizer("product")

    def test_unknown_parameter(self):
        """Test rejecting parameters the kind does not accept."""
        with pytest.raises(InvalidParameterError):
            create_quantizer("binary", levels=4)
