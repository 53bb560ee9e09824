"""
vq - Vector quantization algorithms for Python.

This package compresses high-dimensional vectors into compact codes while
approximately preserving distances. It provides binary, scalar, product,
optimized product, residual and tree-structured quantizers built on a shared
vector abstraction, a distance-metric library and LBG clustering.
"""

__version__ = "0.1.3"

from .clustering import lbg_quantize
from .distances import Distance
from .exceptions import (
    DimensionMismatchError,
    EmptyInputError,
    InvalidMetricParameterError,
    InvalidParameterError,
    VQError,
)
from .factory import create_quantizer
from .quantization import (
    TSVQ,
    BinaryQuantizer,
    OptimizedProductQuantizer,
    ProductQuantizer,
    Quantizer,
    ResidualQuantizer,
    ScalarQuantizer,
)
from .utils.logging import get_logger, logging_config_from_env, setup_logging
from .utils.parallel import PARALLEL_THRESHOLD, configure_parallelism
from .vector import Vector, mean_vector

__all__ = [
    "Vector",
    "mean_vector",
    "Distance",
    "lbg_quantize",
    # Quantizers
    "Quantizer",
    "BinaryQuantizer",
    "ScalarQuantizer",
    "ProductQuantizer",
    "OptimizedProductQuantizer",
    "ResidualQuantizer",
    "TSVQ",
    "create_quantizer",
    # Errors
    "VQError",
    "DimensionMismatchError",
    "EmptyInputError",
    "InvalidParameterError",
    "InvalidMetricParameterError",
    # Configuration
    "PARALLEL_THRESHOLD",
    "configure_parallelism",
    "get_logger",
    "setup_logging",
    "logging_config_from_env",
]
