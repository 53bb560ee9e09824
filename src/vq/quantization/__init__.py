"""
Quantization implementations for the vq library.

This module provides the quantizers that compress vectors into compact
codes: binary, scalar, product, optimized product, residual and
tree-structured vector quantization.
"""

from .base import Quantizer
from .binary import BinaryQuantizer
from .optimized_product import OptimizedProductQuantizer
from .product import ProductQuantizer
from .residual import ResidualQuantizer
from .scalar import ScalarQuantizer
from .tree import TSVQ, TSVQNode

__all__ = [
    "Quantizer",
    "BinaryQuantizer",
    "ScalarQuantizer",
    "ProductQuantizer",
    "OptimizedProductQuantizer",
    "ResidualQuantizer",
    "TSVQ",
    "TSVQNode",
]
