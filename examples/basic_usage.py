"""
Basic usage example for the vq library.

This example demonstrates the fundamental operations:
- Quantizing vectors with binary and scalar quantizers
- Fitting product, optimized product, residual and tree-structured quantizers
- Measuring reconstruction error
- Building quantizers from configuration templates
"""

import numpy as np

from vq import (
    TSVQ,
    BinaryQuantizer,
    Distance,
    OptimizedProductQuantizer,
    ProductQuantizer,
    ResidualQuantizer,
    ScalarQuantizer,
    Vector,
    create_quantizer,
    logging_config_from_env,
    setup_logging,
)
from vq.utils.evaluation import reconstruction_error


def main():
    """Run basic usage example."""
    setup_logging(logging_config_from_env())

    print("vq - Basic Usage Example")
    print("=" * 50)

    # 1. Generate sample data
    print("\n1. Generating sample data...")
    np.random.seed(42)
    training = np.random.randn(1000, 64).astype(np.float32)
    query = Vector(training[0])
    print(f"   Generated {len(training)} vectors of dimension {training.shape[1]}")

    # 2. Quantizers without training
    print("\n2. Binary and scalar quantization...")
    binary = BinaryQuantizer.fit(0.0, 0, 1)
    print(f"   Binary codes: {binary.quantize(query)[:8]}")

    scalar = ScalarQuantizer.fit(-3.0, 3.0, 256)
    codes = scalar.quantize(query)
    print(f"   Scalar codes: {codes[:8]}")
    print(f"   Max scalar error: {np.max(np.abs(scalar.dequantize(codes) - query.data)):.4f}")

    # 3. Trained quantizers
    print("\n3. Fitting trained quantizers...")
    quantizers = {
        "product": ProductQuantizer.fit(training, 8, 64, 10, Distance.euclidean(), 42),
        "optimized_product": OptimizedProductQuantizer.fit(training, 8, 64, 10, 3),
        "residual": ResidualQuantizer.fit(training, 3, 64),
        "tree_structured": TSVQ.fit(training, 6),
    }

    for name, quantizer in quantizers.items():
        reconstructed = quantizer.dequantize(quantizer.quantize_batch(training))
        error = reconstruction_error(training, reconstructed)
        print(f"   {name:18s} mse={error:.4f} stats={quantizer.get_stats()}")

    # 4. Templates
    print("\n4. Creating a quantizer from a template...")
    pq = create_quantizer("pq", training, template="fast", metric="cosine")
    print(f"   {pq!r}")
    print(f"   Codes for the query: {pq.encode(query)}")

    print("\nExample completed successfully!")


if __name__ == "__main__":
    main()
