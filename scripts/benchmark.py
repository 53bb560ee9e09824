#!/usr/bin/env python3
"""
Benchmark script for the vq quantizers.

This script fits every quantizer on synthetic data of increasing size and
writes training time, quantization time, reconstruction error, recall and
memory reduction to a CSV report.
"""

import argparse
import csv
import time
from pathlib import Path
from typing import Any, Callable, Dict, List

import numpy as np
import psutil

from vq import (
    TSVQ,
    BinaryQuantizer,
    Distance,
    OptimizedProductQuantizer,
    ProductQuantizer,
    ResidualQuantizer,
    ScalarQuantizer,
    get_logger,
    logging_config_from_env,
    setup_logging,
)
from vq.utils.evaluation import (
    generate_synthetic_data,
    memory_reduction_ratio,
    recall_at_k,
    reconstruction_error,
)

logger = get_logger("vq.benchmark")

FIELDS = [
    "quantizer",
    "n_samples",
    "n_dims",
    "training_time_ms",
    "quantization_time_ms",
    "reconstruction_error",
    "recall",
    "memory_reduction_ratio",
    "training_memory_mb",
]


class BenchmarkSuite:
    """Benchmark suite comparing the vq quantizers."""

    def __init__(self, output_dir: str = "benchmark_results", seed: int = 66):
        """Initialize benchmark suite."""
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.seed = seed
        self.process = psutil.Process()

    def quantizer_factories(self, m: int, k: int, max_iters: int) -> Dict[str, Callable]:
        """Fitting functions keyed by quantizer name."""
        distance = Distance.euclidean()
        return {
            "bq": lambda data: BinaryQuantizer.fit(0.5, 0, 1),
            "sq": lambda data: ScalarQuantizer.fit(0.0, 1.0, 256),
            "pq": lambda data: ProductQuantizer.fit(data, m, k, max_iters, distance, 42),
            "opq": lambda data: OptimizedProductQuantizer.fit(
                data, m, k, max_iters, 3, distance, 42
            ),
            "rvq": lambda data: ResidualQuantizer.fit(data, 4, k, max_iters, 1e-3, distance, 42),
            "tsvq": lambda data: TSVQ.fit(data, 8, distance),
        }

    def run_one(self, name: str, fit: Callable, data: np.ndarray) -> Dict[str, Any]:
        """Fit and evaluate one quantizer on ``data``."""
        n_samples, n_dims = data.shape

        rss_before = self.process.memory_info().rss
        start = time.perf_counter()
        quantizer = fit(data)
        training_time_ms = (time.perf_counter() - start) * 1000.0
        # Resident memory growth while fitting, in MB
        training_memory_mb = (self.process.memory_info().rss - rss_before) / 1024 / 1024

        start = time.perf_counter()
        quantized = quantizer.quantize_batch(data)
        quantization_time_ms = (time.perf_counter() - start) * 1000.0

        reconstructed = quantizer.dequantize(quantized)
        code_bytes = quantized.shape[1] * quantized.dtype.itemsize

        result = {
            "quantizer": name,
            "n_samples": n_samples,
            "n_dims": n_dims,
            "training_time_ms": training_time_ms,
            "quantization_time_ms": quantization_time_ms,
            "reconstruction_error": reconstruction_error(data, reconstructed),
            "recall": recall_at_k(data, reconstructed, k=10),
            "memory_reduction_ratio": memory_reduction_ratio(n_dims, code_bytes),
            "training_memory_mb": training_memory_mb,
        }
        logger.info(
            "%s n=%d: train %.2fms, quantize %.2fms, error %.4f, recall@10 %.4f",
            name, n_samples, training_time_ms, quantization_time_ms,
            result["reconstruction_error"], result["recall"],
        )
        return result

    def run_benchmarks(self, config: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Run all benchmarks and write the CSV report."""
        factories = self.quantizer_factories(config["m"], config["k"], config["max_iters"])
        selected = config.get("quantizers") or list(factories)

        results = []
        for n_samples in config["sample_counts"]:
            data = generate_synthetic_data(n_samples, config["dimension"], self.seed)
            for name in selected:
                results.append(self.run_one(name, factories[name], data))

        report = self.output_dir / f"eval_results_{int(time.time())}.csv"
        with open(report, "w", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=FIELDS)
            writer.writeheader()
            writer.writerows(results)

        print(f"\nBenchmark results saved to: {report}")
        return results


def main():
    """Main benchmark function."""
    parser = argparse.ArgumentParser(description="Benchmark vq quantizers")
    parser.add_argument("--dimension", type=int, default=128,
                        help="Dimension of test vectors")
    parser.add_argument("--samples", type=int, nargs="+",
                        default=[1_000, 5_000, 10_000],
                        help="Training set sizes to benchmark")
    parser.add_argument("--m", type=int, default=16,
                        help="Number of subspaces for PQ/OPQ")
    parser.add_argument("--k", type=int, default=256,
                        help="Number of centroids per codebook")
    parser.add_argument("--max-iters", type=int, default=10,
                        help="Maximum LBG iterations")
    parser.add_argument("--quantizers", nargs="+",
                        choices=["bq", "sq", "pq", "opq", "rvq", "tsvq"],
                        help="Quantizers to run (default: all)")
    parser.add_argument("--output-dir", type=str, default="benchmark_results",
                        help="Output directory for results")
    parser.add_argument("--quick", action="store_true",
                        help="Run quick benchmarks with smaller datasets")

    args = parser.parse_args()

    setup_logging(logging_config_from_env())

    if args.quick:
        config = {
            "dimension": 32,
            "sample_counts": [500],
            "m": 4,
            "k": 16,
            "max_iters": 5,
        }
    else:
        config = {
            "dimension": args.dimension,
            "sample_counts": args.samples,
            "m": args.m,
            "k": args.k,
            "max_iters": args.max_iters,
        }
    config["quantizers"] = args.quantizers

    suite = BenchmarkSuite(args.output_dir)
    suite.run_benchmarks(config)


if __name__ == "__main__":
    main()
