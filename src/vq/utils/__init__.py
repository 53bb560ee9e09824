"""
Utility modules for the vq library.

This module provides logging setup and the shared worker pool. Input
validation and evaluation helpers live in ``vq.utils.validation`` and
``vq.utils.evaluation``.
"""

from .logging import get_logger, logging_config_from_env, setup_logging
from .parallel import (
    PARALLEL_THRESHOLD,
    chunked_map,
    configure_parallelism,
    parallel_join,
    parallel_map,
)

__all__ = [
    # Logging
    "get_logger",
    "setup_logging",
    "logging_config_from_env",
    # Parallelism
    "PARALLEL_THRESHOLD",
    "configure_parallelism",
    "parallel_map",
    "chunked_map",
    "parallel_join",
]
