"""
Pytest configuration and fixtures for vq tests.
"""

import logging

import numpy as np
import pytest

from vq.utils.logging import ROOT_LOGGER_NAME
from vq.utils.parallel import PARALLEL_THRESHOLD, configure_parallelism


@pytest.fixture
def sample_vectors():
    """Generate sample training vectors for testing."""
    np.random.seed(42)
    return np.random.randn(200, 16).astype(np.float32)


@pytest.fixture
def small_vectors():
    """Generate small sample vectors for testing."""
    np.random.seed(456)
    return np.random.randn(8, 4).astype(np.float32)


@pytest.fixture
def query_vector():
    """Generate a query vector for testing."""
    np.random.seed(123)
    return np.random.randn(16).astype(np.float32)


@pytest.fixture
def long_vectors():
    """Two vectors longer than the parallel threshold."""
    np.random.seed(789)
    return (
        np.random.randn(4 * PARALLEL_THRESHOLD).astype(np.float32),
        np.random.randn(4 * PARALLEL_THRESHOLD).astype(np.float32),
    )


@pytest.fixture
def two_worker_pool():
    """Run the test with a two-thread pool so parallel paths really fan out."""
    configure_parallelism(2)
    yield
    configure_parallelism(None)


@pytest.fixture
def clean_vq_logger():
    """Restore the vq logger after a test configures it."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    level = logger.level
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(level)
