"""
Factory functions for easy quantizer setup.

This module builds any of the vq quantizers from a named configuration
template, optionally overriding individual hyperparameters.
"""

from typing import Any, Dict, Optional

from .configs import get_config, resolve_kind
from .distances import Distance
from .exceptions import EmptyInputError, InvalidParameterError
from .quantization import (
    TSVQ,
    BinaryQuantizer,
    OptimizedProductQuantizer,
    ProductQuantizer,
    Quantizer,
    ResidualQuantizer,
    ScalarQuantizer,
)
from .utils.logging import get_logger

logger = get_logger(__name__)

_TRAINED_KINDS = {
    "product": ProductQuantizer,
    "optimized_product": OptimizedProductQuantizer,
    "residual": ResidualQuantizer,
    "tree_structured": TSVQ,
}

_ALLOWED_KEYS = {
    "binary": {"threshold", "low", "high"},
    "scalar": {"min", "max", "levels"},
    "product": {"m", "k", "max_iters", "seed", "metric", "p", "distance"},
    "optimized_product": {"m", "k", "max_iters", "opq_iters", "seed", "metric", "p", "distance"},
    "residual": {"stages", "k", "max_iters", "epsilon", "seed", "metric", "p", "distance"},
    "tree_structured": {"max_depth", "metric", "p", "distance"},
}


def _distance_from_config(config: Dict[str, Any]) -> Distance:
    metric = config.pop("metric", "euclidean")
    p = config.pop("p", None)
    if isinstance(metric, Distance):
        return metric
    return Distance.from_name(metric, p)


def create_quantizer(
    kind: str,
    training_data: Any = None,
    template: Optional[str] = None,
    **overrides: Any
) -> Quantizer:
    """
    Create a quantizer from a configuration template.

    Args:
        kind: Quantizer kind or alias (``"pq"``, ``"optimized_product"``, ...)
        training_data: Training vectors; required for product, optimized
            product, residual and tree-structured quantizers
        template: Template name (defaults to the kind's default template)
        **overrides: Hyperparameters replacing the template's values; a
            ``distance`` may be given as a ``Distance`` or via ``metric``/``p``

    Returns:
        Fitted quantizer
    """
    kind = resolve_kind(kind)
    config = get_config(kind, template)
    config.pop("description", None)
    config.update(overrides)

    unknown = set(config) - _ALLOWED_KEYS[kind]
    if unknown:
        raise InvalidParameterError(
            f"Unknown {kind} parameters: {', '.join(sorted(unknown))}"
        )

    logger.debug("Creating %s quantizer with %s", kind, config)

    if kind == "binary":
        return BinaryQuantizer.fit(**config)
    if kind == "scalar":
        return ScalarQuantizer.fit(**config)

    if training_data is None:
        raise EmptyInputError(f"Empty input: {kind} quantizer requires training data.")

    if "distance" not in config:
        config["distance"] = _distance_from_config(config)
    else:
        config.pop("metric", None)
        config.pop("p", None)

    return _TRAINED_KINDS[kind].fit(training_data, **config)
