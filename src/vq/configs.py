"""
Pre-configured hyperparameter templates for the vq quantizers.

This module provides ready-to-use configurations for common use cases,
making it easy to get started with each quantizer kind.
"""

from typing import Any, Dict, List, Optional

from .exceptions import InvalidParameterError


QUANTIZER_CONFIGS: Dict[str, Dict[str, Dict[str, Any]]] = {
    "binary": {
        "sign": {
            "threshold": 0.0,
            "low": 0,
            "high": 1,
            "description": "One bit per element split at zero",
        },
        "unit_interval": {
            "threshold": 0.5,
            "low": 0,
            "high": 1,
            "description": "One bit per element for data in [0, 1]",
        },
    },
    "scalar": {
        "uint8": {
            "min": -1.0,
            "max": 1.0,
            "levels": 256,
            "description": "Full 8-bit range for normalized embeddings",
        },
        "uint4": {
            "min": -1.0,
            "max": 1.0,
            "levels": 16,
            "description": "16 levels for aggressive compression",
        },
    },
    "product": {
        "default": {
            "m": 16,
            "k": 256,
            "max_iters": 10,
            "metric": "euclidean",
            "seed": 42,
            "description": "8-bit codes over 16 subspaces",
        },
        "fast": {
            "m": 8,
            "k": 16,
            "max_iters": 5,
            "metric": "euclidean",
            "seed": 42,
            "description": "Small codebooks for quick training",
        },
    },
    "optimized_product": {
        "default": {
            "m": 16,
            "k": 256,
            "max_iters": 10,
            "opq_iters": 10,
            "metric": "euclidean",
            "seed": 42,
            "description": "Rotation learned over 10 alternating iterations",
        },
        "fast": {
            "m": 8,
            "k": 16,
            "max_iters": 5,
            "opq_iters": 3,
            "metric": "euclidean",
            "seed": 42,
            "description": "Few rotation updates with small codebooks",
        },
    },
    "residual": {
        "default": {
            "stages": 4,
            "k": 256,
            "max_iters": 10,
            "epsilon": 1e-3,
            "metric": "euclidean",
            "seed": 42,
            "description": "Four 8-bit stages",
        },
        "fast": {
            "stages": 2,
            "k": 16,
            "max_iters": 5,
            "epsilon": 1e-2,
            "metric": "euclidean",
            "seed": 42,
            "description": "Two small stages",
        },
    },
    "tree_structured": {
        "default": {
            "max_depth": 8,
            "metric": "euclidean",
            "description": "Up to 256 leaves",
        },
        "shallow": {
            "max_depth": 4,
            "metric": "euclidean",
            "description": "Up to 16 leaves",
        },
    },
}

# Short names accepted wherever a quantizer kind is expected
KIND_ALIASES = {
    "bq": "binary",
    "sq": "scalar",
    "pq": "product",
    "opq": "optimized_product",
    "rvq": "residual",
    "tsvq": "tree_structured",
}

DEFAULT_TEMPLATES = {
    "binary": "sign",
    "scalar": "uint8",
    "product": "default",
    "optimized_product": "default",
    "residual": "default",
    "tree_structured": "default",
}


def resolve_kind(kind: str) -> str:
    """Normalize a quantizer kind or alias."""
    key = kind.strip().lower()
    key = KIND_ALIASES.get(key, key)
    if key not in QUANTIZER_CONFIGS:
        raise InvalidParameterError(f"Unknown quantizer kind: {kind}")
    return key


def get_config(kind: str, name: Optional[str] = None) -> Dict[str, Any]:
    """
    Get a configuration template.

    Args:
        kind: Quantizer kind (``"product"``, ``"pq"``, ...)
        name: Template name; the kind's default template if omitted

    Returns:
        A copy of the configuration dictionary
    """
    kind = resolve_kind(kind)
    name = name or DEFAULT_TEMPLATES[kind]

    if name not in QUANTIZER_CONFIGS[kind]:
        raise InvalidParameterError(f"Unknown {kind} config: {name}")

    return dict(QUANTIZER_CONFIGS[kind][name])


def list_configs(kind: Optional[str] = None) -> Dict[str, List[str]]:
    """
    List available configurations.

    Args:
        kind: Specific quantizer kind to list (optional)

    Returns:
        Dictionary mapping each kind to its template names
    """
    if kind:
        kind = resolve_kind(kind)
        return {kind: list(QUANTIZER_CONFIGS[kind].keys())}

    return {k: list(configs.keys()) for k, configs in QUANTIZER_CONFIGS.items()}
