"""
Tree-structured vector quantization implementation for the vq library.
"""

from typing import Any, Dict, Iterator, Optional

import numpy as np

from ..distances import Distance
from ..exceptions import EmptyInputError, InvalidParameterError
from ..utils.logging import get_logger
from ..utils.parallel import chunked_map, parallel_join
from ..utils.validation import as_array, as_matrix
from ..vector import mean_vector, Vector
from .base import Quantizer, freeze

logger = get_logger(__name__)


class TSVQNode:
    """
    A node of a TSVQ tree.

    Every node holds the centroid of the training vectors that reached it.
    Internal nodes split their data at the median of the highest-variance
    dimension: the left child covers values at or below the median, the
    right child values above it.
    """

    __slots__ = ("centroid", "left", "right")

    def __init__(
        self,
        centroid: np.ndarray,
        left: Optional["TSVQNode"] = None,
        right: Optional["TSVQNode"] = None,
    ):
        self.centroid = freeze(centroid)
        self.left = left
        self.right = right

    @property
    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    @classmethod
    def fit(cls, training_data: np.ndarray, max_depth: int) -> "TSVQNode":
        """
        Recursively build a subtree from ``training_data``.

        Raises:
            EmptyInputError: If ``training_data`` is empty
        """
        n = training_data.shape[0]
        if n == 0:
            raise EmptyInputError()

        centroid = mean_vector(training_data.astype(np.float64)).data.astype(np.float32)
        if max_depth == 0 or n <= 1:
            return cls(centroid)

        dim = centroid.shape[0]

        def spread(start: int, end: int) -> np.ndarray:
            diff = training_data[:, start:end] - centroid[start:end]
            return np.sum(diff * diff, axis=0)

        # Sum of squared deviations per dimension
        variances = np.concatenate(chunked_map(spread, dim))
        # Last dimension wins among equal variances
        split_dim = dim - 1 - int(np.argmax(variances[::-1]))

        values = np.sort(training_data[:, split_dim])
        half = n // 2
        if n % 2 == 0:
            median = (values[half - 1] + values[half]) / np.float32(2.0)
        else:
            median = values[half]

        mask = training_data[:, split_dim] <= median
        left_data = training_data[mask]
        right_data = training_data[~mask]

        def build(subset: np.ndarray) -> Optional["TSVQNode"]:
            # A subset as large as its parent would recurse forever
            if 0 < subset.shape[0] < n:
                return cls.fit(subset, max_depth - 1)
            return None

        left, right = parallel_join(lambda: build(left_data), lambda: build(right_data), n)
        return cls(centroid, left, right)

    def descend(self, vector: np.ndarray, distance: Distance) -> "TSVQNode":
        """Follow the closer child (ties go left) down to a leaf."""
        node = self
        while not node.is_leaf:
            if node.left is not None and node.right is not None:
                dist_left = distance.compute(vector, node.left.centroid)
                dist_right = distance.compute(vector, node.right.centroid)
                node = node.left if dist_left <= dist_right else node.right
            else:
                node = node.left if node.left is not None else node.right
        return node

    def iter_nodes(self) -> Iterator["TSVQNode"]:
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            if node.right is not None:
                stack.append(node.right)
            if node.left is not None:
                stack.append(node.left)

    def depth(self) -> int:
        """Number of edges on the longest root-to-leaf path."""
        children = [c for c in (self.left, self.right) if c is not None]
        return 1 + max(c.depth() for c in children) if children else 0


class TSVQ(Quantizer):
    """
    Tree-structured vector quantization implementation.

    A binary tree is grown by recursively splitting the training data along
    its highest-variance dimension. Quantizing walks from the root towards
    the closer child at each level and returns the centroid of the leaf that
    is reached, in 16-bit floating point.
    """

    quantizer_type = "tree_structured"

    def __init__(self, root: TSVQNode, distance: Distance, config: Dict[str, Any]):
        super().__init__(config)
        self._root = root
        self._distance = distance

    @classmethod
    def fit(
        cls, training_data: Any, max_depth: int, distance: Optional[Distance] = None
    ) -> "TSVQ":
        """
        Build a TSVQ tree.

        Args:
            training_data: Training vectors, shape (n, dim)
            max_depth: Maximum depth of the tree (0 yields a single leaf)
            distance: Metric used to choose between children (Euclidean by default)

        Raises:
            EmptyInputError: If ``training_data`` is empty
            InvalidParameterError: If ``max_depth`` is negative
        """
        data = as_matrix(training_data)
        if max_depth < 0:
            raise InvalidParameterError("max_depth must be non-negative")
        distance = distance or Distance.euclidean()

        logger.info(
            "Fitting TSVQ: n=%d dim=%d max_depth=%d", data.shape[0], data.shape[1], max_depth
        )
        root = TSVQNode.fit(data, int(max_depth))

        quantizer = cls(root, distance, {"max_depth": max_depth, "distance": distance})
        logger.debug(
            "TSVQ built %d nodes (%d leaves), depth %d",
            quantizer.n_nodes, quantizer.n_leaves, quantizer.depth,
        )
        return quantizer

    @property
    def root(self) -> TSVQNode:
        return self._root

    @property
    def dim(self) -> int:
        return self._root.centroid.shape[0]

    @property
    def distance(self) -> Distance:
        return self._distance

    @property
    def depth(self) -> int:
        return self._root.depth()

    @property
    def n_nodes(self) -> int:
        return sum(1 for _ in self._root.iter_nodes())

    @property
    def n_leaves(self) -> int:
        return sum(1 for node in self._root.iter_nodes() if node.is_leaf)

    def quantize(self, vector: Any) -> Vector:
        """
        Return the centroid of the leaf reached by ``vector``.

        Raises:
            DimensionMismatchError: If the input length differs from the
                training dimension
        """
        data = as_array(vector, dim=self.dim)
        leaf = self._root.descend(data, self._distance)
        return Vector(leaf.centroid.astype(np.float16), dtype=np.float16)

    def get_stats(self) -> Dict[str, Any]:
        """Get TSVQ statistics."""
        n_leaves = self.n_leaves
        code_bits = float(np.log2(n_leaves)) if n_leaves > 1 else 1.0
        return {
            "quantizer_type": self.quantizer_type,
            "max_depth": self._config["max_depth"],
            "dimensions": self.dim,
            "depth": self.depth,
            "nodes": self.n_nodes,
            "leaves": n_leaves,
            "distance": repr(self._distance),
            "compression_ratio": 32.0 * self.dim / code_bits,
        }
