"""
Numeric vector abstraction for the vq library.

A ``Vector`` is a fixed-length, one-dimensional numpy buffer whose element
type is one of the registered ``RealType`` descriptors: 32-bit float for
inputs and training data, 16-bit float for reduced-precision codewords and
8-bit unsigned integers for binary/scalar codes. Reductions (dot product,
mean) switch to a chunked fan-out over the shared worker pool once the
operand length exceeds ``PARALLEL_THRESHOLD``.
"""

from typing import Any, Iterator, Optional, Sequence, Union

import numpy as np

from .exceptions import DimensionMismatchError, EmptyInputError, InvalidParameterError
from .utils.parallel import chunked_map


class RealType:
    """
    Arithmetic capability set of a numeric element type.

    Every operation returns values of the wrapped dtype; integer types
    saturate to their representable range instead of wrapping around.
    Reductions are carried out in ``accumulator`` precision.
    """

    def __init__(self, name: str, dtype: Any, accumulator: Any):
        self.name = name
        self.dtype = np.dtype(dtype)
        self.accumulator = np.dtype(accumulator)

    @property
    def is_integer(self) -> bool:
        return np.issubdtype(self.dtype, np.integer)

    def cast(self, values: Any) -> Any:
        """Convert values (scalar or array) to this element type."""
        values = np.asarray(values)
        if self.is_integer:
            info = np.iinfo(self.dtype)
            values = np.clip(np.trunc(values.astype(np.float64)), info.min, info.max)
        result = values.astype(self.dtype)
        return result[()] if result.ndim == 0 else result

    def zero(self) -> Any:
        return self.cast(0.0)

    def one(self) -> Any:
        return self.cast(1.0)

    def sqrt(self, x: Any) -> Any:
        return self.cast(np.sqrt(np.asarray(x, dtype=self.accumulator)))

    def abs(self, x: Any) -> Any:
        return self.cast(np.abs(np.asarray(x, dtype=self.accumulator)))

    def powf(self, x: Any, n: Any) -> Any:
        return self.cast(np.power(np.asarray(x, dtype=self.accumulator), n))

    def from_f64(self, x: float) -> Any:
        return self.cast(np.float64(x))

    def __repr__(self) -> str:
        return f"RealType({self.name})"


FLOAT32 = RealType("float32", np.float32, np.float32)
FLOAT64 = RealType("float64", np.float64, np.float64)
FLOAT16 = RealType("float16", np.float16, np.float32)
UINT8 = RealType("uint8", np.uint8, np.float32)

REAL_TYPES = {real.dtype: real for real in (FLOAT32, FLOAT64, FLOAT16, UINT8)}


def real_type(dtype: Any) -> RealType:
    """Look up the ``RealType`` registered for a numpy dtype."""
    try:
        return REAL_TYPES[np.dtype(dtype)]
    except (KeyError, TypeError):
        raise InvalidParameterError(f"Unsupported element type: {dtype}")


class Vector:
    """A fixed-length vector of real numbers."""

    __slots__ = ("_data", "_real")
    __hash__ = None  # type: ignore[assignment]

    def __init__(self, data: Any, dtype: Any = None):
        """
        Create a vector from a buffer.

        Args:
            data: One-dimensional array-like, or another Vector
            dtype: Element type; defaults to the buffer's own registered
                dtype, or float32 for plain sequences
        """
        if isinstance(data, Vector):
            data = data._data

        if dtype is None:
            if isinstance(data, np.ndarray) and data.dtype in REAL_TYPES:
                dtype = data.dtype
            else:
                dtype = np.float32

        real = real_type(dtype)
        array = np.asarray(data)
        if array.dtype != real.dtype:
            array = np.asarray(real.cast(array))

        if array.ndim != 1:
            raise InvalidParameterError("Vector data must be one-dimensional")

        self._data = array
        self._real = real

    @property
    def data(self) -> np.ndarray:
        """The underlying numpy buffer."""
        return self._data

    @property
    def dtype(self) -> np.dtype:
        return self._real.dtype

    @property
    def real(self) -> RealType:
        return self._real

    def len(self) -> int:
        return self._data.shape[0]

    def is_empty(self) -> bool:
        return self._data.shape[0] == 0

    def to_numpy(self) -> np.ndarray:
        """Return a copy of the data as a numpy array."""
        return self._data.copy()

    def astype(self, dtype: Any) -> "Vector":
        """Convert to another element type."""
        return Vector(real_type(dtype).cast(self._data), dtype=dtype)

    def __len__(self) -> int:
        return self._data.shape[0]

    def __getitem__(self, index: Any) -> Any:
        if isinstance(index, slice):
            return Vector(self._data[index])
        return self._data[index]

    def __iter__(self) -> Iterator[Any]:
        return iter(self._data)

    def __array__(self, dtype: Any = None, copy: Optional[bool] = None) -> np.ndarray:
        if dtype is not None and np.dtype(dtype) != self._data.dtype:
            return self._data.astype(dtype)
        return self._data.copy() if copy else self._data

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vector):
            return NotImplemented
        return len(self) == len(other) and bool(np.array_equal(self._data, other._data))

    def __repr__(self) -> str:
        return f"Vector({self._data.tolist()}, dtype={self._real.name})"

    def __str__(self) -> str:
        return "Vector [" + ", ".join(str(x) for x in self._data.tolist()) + "]"

    def _coerce(self, other: Any) -> "Vector":
        other = other if isinstance(other, Vector) else Vector(other, dtype=self.dtype)
        if len(other) != len(self):
            raise DimensionMismatchError(len(self), len(other))
        return other

    def _accumulate(self, values: np.ndarray) -> np.ndarray:
        return values.astype(self._real.accumulator, copy=False)

    def __add__(self, other: Any) -> "Vector":
        other = self._coerce(other)
        result = self._accumulate(self._data) + self._accumulate(other._data)
        return Vector(self._real.cast(result), dtype=self.dtype)

    def __sub__(self, other: Any) -> "Vector":
        other = self._coerce(other)
        result = self._accumulate(self._data) - self._accumulate(other._data)
        return Vector(self._real.cast(result), dtype=self.dtype)

    def __mul__(self, scalar: Any) -> "Vector":
        if isinstance(scalar, Vector):
            return NotImplemented
        result = self._accumulate(self._data) * scalar
        return Vector(self._real.cast(result), dtype=self.dtype)

    __rmul__ = __mul__

    def dot(self, other: Any) -> Any:
        """
        Compute the dot product with another vector.

        Raises:
            DimensionMismatchError: If the lengths differ
        """
        other = self._coerce(other)
        a = self._accumulate(self._data)
        b = self._accumulate(other._data)

        partials = chunked_map(lambda start, end: np.dot(a[start:end], b[start:end]), len(a))
        return self._real.cast(np.sum(partials, dtype=self._real.accumulator))

    def norm(self) -> Any:
        """Compute the Euclidean norm."""
        return self._real.sqrt(self.dot(self))

    def distance2(self, other: Any) -> Any:
        """Compute the squared distance to another vector."""
        diff = self - other
        return diff.dot(diff)


VectorLike = Union[Vector, np.ndarray, Sequence[float]]


def mean_vector(vectors: Union[Sequence[VectorLike], np.ndarray]) -> Vector:
    """
    Compute the coordinate-wise mean of a collection of vectors.

    All vectors must have the same dimension. For more than
    ``PARALLEL_THRESHOLD`` vectors the summation is split across the pool.

    Raises:
        EmptyInputError: If no vectors are given
        DimensionMismatchError: If the vectors differ in length
    """
    if len(vectors) == 0:
        raise EmptyInputError()

    first = vectors[0]
    dtype = first.dtype if isinstance(first, (Vector, np.ndarray)) else np.float32
    real = real_type(dtype) if np.dtype(dtype) in REAL_TYPES else FLOAT32

    if isinstance(vectors, np.ndarray) and vectors.ndim == 2:
        matrix = vectors
    else:
        dim = len(first)
        for v in vectors:
            if len(v) != dim:
                raise DimensionMismatchError(dim, len(v))
        matrix = np.stack([np.asarray(v) for v in vectors])

    matrix = matrix.astype(real.accumulator, copy=False)
    partials = chunked_map(
        lambda start, end: matrix[start:end].sum(axis=0), matrix.shape[0]
    )
    total = np.sum(partials, axis=0, dtype=real.accumulator)
    return Vector(real.cast(total / matrix.shape[0]), dtype=real.dtype)
