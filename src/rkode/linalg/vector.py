"""
Immutable Dense Vector

Fixed-dimension real vector backed by a read-only numpy array. Vectors
are value types: equality and hashing are structural, and every
arithmetic operation returns a new instance.

Norms:
    length  = sqrt(sum(v_i^2))     (Euclidean)
    l1      = max(|v_i|)           (maximum magnitude, i.e. L-infinity)
"""

from numbers import Real
from typing import Iterable, Iterator, Union

import numpy as np

from ..errors import DimensionMismatch


class Vector:
    """
    Dense real vector of fixed dimension.

    Attributes:
        dimension: Number of components

    Example:
        v = Vector.of(1.0, 2.0)
        w = 2.0 * v - Vector.ones(2)
        w.length, w.l1
    """

    __slots__ = ('_data',)

    # Keeps numpy scalars and arrays from coercing vectors in binary operators
    __array_ufunc__ = None

    def __init__(self, values: Union[Iterable[float], np.ndarray]):
        """
        Create a vector from any 1-D sequence of numbers.

        Args:
            values: Components; copied, so later changes to the source
                    do not affect the vector
        """
        if isinstance(values, Vector):
            self._data = values._data
            return
        data = np.array(values, dtype=np.float64)
        if data.ndim != 1:
            raise DimensionMismatch(f"Vector needs 1-D data, got shape {data.shape}")
        data.setflags(write=False)
        self._data = data

    @classmethod
    def of(cls, *values: float) -> 'Vector':
        return cls(values)

    @classmethod
    def constant(cls, dimension: int, value: float) -> 'Vector':
        return cls(np.full(dimension, value, dtype=np.float64))

    @classmethod
    def zeros(cls, dimension: int) -> 'Vector':
        return cls.constant(dimension, 0.0)

    @classmethod
    def ones(cls, dimension: int) -> 'Vector':
        return cls.constant(dimension, 1.0)

    @classmethod
    def _wrap(cls, data: np.ndarray) -> 'Vector':
        # Takes ownership of a freshly computed array without copying
        v = cls.__new__(cls)
        data.setflags(write=False)
        v._data = data
        return v

    @property
    def dimension(self) -> int:
        return self._data.size

    @property
    def length2(self) -> float:
        """Squared Euclidean norm."""
        return float(np.dot(self._data, self._data))

    @property
    def length(self) -> float:
        """Euclidean norm."""
        return float(np.sqrt(self.length2))

    @property
    def l1(self) -> float:
        """Largest component magnitude (0.0 for an empty vector)."""
        if self._data.size == 0:
            return 0.0
        return float(np.max(np.abs(self._data)))

    def to_array(self) -> np.ndarray:
        """Return a writable copy of the components."""
        return self._data.copy()

    def _check_dimension(self, other: 'Vector') -> None:
        if self.dimension != other.dimension:
            raise DimensionMismatch(
                f"Dimension mismatch: {self.dimension} and {other.dimension}"
            )

    def __add__(self, other: 'Vector') -> 'Vector':
        if not isinstance(other, Vector):
            return NotImplemented
        self._check_dimension(other)
        return Vector._wrap(self._data + other._data)

    def __sub__(self, other: 'Vector') -> 'Vector':
        if not isinstance(other, Vector):
            return NotImplemented
        self._check_dimension(other)
        return Vector._wrap(self._data - other._data)

    def __neg__(self) -> 'Vector':
        return Vector._wrap(-self._data)

    def __mul__(self, scalar: Real) -> 'Vector':
        if not isinstance(scalar, Real):
            return NotImplemented
        return Vector._wrap(self._data * float(scalar))

    __rmul__ = __mul__

    def __len__(self) -> int:
        return self._data.size

    def __getitem__(self, index: int) -> float:
        return float(self._data[index])

    def __iter__(self) -> Iterator[float]:
        return (float(x) for x in self._data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vector):
            return NotImplemented
        return self._data.shape == other._data.shape and bool(np.array_equal(self._data, other._data))

    def __hash__(self) -> int:
        return hash(tuple(self._data.tolist()))

    def __repr__(self) -> str:
        return "[" + ", ".join(repr(float(x)) for x in self._data) + "]"
