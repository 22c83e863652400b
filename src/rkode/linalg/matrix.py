"""
Immutable Dense Matrix

Rectangular real matrix backed by a read-only 2-D numpy array, with the
operations needed to express Butcher-tableau stage equations:

    K_next = (E + h * A @ K).apply_by_row(lambda j, v: f(x + c_j * h, v))
    y_next = y + h * (K.T @ b)

plus an LU solve with partial pivoting for linear systems A x = b.
"""

from numbers import Real
from typing import Callable, Iterable, Iterator, Sequence, Tuple, Union

import numpy as np

from ..errors import DimensionMismatch, SingularMatrix
from .vector import Vector

# Pivot magnitudes at or below this value are treated as singular
PIVOT_TOLERANCE = 1e-40


class Matrix:
    """
    Dense real matrix with fixed row and column counts.

    Attributes:
        n_rows: Number of rows
        n_cols: Number of columns
        shape: (n_rows, n_cols)

    Example:
        a = Matrix.square(2.0, 1.0,
                          1.0, 3.0)
        x = a.solve(Vector.of(3.0, 5.0))
    """

    __slots__ = ('_data',)

    # Keeps numpy scalars and arrays from coercing matrices in binary operators
    __array_ufunc__ = None

    def __init__(self, rows: Union[Sequence[Sequence[float]], np.ndarray]):
        """
        Create a matrix from nested rows or a 2-D array (copied).

        Args:
            rows: Row-major data, every row of the same length
        """
        if isinstance(rows, Matrix):
            self._data = rows._data
            return
        try:
            data = np.array(rows, dtype=np.float64)
        except ValueError as exc:
            raise DimensionMismatch(f"Ragged matrix rows: {exc}") from exc
        if data.ndim != 2:
            raise DimensionMismatch(f"Matrix needs 2-D data, got shape {data.shape}")
        data.setflags(write=False)
        self._data = data

    @classmethod
    def _wrap(cls, data: np.ndarray) -> 'Matrix':
        m = cls.__new__(cls)
        data.setflags(write=False)
        m._data = data
        return m

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    @classmethod
    def of(cls, n_rows: int, n_cols: int, *elements: float, by_row: bool = True) -> 'Matrix':
        """Build an n_rows x n_cols matrix from a flat element list."""
        if len(elements) != n_rows * n_cols:
            raise DimensionMismatch(
                f"Expected {n_rows * n_cols} elements for ({n_rows} x {n_cols}), got {len(elements)}"
            )
        flat = np.array(elements, dtype=np.float64)
        if by_row:
            return cls._wrap(flat.reshape(n_rows, n_cols))
        return cls._wrap(flat.reshape(n_cols, n_rows).T.copy())

    @classmethod
    def square(cls, *elements: float) -> 'Matrix':
        """Build a square matrix from row-major elements."""
        n = int(round(np.sqrt(len(elements))))
        if n * n != len(elements):
            raise DimensionMismatch(f"{len(elements)} elements do not form a square matrix")
        return cls.of(n, n, *elements)

    @classmethod
    def from_rows(cls, rows: Iterable[Vector]) -> 'Matrix':
        """Stack vectors as rows; all must share one dimension."""
        rows = list(rows)
        if not rows:
            return cls._wrap(np.zeros((0, 0)))
        n_cols = len(rows[0])
        for row in rows:
            if len(row) != n_cols:
                raise DimensionMismatch(f"Row dimension mismatch: {n_cols} and {len(row)}")
        return cls._wrap(np.array([Vector(row).to_array() for row in rows], dtype=np.float64))

    @classmethod
    def from_columns(cls, columns: Iterable[Vector]) -> 'Matrix':
        """Stack vectors as columns; all must share one dimension."""
        return cls.from_rows(columns).transpose()

    @classmethod
    def constant(cls, n_rows: int, n_cols: int, value: float) -> 'Matrix':
        return cls._wrap(np.full((n_rows, n_cols), value, dtype=np.float64))

    @classmethod
    def zeros(cls, n_rows: int, n_cols: int) -> 'Matrix':
        return cls.constant(n_rows, n_cols, 0.0)

    @classmethod
    def ones(cls, n_rows: int, n_cols: int) -> 'Matrix':
        return cls.constant(n_rows, n_cols, 1.0)

    @classmethod
    def eye(cls, dimension: int) -> 'Matrix':
        return cls._wrap(np.eye(dimension, dtype=np.float64))

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def n_rows(self) -> int:
        return self._data.shape[0]

    @property
    def n_cols(self) -> int:
        return self._data.shape[1]

    @property
    def shape(self) -> Tuple[int, int]:
        return self._data.shape

    def __getitem__(self, index: Tuple[int, int]) -> float:
        i, j = index
        return float(self._data[i, j])

    def row(self, i: int) -> Vector:
        return Vector(self._data[i])

    def column(self, j: int) -> Vector:
        return Vector(self._data[:, j])

    def rows(self) -> Iterator[Vector]:
        return (self.row(i) for i in range(self.n_rows))

    def to_array(self) -> np.ndarray:
        """Return a writable copy of the elements."""
        return self._data.copy()

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def _check_same_shape(self, other: 'Matrix') -> None:
        if self.shape != other.shape:
            raise DimensionMismatch(
                f"Dimension mismatch: {self._shape_str()} and {other._shape_str()}"
            )

    def _shape_str(self) -> str:
        return f"({self.n_rows} x {self.n_cols})"

    def __add__(self, other: 'Matrix') -> 'Matrix':
        if not isinstance(other, Matrix):
            return NotImplemented
        self._check_same_shape(other)
        return Matrix._wrap(self._data + other._data)

    def __sub__(self, other: 'Matrix') -> 'Matrix':
        if not isinstance(other, Matrix):
            return NotImplemented
        self._check_same_shape(other)
        return Matrix._wrap(self._data - other._data)

    def __neg__(self) -> 'Matrix':
        return Matrix._wrap(-self._data)

    def __mul__(self, scalar: Real) -> 'Matrix':
        if not isinstance(scalar, Real):
            return NotImplemented
        return Matrix._wrap(self._data * float(scalar))

    __rmul__ = __mul__

    def __matmul__(self, other: Union['Matrix', Vector]) -> Union['Matrix', Vector]:
        if isinstance(other, Vector):
            if self.n_cols != other.dimension:
                raise DimensionMismatch(
                    f"Multiplication dimension mismatch: {self._shape_str()} and ({other.dimension})"
                )
            return Vector._wrap(self._data @ other.to_array())
        if isinstance(other, Matrix):
            if self.n_cols != other.n_rows:
                raise DimensionMismatch(
                    f"Multiplication dimension mismatch: {self._shape_str()} and {other._shape_str()}"
                )
            return Matrix._wrap(self._data @ other._data)
        return NotImplemented

    def transpose(self) -> 'Matrix':
        return Matrix._wrap(self._data.T.copy())

    @property
    def T(self) -> 'Matrix':
        return self.transpose()

    def apply_by_row(self, func: Callable[[int, Vector], Vector]) -> 'Matrix':
        """
        Map every row through func and reassemble a matrix of the same shape.

        Args:
            func: Called as func(i, row_i); must return a vector (or any
                  1-D sequence) of length n_cols

        Returns:
            Matrix whose row i is func(i, row_i)

        Raises:
            DimensionMismatch: If func returns a row of the wrong length
        """
        out = np.empty_like(self._data)
        for i in range(self.n_rows):
            mapped = func(i, self.row(i))
            if not isinstance(mapped, Vector):
                mapped = Vector(mapped)
            if mapped.dimension != self.n_cols:
                raise DimensionMismatch(
                    f"Row function returned dimension {mapped.dimension}, expected {self.n_cols}"
                )
            out[i] = mapped.to_array()
        return Matrix._wrap(out)

    # ------------------------------------------------------------------
    # Linear solve
    # ------------------------------------------------------------------

    def lu_decompose(self, tol: float = PIVOT_TOLERANCE) -> Tuple['Matrix', Tuple[int, ...]]:
        """
        LU decomposition with partial pivoting.

        The returned matrix packs L (unit diagonal, below the diagonal)
        and U (on and above the diagonal). perm[i] is the original row
        that ended up in row i.

        Raises:
            DimensionMismatch: If the matrix is not square
            SingularMatrix: If no pivot magnitude exceeds tol
        """
        if self.n_rows != self.n_cols:
            raise DimensionMismatch(
                f"Matrix needs to be square for LU decomposition, got {self._shape_str()}"
            )
        n = self.n_rows
        lu = self._data.copy()
        perm = list(range(n))

        for i in range(n):
            imax = i + int(np.argmax(np.abs(lu[i:, i])))
            max_a = abs(lu[imax, i])
            if max_a <= tol:
                raise SingularMatrix(f"Matrix is degenerate: max pivot = {max_a}", pivot=max_a)
            if imax != i:
                perm[i], perm[imax] = perm[imax], perm[i]
                lu[[i, imax]] = lu[[imax, i]]
            for j in range(i + 1, n):
                lu[j, i] /= lu[i, i]
                lu[j, i + 1:] -= lu[j, i] * lu[i, i + 1:]

        return Matrix._wrap(lu), tuple(perm)

    def solve(self, b: Vector) -> Vector:
        """
        Solve self @ x = b by LU decomposition with partial pivoting.

        Args:
            b: Right-hand side, length n_rows

        Returns:
            Solution vector x

        Raises:
            DimensionMismatch: If the matrix is not square or b has the wrong length
            SingularMatrix: If the matrix is (numerically) singular
        """
        if not isinstance(b, Vector):
            b = Vector(b)
        if b.dimension != self.n_rows:
            raise DimensionMismatch(
                f"Right-hand side dimension {b.dimension} does not match {self._shape_str()}"
            )
        lu_matrix, perm = self.lu_decompose()
        lu = lu_matrix._data
        rhs = b.to_array()
        n = self.n_rows

        x = np.empty(n, dtype=np.float64)
        for i in range(n):
            x[i] = rhs[perm[i]] - np.dot(lu[i, :i], x[:i])
        for i in range(n - 1, -1, -1):
            x[i] = (x[i] - np.dot(lu[i, i + 1:], x[i + 1:])) / lu[i, i]

        return Vector._wrap(x)

    # ------------------------------------------------------------------
    # Value semantics
    # ------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.shape == other.shape and bool(np.array_equal(self._data, other._data))

    def __hash__(self) -> int:
        return hash((self.shape, tuple(self._data.ravel().tolist())))

    def __repr__(self) -> str:
        rows = ("[" + ", ".join(f"{x:e}" for x in row) + "]" for row in self._data)
        return "[" + " \n ".join(rows) + "]"
