"""
Dense row-major matrix with shape-checked algebra.

Every producing operation returns a freshly allocated Matrix; operands
are never modified. Element writes go through ``m[r, c] = value``.
"""

import numpy as np
from typing import Callable, Optional, Sequence, Tuple


class ShapeMismatchError(ValueError):
    """Raised when operand shapes are incompatible for an operation."""


_default_rng: Optional[np.random.Generator] = None


def default_rng() -> np.random.Generator:
    """Return the module-wide generator, creating it on first use."""
    global _default_rng
    if _default_rng is None:
        _default_rng = np.random.default_rng()
    return _default_rng


def seed_random(seed: int) -> None:
    """Reseed the module-wide generator used by ``Matrix.random``."""
    global _default_rng
    _default_rng = np.random.default_rng(seed)


class Matrix:
    """
    Dense 2-D matrix stored as a flat row-major array.

    Parameters
    ----------
    rows : int
        Number of rows.
    cols : int
        Number of columns.

    The element at (r, c) lives at ``data[r * cols + c]``. Storage is
    zero-filled on construction; ``Matrix()`` is the empty 0x0 matrix.
    """

    def __init__(self, rows: int = 0, cols: int = 0):
        if rows < 0 or cols < 0:
            raise ValueError(f"Matrix dimensions must be non-negative, got ({rows}, {cols})")
        self.rows = int(rows)
        self.cols = int(cols)
        self.data = np.zeros(self.rows * self.cols, dtype=float)

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.rows, self.cols)

    @property
    def num_elements(self) -> int:
        return self.rows * self.cols

    # -- construction helpers -------------------------------------------

    @classmethod
    def from_rows(cls, values: Sequence[Sequence[float]]) -> "Matrix":
        """Build a matrix from a nested sequence of rows."""
        arr = np.asarray(values, dtype=float)
        if arr.ndim != 2:
            raise ValueError(f"Expected a nested sequence of rows, got ndim={arr.ndim}")
        return cls.from_numpy(arr)

    @classmethod
    def from_numpy(cls, arr: np.ndarray) -> "Matrix":
        """Copy a numpy array into a new matrix; 1-D input becomes a column."""
        arr = np.asarray(arr, dtype=float)
        if arr.ndim == 1:
            arr = arr.reshape(-1, 1)
        if arr.ndim != 2:
            raise ValueError(f"Expected a 1-D or 2-D array, got ndim={arr.ndim}")
        out = cls(arr.shape[0], arr.shape[1])
        out.data[:] = arr.ravel()
        return out

    @classmethod
    def random(cls, rows: int, cols: int,
               rng: Optional[np.random.Generator] = None) -> "Matrix":
        """
        Gaussian random matrix, N(0, std=1/sqrt(rows*cols)).

        Parameters
        ----------
        rows, cols : int
            Shape of the result.
        rng : np.random.Generator, optional
            Source of randomness. Defaults to the module-wide generator.
        """
        out = cls(rows, cols)
        if out.num_elements == 0:
            return out
        if rng is None:
            rng = default_rng()
        std = 1.0 / np.sqrt(out.num_elements)
        out.data[:] = rng.normal(0.0, std, size=out.num_elements)
        return out

    def to_numpy(self) -> np.ndarray:
        """Return a 2-D copy of the matrix."""
        return self.data.reshape(self.rows, self.cols).copy()

    def copy(self) -> "Matrix":
        out = Matrix(self.rows, self.cols)
        out.data[:] = self.data
        return out

    # -- element access -------------------------------------------------

    def _offset(self, key) -> int:
        r, c = key
        if not (0 <= r < self.rows and 0 <= c < self.cols):
            raise IndexError(f"Index ({r}, {c}) out of range for shape {self.shape}")
        return r * self.cols + c

    def __getitem__(self, key) -> float:
        return float(self.data[self._offset(key)])

    def __setitem__(self, key, value: float):
        self.data[self._offset(key)] = value

    # -- algebra --------------------------------------------------------

    def _require_same_shape(self, other: "Matrix", op: str):
        if self.shape != other.shape:
            raise ShapeMismatchError(
                f"{op}: shapes {self.shape} and {other.shape} differ"
            )

    def _with_data(self, rows: int, cols: int, data: np.ndarray) -> "Matrix":
        out = Matrix(rows, cols)
        out.data[:] = data
        return out

    def matmul(self, other: "Matrix") -> "Matrix":
        """
        Matrix product ``self @ other``.

        Requires ``self.cols == other.rows``; the result has shape
        ``(self.rows, other.cols)``.
        """
        if self.cols != other.rows:
            raise ShapeMismatchError(
                f"matmul: inner dimensions differ, {self.shape} @ {other.shape}"
            )
        a = self.data.reshape(self.rows, self.cols)
        b = other.data.reshape(other.rows, other.cols)
        return self._with_data(self.rows, other.cols, (a @ b).ravel())

    def matmul_elementwise(self, other: "Matrix") -> "Matrix":
        """Hadamard product; shapes must match."""
        self._require_same_shape(other, "matmul_elementwise")
        return self._with_data(self.rows, self.cols, self.data * other.data)

    def square(self) -> "Matrix":
        return self.matmul_elementwise(self)

    def matmul_scalar(self, scalar: float) -> "Matrix":
        return self._with_data(self.rows, self.cols, scalar * self.data)

    def add(self, other: "Matrix") -> "Matrix":
        self._require_same_shape(other, "add")
        return self._with_data(self.rows, self.cols, self.data + other.data)

    def negate(self) -> "Matrix":
        return self._with_data(self.rows, self.cols, -self.data)

    def subtract(self, other: "Matrix") -> "Matrix":
        self._require_same_shape(other, "subtract")
        return self.add(other.negate())

    def transpose(self) -> "Matrix":
        t = self.data.reshape(self.rows, self.cols).T
        return self._with_data(self.cols, self.rows, t.ravel())

    def apply_function(self, func: Callable[[float], float]) -> "Matrix":
        """Apply a scalar function to every element."""
        values = np.fromiter((func(float(x)) for x in self.data),
                             dtype=float, count=self.num_elements)
        return self._with_data(self.rows, self.cols, values)

    def __add__(self, other: "Matrix") -> "Matrix":
        return self.add(other)

    def __sub__(self, other: "Matrix") -> "Matrix":
        return self.subtract(other)

    def __neg__(self) -> "Matrix":
        return self.negate()

    def __matmul__(self, other: "Matrix") -> "Matrix":
        return self.matmul(other)

    # -- comparison and display -----------------------------------------

    def __eq__(self, other) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.shape == other.shape and bool(np.array_equal(self.data, other.data))

    __hash__ = None

    def allclose(self, other: "Matrix", atol: float = 1e-8) -> bool:
        """True when shapes match and all elements agree within ``atol``."""
        if self.shape != other.shape:
            return False
        return bool(np.allclose(self.data, other.data, rtol=0.0, atol=atol))

    def describe_shape(self) -> str:
        return f"Matrix size: ({self.rows},{self.cols})"

    def format(self) -> str:
        """Rows of space-separated values, one row per line."""
        lines = []
        for r in range(self.rows):
            row = self.data[r * self.cols:(r + 1) * self.cols]
            lines.append(" ".join(f"{x:g}" for x in row))
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"Matrix(shape={self.shape}, data={self.to_numpy().tolist()})"
