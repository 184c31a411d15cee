"""
Dense matrix of double-precision values.

Matrix wraps a rectangular list of rows of floats. Every public way of
building a Matrix validates that the source is rectangular and takes a deep
copy of it, so later changes to the source never reach the matrix.

Operations come in two flavours:

- allocating (plus, minus, times, product, transpose) return a new Matrix
  that shares no storage with its operands
- in place (add, subtract, multiply, set, swap_rows, swap_columns) mutate the
  receiver and return it for chaining

The shape of a Matrix never changes after construction.
"""

from __future__ import annotations

import math
import numbers
import os
from functools import cached_property
from typing import Any, Iterable, Iterator, Sequence

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from . import codec
from .core.errors import (
    ArithmeticShapeError,
    InvalidOperandError,
    MatrixError,
    MatrixIndexError,
    ShapeError,
)
from .core.logging import get_logger

logger = get_logger(__name__)


class Matrix(BaseModel):
    """
    Rectangular matrix of floats with zero-based (row, column) indexing.

    Examples:
        >>> a = Matrix([[0, 1, 2], [3, 4, 5], [6, 7, 8]])
        >>> a.get(1, 1)
        4.0
        >>> a.product(Matrix.diagonal(2, 3, 4)).to_list()
        [[0.0, 3.0, 8.0], [6.0, 12.0, 20.0], [12.0, 21.0, 32.0]]
    """

    model_config = ConfigDict(validate_assignment=True)

    entries: list[list[float]] = Field(frozen=True)

    def __init__(self, entries: Matrix | np.ndarray | Iterable[Iterable[Any]], **kwargs: Any) -> None:
        """Build a matrix from a rectangular source, copying it."""
        super().__init__(entries=self._coerce_entries(entries), **kwargs)

    @staticmethod
    def _coerce_entries(raw: Any) -> list[list[float]]:
        """Deep-copy a source into rows of floats, checking rectangularity."""
        if isinstance(raw, Matrix):
            return [row[:] for row in raw.entries]

        if isinstance(raw, np.ndarray):
            if raw.ndim != 2:
                raise ShapeError(
                    f"Matrix source array must be 2-dimensional, got {raw.ndim} dimension(s)",
                    details={"ndim": raw.ndim},
                )
            raw = raw.tolist()

        if raw is None or isinstance(raw, (str, bytes)) or not isinstance(raw, Iterable):
            raise InvalidOperandError("Matrix", raw)

        rows: list[list[float]] = []
        for row in raw:
            if isinstance(row, (str, bytes)) or not isinstance(row, Iterable):
                raise ShapeError(
                    f"Matrix rows must be sequences of numbers, got {type(row).__name__}",
                    details={"row": len(rows)},
                )
            rows.append([_to_float(value, len(rows)) for value in row])

        if not rows or not rows[0]:
            raise ShapeError("Matrix must have at least one row and one column")

        columns = len(rows[0])
        for index, row in enumerate(rows):
            if len(row) != columns:
                logger.debug("Rejected jagged matrix source", extra={"extra_data": {"row": index}})
                raise ShapeError(_jagged_message(rows, index), details={"row": index, "expected": columns})
        return rows

    @field_validator("entries", mode="before")
    @classmethod
    def _validate_entries(cls, value: Any) -> list[list[float]]:
        return cls._coerce_entries(value)

    @classmethod
    def model_validate(cls, obj: Any, **kwargs: Any) -> Matrix:
        """Validate a mapping into a Matrix, raising ShapeError for bad entries."""
        try:
            return super().model_validate(obj, **kwargs)
        except ValidationError as exc:
            cause = _matrix_error_cause(exc)
            if cause is None:
                raise
            raise cause from exc

    @classmethod
    def model_validate_json(cls, json_data: str | bytes, **kwargs: Any) -> Matrix:
        """Validate JSON into a Matrix, raising ShapeError for bad entries."""
        try:
            return super().model_validate_json(json_data, **kwargs)
        except ValidationError as exc:
            cause = _matrix_error_cause(exc)
            if cause is None:
                raise
            raise cause from exc

    def model_copy(self, *, update: dict[str, Any] | None = None, deep: bool = True) -> Matrix:
        """
        Copy the matrix; the copy never shares rows with the original.

        The copy is always deep. Updated entries are validated like any other
        construction.
        """
        if update:
            return Matrix(update.get("entries", self.entries))
        return self.copy()

    @classmethod
    def _wrap(cls, store: list[list[float]]) -> Matrix:
        """Adopt a store built inside this module without copying or validating it."""
        return cls.model_construct(entries=store)

    # Construction recipes

    @classmethod
    def from_rows(cls, rows: Iterable[Iterable[Any]]) -> Matrix:
        """Build a matrix from a rectangular array of rows (deep copy)."""
        return cls(rows)

    @classmethod
    def zeros(cls, rows: int, columns: int) -> Matrix:
        """Build a rows x columns matrix filled with 0.0."""
        _check_dimensions(rows, columns)
        return cls._wrap([[0.0] * columns for _ in range(rows)])

    @classmethod
    def of(cls, rows: int, columns: int, *values: float) -> Matrix:
        """
        Build a rows x columns matrix from values listed in row-major order.

        Raises:
            ShapeError: If the number of values is not rows * columns
        """
        _check_dimensions(rows, columns)
        expected = rows * columns
        if len(values) != expected:
            problem = "Too many" if len(values) > expected else "Too few"
            raise ShapeError(
                f"{problem} values for a {rows}x{columns} matrix: expected {expected}, got {len(values)}",
                details={"expected": expected, "actual": len(values)},
            )
        flat = [_to_float(value) for value in values]
        return cls._wrap([flat[i * columns:(i + 1) * columns] for i in range(rows)])

    @classmethod
    def diagonal(cls, *entries: float) -> Matrix:
        """Build a square matrix with the given entries on its main diagonal."""
        n = len(entries)
        _check_dimensions(n, n)
        store = [[0.0] * n for _ in range(n)]
        for i, value in enumerate(entries):
            store[i][i] = _to_float(value)
        return cls._wrap(store)

    @classmethod
    def identity(cls, n: int) -> Matrix:
        """Build the n x n identity matrix."""
        return cls.diagonal(*([1.0] * n))

    @classmethod
    def row_vector(cls, *entries: float) -> Matrix:
        """Build a 1 x k matrix."""
        return cls.of(1, len(entries), *entries)

    @classmethod
    def column_vector(cls, *entries: float) -> Matrix:
        """Build a k x 1 matrix."""
        return cls.of(len(entries), 1, *entries)

    @classmethod
    def combine_horizontally(cls, *matrices: Matrix) -> Matrix:
        """
        Place matrices side by side, in argument order.

        Raises:
            ShapeError: If the matrices do not all have the same row count
        """
        _check_operands("combine_horizontally", matrices)
        rows = matrices[0].rows
        for index, matrix in enumerate(matrices):
            if matrix.rows != rows:
                raise ShapeError(
                    _combine_message("row counts differ, cannot combine horizontally", matrices, index),
                    details={"operand": index, "expected": rows, "actual": matrix.rows},
                )

        store = [[] for _ in range(rows)]
        for matrix in matrices:
            for target, source in zip(store, matrix.entries):
                target.extend(source)
        return cls._wrap(store)

    @classmethod
    def combine_vertically(cls, *matrices: Matrix) -> Matrix:
        """
        Stack matrices on top of each other, in argument order.

        Raises:
            ShapeError: If the matrices do not all have the same column count
        """
        _check_operands("combine_vertically", matrices)
        columns = matrices[0].columns
        for index, matrix in enumerate(matrices):
            if matrix.columns != columns:
                raise ShapeError(
                    _combine_message("column counts differ, cannot combine vertically", matrices, index),
                    details={"operand": index, "expected": columns, "actual": matrix.columns},
                )

        return cls._wrap([row[:] for matrix in matrices for row in matrix.entries])

    def copy(self) -> Matrix:
        """Return an independent matrix with the same contents."""
        return Matrix._wrap([row[:] for row in self.entries])

    # Dimensions

    @property
    def rows(self) -> int:
        return len(self.entries)

    @property
    def columns(self) -> int:
        return len(self.entries[0])

    @cached_property
    def size(self) -> int:
        """Number of elements (rows * columns)."""
        return self.rows * self.columns

    @property
    def shape(self) -> tuple[int, int]:
        return (self.rows, self.columns)

    # Element access

    def get(self, i: int, j: int) -> float:
        """Return the (i, j) element."""
        self._check_row(i)
        self._check_column(j)
        return self.entries[i][j]

    def set(self, i: int, j: int, value: float) -> Matrix:
        """Overwrite the (i, j) element and return self."""
        self._check_row(i)
        self._check_column(j)
        self.entries[i][j] = _to_float(value, i)
        return self

    def __getitem__(self, index: tuple[int, int]) -> float:
        i, j = index
        return self.get(i, j)

    def __setitem__(self, index: tuple[int, int], value: float) -> None:
        i, j = index
        self.set(i, j, value)

    def __iter__(self) -> Iterator[tuple[float, ...]]:
        """Iterate over rows as tuples."""
        return (tuple(row) for row in self.entries)

    def _check_row(self, i: Any) -> None:
        if not _is_index(i) or not 0 <= i < self.rows:
            raise MatrixIndexError("row", i, self.rows)

    def _check_column(self, j: Any) -> None:
        if not _is_index(j) or not 0 <= j < self.columns:
            raise MatrixIndexError("column", j, self.columns)

    # Structural operations

    def swap_rows(self, i1: int, i2: int) -> Matrix:
        """
        Exchange two rows in place and return self.

        Equal indices are a no-op, but are still bounds-checked.
        """
        self._check_row(i1)
        self._check_row(i2)
        if i1 == i2:
            return self
        self.entries[i1], self.entries[i2] = self.entries[i2], self.entries[i1]
        return self

    def swap_columns(self, j1: int, j2: int) -> Matrix:
        """
        Exchange two columns in place and return self.

        Equal indices are a no-op, but are still bounds-checked.
        """
        self._check_column(j1)
        self._check_column(j2)
        if j1 == j2:
            return self
        for row in self.entries:
            row[j1], row[j2] = row[j2], row[j1]
        return self

    def transpose(self) -> Matrix:
        """Return the columns x rows transpose."""
        return Matrix._wrap([list(column) for column in zip(*self.entries)])

    # Predicates

    def is_type_equal(self, other: Matrix) -> bool:
        """True if other has the same shape."""
        _check_operand("is_type_equal", other)
        return self.rows == other.rows and self.columns == other.columns

    def is_equal(self, other: Matrix) -> bool:
        """True if other has the same shape and exactly equal elements."""
        _check_operand("is_equal", other)
        if self is other:
            return True
        if not self.is_type_equal(other):
            return False
        return all(
            a == b
            for left, right in zip(self.entries, other.entries)
            for a, b in zip(left, right)
        )

    def is_close(self, other: Matrix, rel_tol: float = 1e-9, abs_tol: float = 0.0) -> bool:
        """True if other has the same shape and every element is within tolerance."""
        _check_operand("is_close", other)
        if not self.is_type_equal(other):
            return False
        return all(
            math.isclose(a, b, rel_tol=rel_tol, abs_tol=abs_tol)
            for left, right in zip(self.entries, other.entries)
            for a, b in zip(left, right)
        )

    def is_symmetric(self) -> bool:
        """True if the matrix is square and equal to its transpose."""
        if self.rows != self.columns:
            return False
        return all(
            self.entries[i][j] == self.entries[j][i]
            for i in range(self.rows)
            for j in range(i + 1, self.columns)
        )

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.is_equal(other)

    # Arithmetic

    def plus(self, other: Matrix) -> Matrix:
        """Return self + other."""
        self._check_same_shape("add", other)
        return Matrix._wrap([
            [a + b for a, b in zip(left, right)]
            for left, right in zip(self.entries, other.entries)
        ])

    def add(self, other: Matrix) -> Matrix:
        """Compute self += other in place and return self."""
        self._check_same_shape("add", other)
        for left, right in zip(self.entries, other.entries):
            for j, value in enumerate(right):
                left[j] += value
        return self

    def minus(self, other: Matrix) -> Matrix:
        """Return self - other."""
        self._check_same_shape("subtract", other)
        return Matrix._wrap([
            [a - b for a, b in zip(left, right)]
            for left, right in zip(self.entries, other.entries)
        ])

    def subtract(self, other: Matrix) -> Matrix:
        """Compute self -= other in place and return self."""
        self._check_same_shape("subtract", other)
        for left, right in zip(self.entries, other.entries):
            for j, value in enumerate(right):
                left[j] -= value
        return self

    def times(self, k: float) -> Matrix:
        """Return the matrix scaled by k."""
        k = float(k)
        return Matrix._wrap([[k * value for value in row] for row in self.entries])

    def multiply(self, k: float) -> Matrix:
        """Scale the matrix by k in place and return self."""
        k = float(k)
        for row in self.entries:
            for j, value in enumerate(row):
                row[j] = k * value
        return self

    def product(self, other: Matrix) -> Matrix:
        """
        Return the matrix product self * other.

        Raises:
            ArithmeticShapeError: If self.columns != other.rows
        """
        _check_operand("product", other)
        if self.columns != other.rows:
            logger.debug(
                "Rejected matrix product",
                extra={"extra_data": {"left": self.shape, "right": other.shape}},
            )
            raise ArithmeticShapeError(
                "multiply",
                self.shape,
                other.shape,
                message=(
                    f"Cannot multiply matrices of shape {self.shape} and {other.shape}: "
                    f"column count {self.columns} != row count {other.rows}"
                ),
            )

        right_columns = other.transpose().entries
        store = []
        for left in self.entries:
            out = []
            for column in right_columns:
                total = 0.0
                for a, b in zip(left, column):
                    total += a * b
                out.append(total)
            store.append(out)
        return Matrix._wrap(store)

    def _check_same_shape(self, operation: str, other: Any) -> None:
        _check_operand(operation, other)
        if not self.is_type_equal(other):
            logger.debug(
                "Rejected elementwise operation",
                extra={"extra_data": {"operation": operation, "left": self.shape, "right": other.shape}},
            )
            raise ArithmeticShapeError(operation, self.shape, other.shape)

    def __add__(self, other: Any) -> Matrix:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.plus(other)

    def __iadd__(self, other: Any) -> Matrix:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: Any) -> Matrix:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.minus(other)

    def __isub__(self, other: Any) -> Matrix:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.subtract(other)

    def __mul__(self, other: Any) -> Matrix:
        if isinstance(other, numbers.Real):
            return self.times(other)
        return NotImplemented

    def __rmul__(self, other: Any) -> Matrix:
        return self.__mul__(other)

    def __imul__(self, other: Any) -> Matrix:
        if isinstance(other, numbers.Real):
            return self.multiply(other)
        return NotImplemented

    def __matmul__(self, other: Any) -> Matrix:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.product(other)

    def __neg__(self) -> Matrix:
        return self.times(-1.0)

    # Conversions

    def to_list(self) -> list[list[float]]:
        """Return the elements as a new nested list."""
        return [row[:] for row in self.entries]

    def to_numpy(self) -> np.ndarray:
        """Convert to a NumPy array (copy)."""
        return np.array(self.entries, dtype=float)

    def to_string(self, delimiter: str | None = None) -> str:
        """
        Render one line per row with values joined by delimiter.

        Raises:
            FormatError: If the delimiter is empty or contains a digit or '.'
        """
        return codec.format_matrix(self, delimiter)

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"Matrix({self.entries!r})"

    def write_to_file(self, path: str | os.PathLike, delimiter: str | None = None) -> None:
        """Write the text form of this matrix to path."""
        codec.write_to_file(self, path, delimiter)

    @classmethod
    def read_from_file(cls, path: str | os.PathLike, delimiter: str | None = None) -> Matrix:
        """Read a matrix from a text file."""
        return codec.read_from_file(path, delimiter)


def _to_float(value: Any, row: int | None = None) -> float:
    if isinstance(value, (str, bytes)):
        raise ShapeError(
            f"Matrix elements must be numbers, got {type(value).__name__} {value!r}",
            details={"row": row, "value": value},
        )
    return float(value)


def _matrix_error_cause(exc: ValidationError) -> MatrixError | None:
    for error in exc.errors():
        cause = error.get("ctx", {}).get("error")
        if isinstance(cause, MatrixError):
            return cause
    return None


def _is_index(value: Any) -> bool:
    return isinstance(value, (int, np.integer)) and not isinstance(value, bool)


def _check_dimensions(rows: Any, columns: Any) -> None:
    if not _is_index(rows) or not _is_index(columns) or rows < 1 or columns < 1:
        raise ShapeError(
            f"Matrix dimensions must be positive integers, got {rows!r}x{columns!r}",
            details={"rows": rows, "columns": columns},
        )


def _check_operand(operation: str, operand: Any) -> None:
    if not isinstance(operand, Matrix):
        raise InvalidOperandError(operation, operand)


def _check_operands(operation: str, operands: Sequence[Any]) -> None:
    if not operands:
        raise InvalidOperandError(operation, None)
    for operand in operands:
        _check_operand(operation, operand)


def _jagged_message(rows: list[list[float]], bad_row: int) -> str:
    lines = [f"Cannot interpret rows as a matrix: row {bad_row} has {len(rows[bad_row])} "
             f"column(s), expected {len(rows[0])}"]
    for index, row in enumerate(rows):
        lines.append(f"{row}{' <--' if index == bad_row else ''}")
    return "\n".join(lines)


def _combine_message(reason: str, matrices: Sequence[Matrix], bad_operand: int) -> str:
    lines = [f"Operand {bad_operand}: {reason}"]
    for index, matrix in enumerate(matrices):
        marker = " <--" if index == bad_operand else ""
        lines.append(f"matrices[{index}] {matrix.rows}x{matrix.columns}{marker}")
    return "\n".join(lines)
