from __future__ import annotations

from copy import deepcopy
from math import isclose
from typing import Optional, Sequence, Union

import settings
from vector import Vector3

SIZE = 4


def check_index(index: int, name: str = "Row"):
    """Raise an IndexError if the row or column index is outside of the matrix"""
    if not isinstance(index, int) or not 0 <= index < SIZE:
        raise IndexError(f"{name} index {index} is out of range (0-{SIZE - 1})")


class Matrix4x4:
    """A 4x4 matrix of floats for homogeneous transforms, stored row-major and indexed [row][col].

    Points are row vectors (x, y, z, 1) that are multiplied from the left (p' = p * M), which is why
    translations live in the last row.
    """

    def __init__(self, matrix: Optional[Union[Matrix4x4, list[list[float]]]] = None, fill: Union[list[float], float] = 0):
        """Initialize the matrix.
        Initializing with another matrix will create a deep copy of the matrix.
        Initializing without a matrix will fill all 16 cells with the given value or with a flat list of 16 values.

        :param matrix: A 4x4 list of lists or another Matrix4x4 (optional)
        :param fill: A single value or a flat list of 16 values, used if no matrix is given (default: 0)
        """
        if matrix is not None:
            if isinstance(matrix, Matrix4x4):
                matrix = deepcopy(matrix._matrix)
            self._matrix = self._validated(matrix)
        else:
            if isinstance(fill, (int, float)):
                fill = [fill] * (SIZE * SIZE)
            if len(fill) != SIZE * SIZE:
                raise ValueError(f"Fill must be a single value or a list of {SIZE * SIZE} values. Got {len(fill)} values.")
            self._matrix = self._validated([list(fill[i*SIZE:(i+1)*SIZE]) for i in range(SIZE)])

    @staticmethod
    def _validated(matrix: Sequence[Sequence[float]]) -> list[list[float]]:
        if len(matrix) != SIZE or any(len(row) != SIZE for row in matrix):
            raise ValueError(f"Matrix must be a {SIZE}x{SIZE} list of lists. Got {matrix}")
        if any(isinstance(cell, bool) or not isinstance(cell, (int, float)) for row in matrix for cell in row):
            raise ValueError(f"Matrix must contain only numbers: {matrix}")
        return [[float(cell) for cell in row] for row in matrix]

    @classmethod
    def new(cls, *args, **kwargs):
        return cls(*args, **kwargs)

    @classmethod
    def identity(cls):
        """Return a new identity matrix"""
        return cls([[1 if i == j else 0 for j in range(SIZE)] for i in range(SIZE)])

    @classmethod
    def from_vector(cls, v: Sequence[float], w: float = 1.0):
        """Return a matrix whose first row is the row vector (x, y, z, w). All other cells are 0."""
        x, y, z = v
        return cls([[x, y, z, w], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]])

    def copy(self):
        return self.new(self)

    def flatten(self):
        """Flatten the matrix into a list of 16 cells, row by row"""
        return [cell for row in self._matrix for cell in row]

    def transpose(self):
        """Transpose the matrix in place"""
        # Writing into the matrix while reading from it would swap every off-diagonal pair twice
        scratch = deepcopy(self._matrix)
        for i in range(SIZE):
            for j in range(SIZE):
                self._matrix[j][i] = scratch[i][j]

    @property
    def T(self):
        """Return a transposed copy of the matrix"""
        result = self.copy()
        result.transpose()
        return result

    def row_vector(self, row: int) -> Vector3:
        """Return the first three cells of a row"""
        check_index(row, "Row")
        return Vector3(*self._matrix[row][:3])

    def col_vector(self, col: int) -> Vector3:
        """Return the first three cells of a column"""
        check_index(col, "Column")
        return Vector3(*(self._matrix[row][col] for row in range(3)))

    def transform_point(self, point: Sequence[float]) -> Vector3:
        """Multiply the row vector (x, y, z, 1) with the matrix and return the resulting x, y, z"""
        x, y, z = point
        homogeneous = [x, y, z, 1]
        return Vector3(*(sum(homogeneous[k] * self._matrix[k][j] for k in range(SIZE)) for j in range(3)))

    def equals(self, other: Matrix4x4) -> bool:
        """Exact, cell-by-cell comparison without any tolerance"""
        return self._matrix == other._matrix

    def is_close(self, other: Union[Matrix4x4, list[list[float]]], abs_tol: float = 1e-9) -> bool:
        """Compare two matrices cell by cell, allowing for an absolute tolerance"""
        other = other if isinstance(other, Matrix4x4) else self.new(other)
        return all(isclose(a, b, rel_tol=0, abs_tol=abs_tol) for a, b in zip(self, other))

    def rotate_about_point(self, pivot: Sequence[float], angle: float):
        """Rotate the matrix in place around the z axis through a pivot point, angle in radians"""
        from transforms import rotate_about_point
        rotate_about_point(self, pivot, angle)

    def invert(self, config=None):
        """Invert the matrix in place using Gauss-Jordan elimination.
        The matrix is left unchanged if the inversion fails.

        :param config: EliminationSettings to use (default: read from the settings module)
        """
        from elimination import invert
        invert(self, config)

    def inverse(self, config=None):
        """Return the inverse of the matrix"""
        from elimination import inverse
        return inverse(self, config)

    def __mul__(self, other: Union[Matrix4x4, float, int]):
        """Multiply two matrices or scale all cells by a number"""
        if isinstance(other, (int, float)):
            return self.new([[cell * other for cell in row] for row in self._matrix])
        if not isinstance(other, Matrix4x4):
            return NotImplemented
        result = [[0.0 for _ in range(SIZE)] for _ in range(SIZE)]
        for i in range(SIZE):
            for j in range(SIZE):
                for k in range(SIZE):
                    result[i][j] += self._matrix[i][k] * other._matrix[k][j]
        return self.new(result)

    def __rmul__(self, other: Union[float, int]):
        if isinstance(other, (int, float)):
            return self.__mul__(other)
        return NotImplemented

    def __add__(self, other: Matrix4x4):
        """Add two matrices cell by cell"""
        if not isinstance(other, Matrix4x4):
            return NotImplemented
        return self.new([[self._matrix[i][j] + other._matrix[i][j] for j in range(SIZE)] for i in range(SIZE)])

    def __sub__(self, other: Matrix4x4):
        """Subtract two matrices cell by cell"""
        if not isinstance(other, Matrix4x4):
            return NotImplemented
        return self.new([[self._matrix[i][j] - other._matrix[i][j] for j in range(SIZE)] for i in range(SIZE)])

    def __neg__(self):
        return self.__mul__(-1)

    def __getitem__(self, idx: int):
        return self._matrix[idx]

    def __setitem__(self, idx: int, value: Sequence[float]):
        check_index(idx, "Row")
        if len(value) != SIZE:
            raise ValueError(f"A row must have {SIZE} cells. Got {value}")
        self._matrix[idx] = [float(cell) for cell in value]

    def __iter__(self):
        return iter(self.flatten())

    def __len__(self):
        return SIZE * SIZE

    def __str__(self):
        return "\n".join("|" + "".join(f" {cell:{settings.PRINT_FORMAT}}" for cell in row) + " |" for row in self._matrix)

    def __repr__(self):
        return f"Matrix4x4({str(self._matrix)})"

    def __eq__(self, other: Union[Matrix4x4, list[list[float]]]):
        """Check if two matrices are exactly equal"""
        if isinstance(other, Matrix4x4):
            return self.equals(other)
        if isinstance(other, list):
            return self._matrix == other
        return NotImplemented


def identity() -> Matrix4x4:
    return Matrix4x4.identity()


def add(m1: Matrix4x4, m2: Matrix4x4) -> Matrix4x4:
    return _checked(m1) + _checked(m2)


def sub(m1: Matrix4x4, m2: Matrix4x4) -> Matrix4x4:
    return _checked(m1) - _checked(m2)


def multiply(m1: Matrix4x4, m2: Matrix4x4) -> Matrix4x4:
    return _checked(m1) * _checked(m2)


def transpose(m: Matrix4x4):
    """Transpose a matrix in place"""
    _checked(m).transpose()


def equals(m1: Matrix4x4, m2: Matrix4x4) -> bool:
    return _checked(m1).equals(_checked(m2))


def row_vector(m: Matrix4x4, row: int) -> Vector3:
    return m.row_vector(row)


def col_vector(m: Matrix4x4, col: int) -> Vector3:
    return m.col_vector(col)


def vector_as_matrix(v: Sequence[float], w: float = 1.0) -> Matrix4x4:
    return Matrix4x4.from_vector(v, w)


def transform_point(m: Matrix4x4, point: Sequence[float]) -> Vector3:
    return m.transform_point(point)


def format_matrix(m: Matrix4x4) -> str:
    """Render a matrix as rows of cells between '|' characters, followed by an empty line"""
    return f"{m}\n\n"


def print_matrix(m: Matrix4x4):
    print(format_matrix(m), end="")


def _checked(m) -> Matrix4x4:
    if not isinstance(m, Matrix4x4):
        raise TypeError(f"Expected a Matrix4x4, got {m!r} of type {type(m).__name__}")
    return m
