"""Gauss-Jordan elimination for 4x4 matrices

This module reduces a matrix A to the identity matrix using row operations and applies every operation to a
second matrix B in lockstep. Once A is the identity, B holds A^-1 * B (which is A^-1 if B started out as the
identity matrix).

The elimination runs in passes over the diagonal. Each pass does, for every diagonal position:

1. Pivot search and row swap
2. Normalization of the pivot row
3. Column correction (zeroing the column below the pivot)
4. Row correction (zeroing the row right of the pivot, using the diagonal cells of the rows below)

Passes are repeated until A is exactly the identity matrix or the retry bound is exhausted, in which case a
`ConvergenceError` is raised. A pivot of (practically) zero during normalization raises a `SingularMatrixError`.
"Practically zero" is relative to the largest cell of the matrix, so scaling a matrix does not change whether it
counts as singular.
Corrections that had to be skipped because their pivot was zero are reported in the `EliminationResult`.

Two pivot strategies are supported:

- 'partial': the row with the largest absolute value among the rows that are not yet processed
- 'signed': the row with the largest signed value among all rows. This is how the renderer used to search for
  pivots. It can swap an already processed row back down and fails on simple matrices like a translation by
  (2, 3, 4), so it is only kept for reproducing old results.
"""

from __future__ import annotations

import logging
from typing import NamedTuple, Optional

import settings
from matrix import Matrix4x4, SIZE, check_index

logger = logging.getLogger(__name__)

# Pivot strategies
PARTIAL = 'partial'
SIGNED = 'signed'
PIVOT_STRATEGIES = [PARTIAL, SIGNED]

# Operations that can skip a correction
COLUMN_OPERATION = 'column'
ROW_OPERATION = 'row'


# Exceptions
class EliminationError(ValueError):
    pass


class SingularMatrixError(EliminationError):
    pass


class ConvergenceError(EliminationError):
    def __init__(self, message: str, result: EliminationResult):
        super().__init__(message)
        self.result = result


class SkippedPivot(NamedTuple):
    pass_index: int
    operation: str
    row: int
    col: int


class EliminationSettings:
    def __init__(self, pivot_strategy: str = PARTIAL, max_retries: int = 10, pivot_tolerance: float = 1e-12):
        """Settings for the Gauss-Jordan elimination
        :param pivot_strategy: 'partial' or 'signed' (default: 'partial')
        :param max_retries: Number of passes allowed after the first one (default: 10)
        :param pivot_tolerance: Relative tolerance. Pivots with an absolute value at or below pivot_tolerance times
            the largest absolute cell of the matrix (at the start of the pass) are treated as zero (default: 1e-12)
        """
        if pivot_strategy not in PIVOT_STRATEGIES:
            raise ValueError(f"Unknown pivot strategy '{pivot_strategy}'. Use one of {PIVOT_STRATEGIES}.")
        if max_retries < 0:
            raise ValueError(f"max_retries must not be negative. Got {max_retries}")
        if pivot_tolerance < 0:
            raise ValueError(f"pivot_tolerance must not be negative. Got {pivot_tolerance}")
        self.pivot_strategy = pivot_strategy
        self.max_retries = max_retries
        self.pivot_tolerance = pivot_tolerance

    @classmethod
    def from_configuration(cls, config=settings) -> EliminationSettings:
        """Read the settings from a configuration module (default: the settings module)"""
        return cls(
            pivot_strategy=getattr(config, 'PIVOT_STRATEGY', PARTIAL),
            max_retries=getattr(config, 'MAX_RETRIES', 10),
            pivot_tolerance=getattr(config, 'PIVOT_TOLERANCE', 1e-12),
        )

    def __repr__(self):
        return f"EliminationSettings(pivot_strategy={self.pivot_strategy!r}, max_retries={self.max_retries}, pivot_tolerance={self.pivot_tolerance})"


class EliminationResult:
    """The outcome of a Gauss-Jordan elimination.
    `a` and `b` are the matrices that were passed in (and modified in place).
    """
    def __init__(self, a: Matrix4x4, b: Matrix4x4):
        self.a = a
        self.b = b
        self.passes = 0
        self.converged = False
        self.skipped_pivots: list[SkippedPivot] = []

    def __repr__(self):
        return f"EliminationResult(passes={self.passes}, converged={self.converged}, skipped_pivots={self.skipped_pivots})"


# Row operations
def swap_rows(m: Matrix4x4, row1: int, row2: int):
    """Swap two rows of the matrix in place"""
    check_index(row1)
    check_index(row2)
    scratch = m.copy()
    m[row1] = scratch[row2]
    m[row2] = scratch[row1]


def multiply_row(m: Matrix4x4, row: int, factor: float):
    """Multiply all cells of a row with a factor"""
    check_index(row)
    m[row] = [factor * cell for cell in m[row]]


def divide_row(m: Matrix4x4, row: int, divisor: float):
    """Divide all cells of a row by a divisor"""
    check_index(row)
    m[row] = [cell / divisor for cell in m[row]]


def add_row(m: Matrix4x4, src_row: int, dst_row: int):
    """Add the source row onto the destination row"""
    check_index(src_row)
    check_index(dst_row)
    m[dst_row] = [dst + src for dst, src in zip(m[dst_row], m[src_row])]


def multiply_row_add(m: Matrix4x4, src_row: int, dst_row: int, factor: float):
    """Add a multiple of the source row onto the destination row. The source row is not changed."""
    check_index(src_row)
    check_index(dst_row)
    m[dst_row] = [dst + src * factor for dst, src in zip(m[dst_row], m[src_row])]


def find_pivot_row(m: Matrix4x4, col: int, strategy: str = PARTIAL, start_row: Optional[int] = None) -> int:
    """Return the row to use as pivot for the given column.
    With the 'partial' strategy, the rows from `start_row` (default: `col`) downwards are searched for the largest
    absolute value. With the 'signed' strategy, all rows are searched for the largest signed value and `start_row`
    is ignored.
    The first row wins on ties.
    """
    check_index(col, "Column")
    if start_row is None:
        start_row = col
    check_index(start_row)
    if strategy == PARTIAL:
        rows = range(start_row, SIZE)
        key = abs
    elif strategy == SIGNED:
        rows = range(SIZE)
        key = float
    else:
        raise ValueError(f"Unknown pivot strategy '{strategy}'. Use one of {PIVOT_STRATEGIES}.")
    best_row = rows[0]
    best_value = key(m[best_row][col])
    for row in rows[1:]:
        value = key(m[row][col])
        if value > best_value:
            best_value = value
            best_row = row
    return best_row


def column_operation(a: Matrix4x4, b: Matrix4x4, c_row: int, c_col: int, tolerance: float = 0.0) -> list[tuple[int, int]]:
    """Zero the cells of column c_col below c_row in `a` by adding multiples of the pivot row.
    The same row operations (with the same factors) are applied to `b`.

    :return: The (row, col) cells that could not be corrected because the pivot was zero
    """
    check_index(c_row)
    check_index(c_col, "Column")
    skipped = []
    pivot_row = c_col
    for row in range(c_row + 1, SIZE):
        if a[row][c_col] == 0:
            continue
        pivot = a[pivot_row][c_col]
        if abs(pivot) <= tolerance:
            skipped.append((row, c_col))
            continue
        correction_factor = -(a[row][c_col] / pivot)
        multiply_row_add(a, pivot_row, row, correction_factor)
        multiply_row_add(b, pivot_row, row, correction_factor)
    return skipped


def row_operation(a: Matrix4x4, b: Matrix4x4, c_row: int, c_col: int, tolerance: float = 0.0) -> list[tuple[int, int]]:
    """Zero the cells of row c_row right of c_col in `a` by adding multiples of the rows below.
    Each cell [c_row][col] is corrected with row `col`, using its diagonal cell as pivot.
    The same row operations (with the same factors) are applied to `b`.

    :return: The (row, col) cells that could not be corrected because the pivot was zero
    """
    check_index(c_row)
    check_index(c_col, "Column")
    skipped = []
    for col in range(c_col + 1, SIZE):
        if a[c_row][col] == 0:
            continue
        pivot_row = col
        pivot = a[pivot_row][col]
        if abs(pivot) <= tolerance:
            skipped.append((c_row, col))
            continue
        correction_factor = -(a[c_row][col] / pivot)
        multiply_row_add(a, pivot_row, c_row, correction_factor)
        multiply_row_add(b, pivot_row, c_row, correction_factor)
    return skipped


def gauss_jordan_elimination(a: Matrix4x4, b: Matrix4x4, config: Optional[EliminationSettings] = None) -> EliminationResult:
    """Reduce `a` to the identity matrix, applying the same row operations to `b`. Both are modified in place.

    :param a: The coefficient matrix
    :param b: The matrix that is transformed alongside (e.g. the identity matrix to calculate the inverse)
    :param config: EliminationSettings to use (default: read from the settings module)
    :return: An EliminationResult with the number of passes and any skipped corrections
    :raises SingularMatrixError: If a pivot is zero (or within the pivot tolerance, relative to the largest cell)
    :raises ConvergenceError: If `a` is not the identity matrix after the maximum number of passes
    """
    config = config or EliminationSettings.from_configuration()
    identity = Matrix4x4.identity()
    result = EliminationResult(a, b)
    while a != identity:
        if result.passes > config.max_retries:
            logger.warning(f"Elimination did not converge after {result.passes} passes")
            raise ConvergenceError(f"Gauss-Jordan elimination did not converge after {result.passes} passes. "
                                   f"The matrix is probably singular or badly conditioned:\n{a}", result)
        result.passes += 1
        # The tolerance scales with the matrix, so that multiplying a matrix by a constant does not change the outcome
        tolerance = config.pivot_tolerance * max(abs(cell) for cell in a)
        for diag_index in range(SIZE):
            c_row = c_col = diag_index
            pivot_row = find_pivot_row(a, c_col, config.pivot_strategy)
            if pivot_row != c_row:
                logger.debug(f"Pass {result.passes}: swapping rows {c_row} and {pivot_row}")
                swap_rows(a, c_row, pivot_row)
                swap_rows(b, c_row, pivot_row)
            pivot = a[c_row][c_col]
            if abs(pivot) <= tolerance:
                if config.pivot_strategy == SIGNED:
                    raise SingularMatrixError(f"The '{SIGNED}' pivot search found no usable pivot for column {c_col} "
                                              f"(pivot {pivot}). The matrix may still be invertible with the "
                                              f"'{PARTIAL}' strategy:\n{a}")
                raise SingularMatrixError(f"Pivot for column {c_col} is {pivot}. The matrix is singular:\n{a}")
            if pivot != 1:
                divide_row(a, c_row, pivot)
                divide_row(b, c_row, pivot)
            for operation, skipped in (
                (COLUMN_OPERATION, column_operation(a, b, c_row, c_col, tolerance)),
                (ROW_OPERATION, row_operation(a, b, c_row, c_col, tolerance)),
            ):
                for row, col in skipped:
                    logger.debug(f"Pass {result.passes}: skipped {operation} correction of cell [{row}][{col}], zero pivot")
                    result.skipped_pivots.append(SkippedPivot(result.passes, operation, row, col))
    result.converged = True
    logger.debug(f"Elimination converged after {result.passes} passes")
    return result


def invert(m: Matrix4x4, config: Optional[EliminationSettings] = None):
    """Invert a matrix in place. If the inversion fails, the matrix is left unchanged.
    :raises SingularMatrixError: If the matrix has no inverse
    :raises ConvergenceError: If the elimination did not converge
    """
    scratch = m.copy()
    accumulator = Matrix4x4.identity()
    gauss_jordan_elimination(scratch, accumulator, config)
    for row in range(SIZE):
        m[row] = accumulator[row]


def inverse(m: Matrix4x4, config: Optional[EliminationSettings] = None) -> Matrix4x4:
    """Return the inverse of a matrix"""
    result = m.copy()
    invert(result, config)
    return result


def solve(a: Matrix4x4, b: Matrix4x4, config: Optional[EliminationSettings] = None) -> Matrix4x4:
    """Return A^-1 * B, leaving both matrices unchanged"""
    a = a.copy()
    b = b.copy()
    gauss_jordan_elimination(a, b, config)
    return b
