"""
Symbolic reference calculations for the transform builders and the inverse.

The closed forms are derived with sympy and serve as an independent check of the floating point code.

Rotation about a point p by theta (row vectors, so the chain reads left to right):

    T(-p) * R(theta) * T(p) =
    | cos(theta)                          -sin(theta)                         0  0 |
    | sin(theta)                           cos(theta)                         0  0 |
    | 0                                    0                                  1  0 |
    | px - px*cos(theta) - py*sin(theta)   py + px*sin(theta) - py*cos(theta) 0  1 |

Its inverse is the same matrix with -theta.
"""
from __future__ import annotations

from typing import Sequence

from sympy import Matrix, Rational, symbols, sin, cos, simplify

from elimination import SingularMatrixError
from matrix import Matrix4x4, SIZE

theta, px, py, pz = symbols('theta px py pz')


def symbolic_translation(x, y, z) -> Matrix:
    return Matrix([
        [1, 0, 0, 0],
        [0, 1, 0, 0],
        [0, 0, 1, 0],
        [x, y, z, 1],
    ])


def symbolic_rotation_z(angle) -> Matrix:
    return Matrix([
        [cos(angle), -sin(angle), 0, 0],
        [sin(angle),  cos(angle), 0, 0],
        [0,           0,          1, 0],
        [0,           0,          0, 1],
    ])


def symbolic_rotation_about_point(pivot: Sequence = (px, py, pz), angle=theta) -> Matrix:
    """Return the simplified closed form of T(-pivot) * R(angle) * T(pivot)"""
    x, y, z = pivot
    return (symbolic_translation(-x, -y, -z) * symbolic_rotation_z(angle) * symbolic_translation(x, y, z)).applyfunc(simplify)


def evaluate(expression: Matrix, **values: float) -> Matrix4x4:
    """Substitute values for the symbols (by name) and return the result as a Matrix4x4"""
    substitutions = {symbol: values[symbol.name] for symbol in expression.free_symbols if symbol.name in values}
    evaluated = expression.subs(substitutions).evalf()
    if evaluated.free_symbols:
        raise ValueError(f"Missing values for {sorted(symbol.name for symbol in evaluated.free_symbols)}")
    return Matrix4x4([[float(evaluated[i, j]) for j in range(SIZE)] for i in range(SIZE)])


def to_exact(m: Matrix4x4) -> Matrix:
    """Convert a Matrix4x4 into a sympy matrix of exact rationals"""
    return Matrix([[Rational(m[i][j]) for j in range(SIZE)] for i in range(SIZE)])


def symbolic_inverse(m: Matrix4x4) -> Matrix4x4:
    """Invert a matrix in exact rational arithmetic and return the result rounded back to floats"""
    exact = to_exact(m)
    if exact.det() == 0:
        raise SingularMatrixError(f"The matrix is singular:\n{m}")
    inverse = exact.inv()
    return Matrix4x4([[float(inverse[i, j]) for j in range(SIZE)] for i in range(SIZE)])
