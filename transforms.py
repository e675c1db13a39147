"""Builders for the affine transforms used by the render pipeline.

All matrices follow the row-vector convention of `matrix.Matrix4x4`: a point (x, y, z, 1) is multiplied
from the left, so translations are stored in the last row and transforms are chained left to right.
"""
from __future__ import annotations

from math import sin, cos, pi
from typing import Sequence

import settings
from matrix import Matrix4x4, SIZE, identity
from vector import Vector3

__all__ = ["identity", "translation", "rotation_z", "rotation_z_degrees", "rotate_about_point"]


def _snap(value: float) -> float:
    # sin(pi) and friends are not exactly 0 in floating point
    return 0.0 if abs(value) < settings.SNAP_EPSILON else value


def translation(v: Sequence[float]) -> Matrix4x4:
    """Return an identity matrix with the translation (x, y, z) in the last row"""
    x, y, z = v
    result = Matrix4x4.identity()
    result[3] = [x, y, z, 1]
    return result


def rotation_z(angle: float) -> Matrix4x4:
    """Return a rotation matrix around the z axis
    Sine and cosine values below settings.SNAP_EPSILON are set to exactly 0, so quarter turns are exact.
    This also means that rotations by less than SNAP_EPSILON radians (1e-12 by default) return the identity matrix.

    :param angle: The rotation angle in radians
    """
    sin_angle = _snap(sin(angle))
    cos_angle = _snap(cos(angle))
    return Matrix4x4([
        [cos_angle, -sin_angle, 0, 0],
        [sin_angle,  cos_angle, 0, 0],
        [0,          0,         1, 0],
        [0,          0,         0, 1],
    ])


def rotation_z_degrees(angle: float) -> Matrix4x4:
    return rotation_z(angle * pi / 180)


def rotate_about_point(m: Matrix4x4, pivot: Sequence[float], angle: float):
    """Rotate a matrix in place around the z axis through the pivot point.
    The matrix is replaced by m * T(-pivot) * R(angle) * T(pivot).

    :param m: The matrix to rotate
    :param pivot: The point (x, y, z) to rotate around
    :param angle: The rotation angle in radians
    """
    pivot = Vector3(*pivot)
    translate_to_origin = translation(-pivot)
    rotation = rotation_z(angle)
    translate_back = translation(pivot)
    result = m * translate_to_origin
    result = result * rotation
    result = result * translate_back
    for row in range(SIZE):
        m[row] = result[row]
