from __future__ import annotations

from typing import NamedTuple


class Vector3(NamedTuple):
    """A 3-component vector, used for translations, rotation pivots and matrix rows/columns"""
    x: float
    y: float
    z: float

    def __neg__(self):
        return Vector3(-self.x, -self.y, -self.z)

    def __repr__(self):
        return f"Vector3({self.x}, {self.y}, {self.z})"
