import matplotlib

matplotlib.use("Agg")

import pytest

from matrix import Matrix4x4
from transforms import translation, rotation_z


@pytest.fixture
def general_matrix() -> Matrix4x4:
    """A non-singular matrix without any structure (diagonally dominant)."""
    return Matrix4x4([
        [2, 1, 0, 0],
        [1, 3, 1, 0],
        [0, 1, 4, 1],
        [1, 0, 1, 5],
    ])


@pytest.fixture
def affine_matrix() -> Matrix4x4:
    """A rotation followed by a translation, as built by the render pipeline."""
    return rotation_z(0.6) * translation((4.0, -2.5, 1.0))


@pytest.fixture
def permutation_matrix() -> Matrix4x4:
    """Needs a second pass and skips one row correction in the first pass."""
    return Matrix4x4([
        [1, 1, 0, 0],
        [0, 0, 1, 0],
        [0, 1, 0, 0],
        [0, 0, 0, 1],
    ])
