"""Tests for the Matrix4x4 container, the basic arithmetic and the vector bridge."""
import pytest

from matrix import (Matrix4x4, add, sub, multiply, transpose, equals, identity, row_vector, col_vector,
                    vector_as_matrix, transform_point, format_matrix, print_matrix)
from vector import Vector3

COUNTING = [[1, 2, 3, 4], [5, 6, 7, 8], [9, 10, 11, 12], [13, 14, 15, 16]]


def test_initialization():
    m1 = Matrix4x4(COUNTING)
    assert m1 == COUNTING
    assert all(isinstance(cell, float) for cell in m1)

    m2 = Matrix4x4(fill=0)
    assert m2 == [[0, 0, 0, 0]] * 4

    m3 = Matrix4x4(fill=list(range(1, 17)))
    assert m3 == m1

    m4 = Matrix4x4()
    assert list(m4) == [0.0] * 16


def test_initialization_copies():
    m1 = Matrix4x4(COUNTING)
    m2 = Matrix4x4(m1)
    m2[0][0] = 100
    assert m1[0][0] == 1
    m3 = m1.copy()
    m3[1] = [0, 0, 0, 0]
    assert m1[1] == [5, 6, 7, 8]


@pytest.mark.parametrize("matrix", [
    [[1, 2, 3], [4, 5, 6], [7, 8, 9]],
    [[1, 2, 3, 4]] * 3,
    [[1, 2, 3, 4]] * 3 + [[1, 2, 3]],
])
def test_initialization_refuses_other_shapes(matrix):
    with pytest.raises(ValueError):
        Matrix4x4(matrix)


def test_initialization_refuses_invalid_cells():
    with pytest.raises(ValueError):
        Matrix4x4([[1, 2, 3, "4"]] * 4)
    with pytest.raises(ValueError):
        Matrix4x4([[True, 0, 0, 0]] * 4)
    with pytest.raises(ValueError):
        Matrix4x4(fill=[1, 2, 3])


def test_identity():
    m = identity()
    for i in range(4):
        for j in range(4):
            assert m[i][j] == (1 if i == j else 0)
    assert m == Matrix4x4.identity()


def test_add_then_sub_restores():
    m1 = Matrix4x4([[0.5, -1.25, 3, 4], [2, 0.75, -6, 8], [9, 10, 0.125, 12], [13, -14, 15, 1]])
    m2 = Matrix4x4(COUNTING)
    assert sub(add(m1, m2), m2) == m1
    assert (m1 + m2) - m2 == m1


def test_add_and_sub_values():
    m1 = Matrix4x4(COUNTING)
    m2 = Matrix4x4(fill=1)
    assert add(m1, m2) == [[cell + 1 for cell in row] for row in COUNTING]
    assert sub(m1, m2) == [[cell - 1 for cell in row] for row in COUNTING]
    assert m1 == COUNTING, "operands must not be modified"


def test_multiply():
    m1 = Matrix4x4(COUNTING)
    product = multiply(m1, m1)
    assert product[0] == [90, 100, 110, 120]
    assert product[3] == [13*1 + 14*5 + 15*9 + 16*13, 13*2 + 14*6 + 15*10 + 16*14,
                          13*3 + 14*7 + 15*11 + 16*15, 13*4 + 14*8 + 15*12 + 16*16]
    assert m1 == COUNTING, "operands must not be modified"


def test_multiply_with_identity(general_matrix, affine_matrix):
    for m in (general_matrix, affine_matrix):
        assert multiply(m, identity()) == m
        assert multiply(identity(), m) == m


def test_scalar_multiplication():
    m = Matrix4x4(COUNTING)
    assert 2 * m == [[cell * 2 for cell in row] for row in COUNTING]
    assert m * 2 == 2 * m
    assert -m == [[-cell for cell in row] for row in COUNTING]


def test_wrong_operand_types():
    m = Matrix4x4(COUNTING)
    with pytest.raises(TypeError):
        add(m, COUNTING)
    with pytest.raises(TypeError):
        multiply(m, 2)
    with pytest.raises(TypeError):
        m + 1
    with pytest.raises(TypeError):
        m @ m


def test_transpose_in_place():
    m = Matrix4x4(COUNTING)
    transpose(m)
    assert m == [[1, 5, 9, 13], [2, 6, 10, 14], [3, 7, 11, 15], [4, 8, 12, 16]]
    transpose(m)
    assert m == COUNTING


def test_transpose_property_returns_copy(general_matrix):
    transposed = general_matrix.T
    assert transposed[3][0] == general_matrix[0][3]
    assert transposed[0][3] == general_matrix[3][0]
    assert transposed.T == general_matrix
    assert general_matrix[3][0] == 1


def test_equality_is_exact():
    m1 = Matrix4x4(COUNTING)
    m2 = Matrix4x4(COUNTING)
    assert equals(m1, m2)
    m2[2][2] += 1e-12
    assert not equals(m1, m2)
    assert m1 != m2
    assert m1.is_close(m2)
    assert not m1.is_close(m2, abs_tol=1e-13)


def test_row_access():
    m = Matrix4x4(COUNTING)
    m[2] = [0, 0, 0, 0]
    assert m[2] == [0, 0, 0, 0]
    with pytest.raises(ValueError):
        m[2] = [1, 2, 3]
    with pytest.raises(IndexError):
        m[4] = [1, 2, 3, 4]
    assert len(m) == 16


def test_vector_bridge():
    m = Matrix4x4(COUNTING)
    assert row_vector(m, 1) == Vector3(5, 6, 7)
    assert col_vector(m, 3) == Vector3(4, 8, 12)
    assert m.row_vector(3) == (13, 14, 15)
    with pytest.raises(IndexError):
        row_vector(m, 4)
    with pytest.raises(IndexError):
        col_vector(m, -1)


def test_vector_as_matrix():
    m = vector_as_matrix(Vector3(1, 2, 3))
    assert m == [[1, 2, 3, 1], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]]
    assert vector_as_matrix((1, 2, 3), w=0)[0] == [1, 2, 3, 0]


def test_transform_point():
    m = Matrix4x4(COUNTING)
    # (1, 0, 0, 1) picks rows 0 and 3
    assert transform_point(m, (1, 0, 0)) == Vector3(14, 16, 18)
    assert transform_point(identity(), (7, 8, 9)) == Vector3(7, 8, 9)


def test_format_matrix():
    expected = "\n".join(["| 1.000000 0.000000 0.000000 0.000000 |",
                          "| 0.000000 1.000000 0.000000 0.000000 |",
                          "| 0.000000 0.000000 1.000000 0.000000 |",
                          "| 0.000000 0.000000 0.000000 1.000000 |"])
    assert str(identity()) == expected
    assert format_matrix(identity()) == expected + "\n\n"


def test_print_matrix(capsys):
    print_matrix(Matrix4x4(COUNTING))
    out = capsys.readouterr().out
    assert out.startswith("| 1.000000 2.000000 3.000000 4.000000 |\n")
    assert out.endswith("| 13.000000 14.000000 15.000000 16.000000 |\n\n")


def test_print_format_setting(monkeypatch):
    import settings
    monkeypatch.setattr(settings, "PRINT_FORMAT", ".1f")
    assert str(identity()).splitlines()[0] == "| 1.0 0.0 0.0 0.0 |"
