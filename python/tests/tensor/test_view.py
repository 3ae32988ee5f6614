"""Tests for View and the shared TensorBase operations."""

from __future__ import annotations

import mlx.core as mx
import numpy as np
import pytest

from mlx_spectral.tensor import Slice, Tensor, TensorSlice, View


@pytest.fixture
def matrix():
    """4x6 tensor holding 0..23 in row-major order."""
    return Tensor.from_array(np.arange(24.0).reshape(4, 6))


class TestRowsAndColumns:
    """Tests for row/col extraction and aliasing."""

    def test_row_values(self):
        t = Tensor.from_nested([[1, 2, 3], [4, 5, 6]])
        np.testing.assert_array_equal(t.row(1).to_numpy(), [4.0, 5.0, 6.0])
        assert t.row(1).order == 1

    def test_col_values(self):
        t = Tensor.from_nested([[1, 2, 3], [4, 5, 6]])
        np.testing.assert_array_equal(t.col(2).to_numpy(), [3.0, 6.0])

    def test_write_through_row_is_visible(self):
        t = Tensor.from_nested([[1, 2, 3], [4, 5, 6]])
        r = t.row(0)
        r[1] = 10.0
        assert t[0, 1] == 10.0

    def test_aliasing_views_see_each_other(self, matrix):
        row = matrix.row(2)
        col = matrix.col(3)
        row[3] = -1.0
        assert col[2] == -1.0
        assert np.shares_memory(np.asarray(row), matrix.data)


class TestTranspose:
    """Tests for transposed views."""

    def test_transpose_shares_storage(self):
        t = Tensor.from_nested([[1, 2, 3], [4, 5, 6]])
        tt = t.transpose()
        assert tt.shape == (3, 2)
        assert tt[2, 1] == 6.0
        tt[0, 1] = 40.0
        assert t[1, 0] == 40.0

    def test_double_transpose_is_identity(self, matrix):
        twice = matrix.transpose().transpose()
        assert twice.shape == matrix.shape
        assert twice.descriptor.strides == matrix.descriptor.strides
        np.testing.assert_array_equal(twice.to_numpy(), matrix.to_numpy())

    def test_T_property(self, matrix):
        np.testing.assert_array_equal(matrix.T.to_numpy(), matrix.to_numpy().T)


class TestSlicing:
    """Tests for Slice specs and indexing sugar."""

    @pytest.mark.parametrize(
        "start,length,step",
        [(0, 5, 1), (3, 4, 2), (19, 1, 1), (0, 7, 3), (5, 0, 1)],
    )
    def test_slice_addresses_strided_elements(self, start, length, step):
        t = Tensor.from_array(np.arange(20.0))
        v = t.slice(Slice(start, length, step))
        assert v.extent(0) == length
        for i in range(length):
            assert v[i] == t[start + i * step]

    def test_two_dimensional_slice(self, matrix):
        v = matrix.slice(Slice(1, 2), Slice(0, 3, 2))
        np.testing.assert_array_equal(v.to_numpy(), [[6.0, 8.0, 10.0], [12.0, 14.0, 16.0]])

    def test_out_of_range_slice_asserts(self, matrix):
        with pytest.raises(AssertionError):
            matrix.slice(Slice(3, 2), Slice())

    def test_mixed_indexing(self, matrix):
        v = matrix[1:3, 2]
        assert v.shape == (2,)
        np.testing.assert_array_equal(v.to_numpy(), [8.0, 14.0])

    def test_integer_index_is_row(self, matrix):
        np.testing.assert_array_equal(matrix[2].to_numpy(), np.arange(12.0, 18.0))

    def test_builtin_step_slice(self, matrix):
        v = matrix[:, ::2]
        assert v.shape == (4, 3)
        assert v[3, 2] == 22.0

    def test_setitem_scalar_fills(self, matrix):
        matrix[0] = 0.0
        np.testing.assert_array_equal(matrix.row(0).to_numpy(), np.zeros(6))
        assert matrix[1, 0] == 6.0

    def test_setitem_array_assigns(self, matrix):
        matrix[1:3, Slice(0, 2)] = np.array([[-1.0, -2.0], [-3.0, -4.0]])
        assert matrix[2, 1] == -4.0
        assert matrix[2, 2] == 14.0

    def test_unsupported_index_type(self, matrix):
        with pytest.raises(TypeError):
            matrix["a"]


class TestElementwise:
    """Tests for fill, assign and apply."""

    def test_assign_smallest_common_shape(self):
        a = Tensor(2, 3)
        b = Tensor.from_nested([[1, 2], [3, 4], [5, 6]])
        a.assign(b)
        np.testing.assert_array_equal(a.to_numpy(), [[1.0, 2.0, 0.0], [3.0, 4.0, 0.0]])

    def test_assign_order_mismatch_asserts(self):
        with pytest.raises(AssertionError):
            Tensor(2, 3).assign(np.zeros(3))

    def test_assign_from_mlx(self):
        t = Tensor(2, 3)
        t.row(0).assign(mx.array([7.0, 8.0, 9.0]))
        np.testing.assert_allclose(t.row(0).to_numpy(), [7.0, 8.0, 9.0])

    def test_assign_between_overlapping_views(self):
        t = Tensor.from_array(np.arange(6.0))
        t.slice(Slice(1, 5)).assign(t.slice(Slice(0, 5)))
        np.testing.assert_array_equal(t.to_numpy(), [0.0, 0.0, 1.0, 2.0, 3.0, 4.0])

    def test_fill_returns_self(self, matrix):
        col = matrix.col(1)
        assert col.fill(3.0) is col
        np.testing.assert_array_equal(matrix.col(1).to_numpy(), np.full(4, 3.0))

    def test_apply_binary_ufunc(self):
        frame = Tensor.from_array(np.ones(4))
        frame.apply(np.multiply, np.array([0.0, 0.5, 1.0, 0.5]))
        np.testing.assert_array_equal(frame.to_numpy(), [0.0, 0.5, 1.0, 0.5])

    def test_apply_unary(self, matrix):
        matrix.row(0).apply(np.negative)
        matrix.row(1).apply(lambda x: x * 2)
        assert matrix[0, 5] == -5.0
        assert matrix[1, 5] == 22.0

    def test_apply_shape_mismatch_asserts(self):
        with pytest.raises(AssertionError):
            Tensor(3).apply(np.add, np.ones(4))


class TestViewConstruction:
    """Tests for views over external storage."""

    def test_over_storage(self):
        storage = np.arange(10.0)
        v = View.over(storage, 2, 2, 2)
        np.testing.assert_array_equal(v.to_numpy(), [[2.0, 3.0], [4.0, 5.0]])
        v[1, 1] = 0.0
        assert storage[5] == 0.0

    def test_reset_repoints(self):
        v = View.over(np.zeros(4), 0, 4)
        other = np.arange(6.0)
        v.reset(other, 3, 3)
        np.testing.assert_array_equal(v.to_numpy(), [3.0, 4.0, 5.0])

    def test_storage_must_be_flat(self):
        with pytest.raises(AssertionError):
            View(TensorSlice.from_extents(2, 2), np.zeros((2, 2)))

    def test_expand_dims(self):
        t = Tensor.from_nested([[1, 2, 3], [4, 5, 6]])
        expanded = t.row(1).expand_dims()
        assert expanded.shape == (1, 3)
        assert expanded[0, 2] == 6.0


class TestConversion:
    """Tests for numpy/MLX conversion and Python protocols."""

    def test_asarray_is_a_view(self, matrix):
        array = np.asarray(matrix.col(0))
        array[1] = 100.0
        assert matrix[1, 0] == 100.0

    def test_to_mlx(self, matrix):
        result = matrix.transpose().to_mlx()
        assert isinstance(result, mx.array)
        assert result.shape == (6, 4)
        np.testing.assert_allclose(np.array(result), matrix.to_numpy().T)

    def test_copy_is_independent(self, matrix):
        copied = matrix.row(0).copy()
        assert isinstance(copied, Tensor)
        copied[0] = 99.0
        assert matrix[0, 0] == 0.0

    def test_iteration(self, matrix):
        rows = list(matrix)
        assert len(rows) == 4
        np.testing.assert_array_equal(rows[3].to_numpy(), np.arange(18.0, 24.0))
        assert list(matrix.row(0))[:3] == [0.0, 1.0, 2.0]
        assert len(matrix) == 4

    def test_str(self):
        t = Tensor.from_nested([[1, 2], [3, 4]])
        assert str(t) == "1.0,2.0\n3.0,4.0"
        assert repr(t.row(0)) == "View(shape=(2,), dtype=float64)"
