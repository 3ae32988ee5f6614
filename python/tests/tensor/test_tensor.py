"""Tests for the owning Tensor container."""

from __future__ import annotations

import mlx.core as mx
import numpy as np
import pytest

from mlx_spectral.tensor import Tensor, View


class TestConstruction:
    """Tests for creating Tensors."""

    def test_zeros_from_extents(self):
        t = Tensor(3, 4)
        assert t.shape == (3, 4)
        assert t.size == 12
        assert t.data.size == t.size
        assert t.dtype == np.float64
        assert not t.to_numpy().any()

    def test_complex_dtype(self):
        t = Tensor(2, 513, dtype=np.complex128)
        assert t.dtype == np.complex128
        assert t.cols == 513

    def test_from_nested_integers_become_float(self):
        t = Tensor.from_nested([[1, 2, 3], [4, 5, 6]])
        assert t.dtype == np.float64
        assert t.rows == 2 and t.cols == 3

    def test_from_array_copies(self):
        source = np.arange(6.0).reshape(2, 3)
        t = Tensor.from_array(source)
        source[0, 0] = 50.0
        assert t[0, 0] == 0.0

    def test_from_array_non_contiguous(self):
        source = np.arange(12.0).reshape(3, 4).T
        t = Tensor.from_array(source)
        assert t.descriptor.is_contiguous
        np.testing.assert_array_equal(t.to_numpy(), source)

    def test_from_mlx(self):
        t = Tensor.from_array(mx.ones((2, 5)))
        assert t.shape == (2, 5)
        np.testing.assert_array_equal(t.to_numpy(), np.ones((2, 5)))

    def test_view_aliases(self):
        t = Tensor(2, 2)
        v = t.view()
        assert isinstance(v, View)
        v[1, 1] = 3.0
        assert t[1, 1] == 3.0


class TestResize:
    """Tests for resize, resize_dim and delete_row."""

    def test_resize_preserves_overlap(self):
        t = Tensor.from_nested([[1, 2, 3], [4, 5, 6]])
        t.resize(3, 2)
        np.testing.assert_array_equal(t.to_numpy(), [[1.0, 2.0], [4.0, 5.0], [0.0, 0.0]])
        assert t.data.size == 6

    def test_resize_dim_grows(self):
        t = Tensor.from_nested([[1, 2, 3], [4, 5, 6]])
        t.resize_dim(1, 2)
        assert t.shape == (2, 5)
        np.testing.assert_array_equal(t.row(1).to_numpy(), [4.0, 5.0, 6.0, 0.0, 0.0])

    def test_resize_order_mismatch_asserts(self):
        with pytest.raises(AssertionError):
            Tensor(2, 2).resize(4)

    def test_views_are_stale_after_resize(self):
        t = Tensor.from_nested([[1, 2, 3], [4, 5, 6]])
        r = t.row(0)
        t.resize(3, 3)
        r.fill(9.0)
        assert t[0, 0] == 1.0

    def test_delete_row_preserves_order(self):
        t = Tensor.from_array(np.arange(12.0).reshape(4, 3))
        t.delete_row(1)
        assert t.shape == (3, 3)
        assert t.data.size == 9
        np.testing.assert_array_equal(
            t.to_numpy(), [[0.0, 1.0, 2.0], [6.0, 7.0, 8.0], [9.0, 10.0, 11.0]]
        )

    @pytest.mark.parametrize("index", [0, 3])
    def test_delete_first_and_last_row(self, index):
        source = np.arange(12.0).reshape(4, 3)
        t = Tensor.from_array(source)
        t.delete_row(index)
        np.testing.assert_array_equal(t.to_numpy(), np.delete(source, index, axis=0))

    def test_delete_row_out_of_range_asserts(self):
        with pytest.raises(AssertionError):
            Tensor(2, 2).delete_row(2)
