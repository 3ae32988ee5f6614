"""Tests for Slice specs and TensorSlice descriptors."""

from __future__ import annotations

import pytest

from mlx_spectral.tensor import ALL, Slice, TensorSlice, same_extents


class TestSlice:
    """Tests for per-dimension slice specs."""

    def test_resolve_explicit(self):
        assert Slice(2, 3).resolve(10) == (2, 3, 1)
        assert Slice(0, 4, 2).resolve(10) == (0, 4, 2)

    def test_resolve_open_length(self):
        """A missing length takes every step-th element to the end."""
        assert Slice(1, None, 3).resolve(10) == (1, 3, 3)
        assert Slice(4).resolve(4) == (4, 0, 1)

    def test_all_marker(self):
        assert ALL.resolve(7) == (0, 7, 1)

    def test_out_of_range_is_precondition_violation(self):
        with pytest.raises(AssertionError):
            Slice(8, 5).resolve(10)
        with pytest.raises(AssertionError):
            Slice(11).resolve(10)
        with pytest.raises(AssertionError):
            Slice(0, 2, 0).resolve(10)

    def test_from_builtin(self):
        spec = Slice.from_builtin(slice(1, None, 2), 6)
        assert spec == Slice(1, 3, 2)
        assert Slice.from_builtin(slice(None), 5).resolve(5) == (0, 5, 1)
        assert Slice.from_builtin(slice(-2, None), 5) == Slice(3, 2, 1)


class TestTensorSlice:
    """Tests for extent/stride descriptors."""

    def test_row_major_construction(self):
        desc = TensorSlice.from_extents(3, 4)
        assert desc.start == 0
        assert desc.extents == (3, 4)
        assert desc.strides == (4, 1)
        assert desc.size == 12
        assert desc.order == 2
        assert desc.is_contiguous

    def test_three_dimensional_strides(self):
        desc = TensorSlice.from_extents(2, 3, 5)
        assert desc.strides == (15, 5, 1)
        assert desc.size == 30

    def test_linear_offset(self):
        desc = TensorSlice.from_extents(3, 4, start=5)
        assert desc(0, 0) == 5
        assert desc(1, 2) == 5 + 6
        assert desc(2, 3) == 5 + 11

    def test_bounds(self):
        desc = TensorSlice.from_extents(3, 4)
        assert desc.check_bounds(2, 3)
        assert not desc.check_bounds(3, 0)
        assert not desc.check_bounds(0)
        with pytest.raises(AssertionError):
            desc(0, 4)

    def test_sliced(self):
        """Offsets move by start * stride, strides scale by step."""
        desc = TensorSlice.from_extents(4, 6).sliced(Slice(1, 2), Slice(0, 3, 2))
        assert desc.start == 6
        assert desc.extents == (2, 3)
        assert desc.strides == (6, 2)
        assert desc.size == 6
        assert not desc.is_contiguous

    def test_sliced_composes(self):
        base = TensorSlice.from_extents(20)
        once = base.sliced(Slice(2, 9, 2))
        twice = once.sliced(Slice(1, 3, 3))
        assert twice.start == 4
        assert twice.strides == (6,)
        assert twice.extents == (3,)

    def test_dropped_row_and_column(self):
        desc = TensorSlice.from_extents(3, 4)
        row = desc.dropped(0, 2)
        assert (row.start, row.extents, row.strides) == (8, (4,), (1,))
        col = desc.dropped(1, 1)
        assert (col.start, col.extents, col.strides) == (1, (3,), (4,))
        assert col.size == 3

    def test_transpose(self):
        desc = TensorSlice.from_extents(3, 4)
        transposed = desc.transpose()
        assert transposed.extents == (4, 3)
        assert transposed.strides == (1, 4)
        assert transposed.transpose() == desc

    def test_expanded(self):
        desc = TensorSlice.from_extents(3, 4).expanded()
        assert desc.extents == (1, 3, 4)
        assert desc.strides == (12, 4, 1)
        assert desc.size == 12

    def test_grown(self):
        desc = TensorSlice.from_extents(3, 4).grown(0, -1)
        assert desc.extents == (2, 4)
        assert desc.size == 8
        assert TensorSlice.from_extents(3, 4).grown(1, 2).strides == (6, 1)

    def test_same_extents(self):
        a = TensorSlice.from_extents(2, 3)
        b = TensorSlice.from_extents(4, 3).sliced(Slice(1, 2), ALL)
        assert same_extents(a, b)
        assert not same_extents(a, a.transpose())
