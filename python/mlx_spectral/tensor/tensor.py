"""Owning N-dimensional container over contiguous numpy storage."""

from __future__ import annotations

from typing import Any

import numpy as np

from mlx_spectral.utils.conversion import to_numpy

from .slice import TensorSlice
from .view import TensorBase, View


class Tensor(TensorBase):
    """Owning container: contiguous storage plus a row-major descriptor.

    The descriptor of a Tensor always starts at offset 0 with row-major
    strides, and ``data.size == descriptor.size``. Rows, columns, slices
    and transposes are Views into the Tensor's storage.

    Args:
        *extents: Size of each dimension
        dtype: Element type (default: float64)

    Example:
        >>> spectrum = Tensor(2, 513, dtype=np.complex128)
        >>> spectrum.row(0).fill(1.0)
        >>> m = Tensor.from_nested([[1, 2, 3], [4, 5, 6]])
        >>> m.transpose()[2, 1]
        6.0
    """

    def __init__(self, *extents: int, dtype: Any = np.float64) -> None:
        assert extents, "A Tensor needs at least one dimension"
        self._desc = TensorSlice.from_extents(*extents)
        self._data = np.zeros(self._desc.size, dtype=dtype)

    @classmethod
    def from_array(cls, array: Any, dtype: Any = None) -> Tensor:
        """Copy any array-like (numpy, mx.array, Tensor, View) into a new Tensor."""
        source = to_numpy(array)
        assert source.ndim >= 1, "A Tensor needs at least one dimension"
        tensor = cls.__new__(cls)
        tensor._desc = TensorSlice.from_extents(*source.shape)
        tensor._data = np.array(
            source, dtype=dtype or source.dtype, order="C", copy=True
        ).reshape(-1)
        return tensor

    @classmethod
    def from_nested(cls, values: Any, dtype: Any = None) -> Tensor:
        """Build from nested lists; the nesting depth gives the order.

        Integer and boolean literals are stored as float64 unless ``dtype``
        says otherwise.
        """
        array = np.array(values, dtype=dtype)
        if dtype is None and array.dtype.kind in "biu":
            array = array.astype(np.float64)
        return cls.from_array(array)

    def view(self) -> View:
        """View over the whole Tensor."""
        return View(self._desc, self._data)

    def resize(self, *extents: int) -> None:
        """Reallocate to new extents, keeping the overlapping region.

        Views taken before the resize keep addressing the old storage.
        """
        assert len(extents) == self.order, "Number of dimensions doesn't match"
        previous = self.asarray()
        self._desc = TensorSlice.from_extents(*extents)
        self._data = np.zeros(self._desc.size, dtype=previous.dtype)
        self.assign(previous)

    def resize_dim(self, dim: int, amount: int) -> None:
        """Grow (or shrink, for negative ``amount``) one dimension."""
        if amount == 0:
            return
        extents = list(self.shape)
        extents[dim] += amount
        self.resize(*extents)

    def delete_row(self, index: int) -> None:
        """Remove row ``index``; later rows move up, order preserved."""
        assert 0 <= index < self.rows, "Row index out of range"
        block = self._desc.size // self.rows
        begin = index * block
        self._data = np.delete(self._data, slice(begin, begin + block))
        self._desc = self._desc.grown(0, -1)


__all__ = ["Tensor"]
