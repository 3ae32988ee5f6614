"""
Strided, non-owning views over flat storage.

A View pairs a ``TensorSlice`` descriptor with a flat numpy array it does
not own. Rows, columns, sub-slices and transposes are new Views over the
same storage, so writes through one View are visible through every other
View (and the owning Tensor) that addresses the same elements.

Bulk element work goes through ``asarray()``, which materializes the
descriptor as a numpy strided view of the storage (no copy), the same way
signal framing is done with ``as_strided`` elsewhere in the library.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING, Any

import mlx.core as mx
import numpy as np
from numpy.lib.stride_tricks import as_strided

from mlx_spectral.utils.conversion import to_mlx, to_numpy

from .slice import ALL, Slice, TensorSlice

if TYPE_CHECKING:
    from .tensor import Tensor


class TensorBase:
    """Indexing, slicing and element-wise operations shared by View and Tensor.

    Subclasses provide ``_desc`` (a TensorSlice) and ``_data`` (1-D numpy
    storage).
    """

    _desc: TensorSlice
    _data: np.ndarray

    # ------------------------------------------------------------------
    # Shape and storage

    @property
    def descriptor(self) -> TensorSlice:
        return self._desc

    @property
    def data(self) -> np.ndarray:
        """The flat storage this object addresses (not just its own region)."""
        return self._data

    @property
    def order(self) -> int:
        return self._desc.order

    @property
    def shape(self) -> tuple[int, ...]:
        return self._desc.extents

    @property
    def size(self) -> int:
        return self._desc.size

    @property
    def dtype(self) -> np.dtype:
        return self._data.dtype

    def extent(self, n: int) -> int:
        assert 0 <= n < self.order
        return self._desc.extents[n]

    @property
    def rows(self) -> int:
        return self._desc.extents[0]

    @property
    def cols(self) -> int:
        return self._desc.extents[1] if self.order > 1 else 0

    def asarray(self) -> np.ndarray:
        """Strided numpy view of exactly the addressed elements (no copy)."""
        itemsize = self._data.itemsize
        return as_strided(
            self._data[self._desc.start :],
            shape=self._desc.extents,
            strides=tuple(s * itemsize for s in self._desc.strides),
        )

    def __array__(self, dtype: Any = None, copy: bool | None = None) -> np.ndarray:
        array = self.asarray()
        if dtype is not None and np.dtype(dtype) != array.dtype:
            return array.astype(dtype)
        if copy:
            return array.copy()
        return array

    # ------------------------------------------------------------------
    # Views

    def row(self, i: int) -> View:
        assert self.order > 1, "row() needs at least two dimensions"
        return View(self._desc.dropped(0, i), self._data)

    def col(self, j: int) -> View:
        assert self.order > 1, "col() needs at least two dimensions"
        return View(self._desc.dropped(1, j), self._data)

    def slice(self, *specs: Slice) -> View:
        """View selecting one ``Slice`` per dimension."""
        return View(self._desc.sliced(*specs), self._data)

    def transpose(self) -> View:
        """View with extents and strides reversed, sharing storage."""
        return View(self._desc.transpose(), self._data)

    @property
    def T(self) -> View:
        return self.transpose()

    def expand_dims(self) -> View:
        """View with an extra leading dimension of extent 1."""
        return View(self._desc.expanded(), self._data)

    def __getitem__(self, key: Any) -> Any:
        """Element access with a full tuple of ints, otherwise a View.

        Integers fix a dimension (so ``t[i]`` on a matrix is row ``i``),
        while ``Slice`` objects and Python slices keep it.
        """
        if not isinstance(key, tuple):
            key = (key,)
        assert len(key) <= self.order, "Too many indices"
        if len(key) == self.order and all(_is_index(k) for k in key):
            return self._data[self._desc(*key)]

        key = key + (ALL,) * (self.order - len(key))
        specs = []
        fixed = []
        for dim, k in enumerate(key):
            if isinstance(k, Slice):
                specs.append(k)
            elif isinstance(k, slice):
                specs.append(Slice.from_builtin(k, self._desc.extents[dim]))
            elif _is_index(k):
                specs.append(ALL)
                fixed.append((dim, int(k)))
            else:
                raise TypeError(f"Unsupported index type: {type(k).__name__}")

        desc = self._desc.sliced(*specs)
        for dim, index in reversed(fixed):
            desc = desc.dropped(dim, index)
        return View(desc, self._data)

    def __setitem__(self, key: Any, value: Any) -> None:
        if not isinstance(key, tuple):
            key = (key,)
        if len(key) == self.order and all(_is_index(k) for k in key):
            self._data[self._desc(*key)] = value
            return
        target = self[key]
        if np.isscalar(value):
            target.fill(value)
        else:
            target.assign(value)

    # ------------------------------------------------------------------
    # Element-wise operations

    def fill(self, value: Any) -> TensorBase:
        self.asarray()[...] = value
        return self

    def assign(self, other: Any) -> TensorBase:
        """Copy ``other`` into this region, smallest common shape only.

        Both sides must have the same order. Where extents differ, only
        the element-wise minimum region is copied and the rest of this
        object is left untouched. Overlapping storage is handled by numpy.
        """
        src = to_numpy(other)
        dst = self.asarray()
        assert src.ndim == dst.ndim, "Cannot assign between different orders"
        region = tuple(slice(0, min(a, b)) for a, b in zip(dst.shape, src.shape))
        np.copyto(dst[region], src[region])
        return self

    def apply(self, func: Callable[..., Any], other: Any = None) -> TensorBase:
        """Replace every element with ``func(element)`` or ``func(element, other)``.

        numpy ufuncs are called with ``out=`` so no temporary is created,
        e.g. ``frame.apply(np.multiply, window)``.
        """
        array = self.asarray()
        if other is None:
            if isinstance(func, np.ufunc):
                func(array, out=array)
            else:
                array[...] = func(array)
            return self

        operand = to_numpy(other)
        assert operand.shape == array.shape, "apply() needs matching extents"
        if isinstance(func, np.ufunc):
            func(array, operand, out=array)
        else:
            array[...] = func(array, operand)
        return self

    # ------------------------------------------------------------------
    # Conversion

    def copy(self) -> Tensor:
        """Owning, contiguous copy of the addressed elements."""
        from .tensor import Tensor

        return Tensor.from_array(self)

    def to_numpy(self) -> np.ndarray:
        return np.array(self.asarray())

    def to_mlx(self) -> mx.array:
        return to_mlx(self)

    # ------------------------------------------------------------------
    # Python protocol

    def __len__(self) -> int:
        return self._desc.extents[0]

    def __iter__(self) -> Iterator[Any]:
        if self.order == 1:
            return iter(self.asarray())
        return (self.row(i) for i in range(self.rows))

    def __str__(self) -> str:
        if self.order == 1:
            return ",".join(str(x) for x in self.asarray())
        return "\n".join(str(self.row(i)) for i in range(self.rows))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(shape={self.shape}, dtype={self.dtype})"


class View(TensorBase):
    """Non-owning handle onto part of some flat storage.

    A View never owns its storage and is never validated against it. It
    keeps the storage array alive, but once the owning Tensor is resized
    or has a row deleted, the View still addresses the *previous* storage
    and no longer aliases the Tensor.

    Args:
        descriptor: Offset, extents and strides of the addressed region
        storage: Flat (1-D) numpy array holding the elements

    Example:
        >>> t = Tensor(2, 4)
        >>> r = t.row(1)
        >>> r[2] = 5.0
        >>> t[1, 2]
        5.0
    """

    def __init__(self, descriptor: TensorSlice, storage: np.ndarray) -> None:
        assert storage.ndim == 1, "View storage must be flat"
        self._desc = descriptor
        self._data = storage

    @classmethod
    def over(cls, storage: np.ndarray, start: int, *extents: int) -> View:
        """Row-major View of ``extents`` at offset ``start`` in ``storage``."""
        return cls(TensorSlice.from_extents(*extents, start=start), storage)

    def reset(self, storage: np.ndarray, start: int, *extents: int) -> None:
        """Repoint this View at new storage and extents."""
        assert storage.ndim == 1, "View storage must be flat"
        self._data = storage
        self._desc = TensorSlice.from_extents(*extents, start=start)


def _is_index(key: Any) -> bool:
    return isinstance(key, (int, np.integer)) and not isinstance(key, bool)


__all__ = [
    "TensorBase",
    "View",
]
