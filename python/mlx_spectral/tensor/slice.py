"""
Extent/stride descriptors and slice specifications.

A descriptor says how a region of flat storage is addressed: an offset
into the storage, an extent and a stride per dimension, and the total
element count. Descriptors are plain values; they never own or reference
storage themselves.
"""

from __future__ import annotations

import math
from dataclasses import dataclass


def _row_major_strides(extents: tuple[int, ...]) -> tuple[int, ...]:
    strides = [1] * len(extents)
    for dim in range(len(extents) - 2, -1, -1):
        strides[dim] = strides[dim + 1] * extents[dim + 1]
    return tuple(strides)


@dataclass(frozen=True)
class Slice:
    """
    Range specification for one dimension.

    Parameters
    ----------
    start : int, default=0
        First index taken from the dimension.
    length : int, optional
        Number of elements in the resulting dimension. ``None`` takes
        every ``step``-th element from ``start`` to the end.
    step : int, default=1
        Distance between taken elements. Must be positive.

    Examples
    --------
    >>> Slice(2, 3)        # elements 2, 3, 4
    >>> Slice(0, 4, 2)     # elements 0, 2, 4, 6
    >>> ALL                # the whole dimension
    """

    start: int = 0
    length: int | None = None
    step: int = 1

    def resolve(self, extent: int) -> tuple[int, int, int]:
        """Return ``(start, length, step)`` for a dimension of ``extent``."""
        assert self.step >= 1, "Slice step must be positive"
        assert 0 <= self.start <= extent, "Slice start out of range"
        length = self.length
        if length is None:
            length = (extent - self.start + self.step - 1) // self.step
        assert length >= 0, "Slice length must be non-negative"
        assert (
            length == 0 or self.start + (length - 1) * self.step < extent
        ), "Slice extends past the end of the dimension"
        return self.start, length, self.step

    @classmethod
    def from_builtin(cls, key: slice, extent: int) -> Slice:
        """Convert a Python ``slice`` over a dimension of ``extent``."""
        start, stop, step = key.indices(extent)
        assert step >= 1, "Negative slice steps are not supported"
        return cls(start, len(range(start, stop, step)), step)


ALL = Slice()
"""Marker for a whole dimension: start 0, full extent, step 1."""


@dataclass(frozen=True)
class TensorSlice:
    """Offset, extents and strides describing a region of flat storage.

    Attributes:
        start: Offset of element (0, ..., 0) in the storage
        extents: Number of elements per dimension
        strides: Storage distance between neighbours per dimension
        size: Total element count, always the product of ``extents``
    """

    start: int
    extents: tuple[int, ...]
    strides: tuple[int, ...]
    size: int

    @classmethod
    def from_extents(cls, *extents: int, start: int = 0) -> TensorSlice:
        """Row-major descriptor for freshly allocated storage."""
        extents = tuple(int(e) for e in extents)
        assert all(e >= 0 for e in extents), "Extents must be non-negative"
        return cls(start, extents, _row_major_strides(extents), math.prod(extents))

    @property
    def order(self) -> int:
        return len(self.extents)

    def __call__(self, *indices: int) -> int:
        """Linear storage offset of the element at ``indices``."""
        assert self.check_bounds(*indices), "Arguments out of bounds"
        return self.start + sum(i * s for i, s in zip(indices, self.strides))

    def check_bounds(self, *indices: int) -> bool:
        if len(indices) != self.order:
            return False
        return all(0 <= i < e for i, e in zip(indices, self.extents))

    def sliced(self, *specs: Slice) -> TensorSlice:
        """Compose this descriptor with one ``Slice`` per dimension.

        ``start`` moves by ``spec.start * stride`` per dimension, extents
        become the spec lengths and strides are multiplied by the steps.
        """
        assert len(specs) == self.order, "Need one slice per dimension"
        start = self.start
        extents = []
        strides = []
        for spec, extent, stride in zip(specs, self.extents, self.strides):
            first, length, step = spec.resolve(extent)
            start += first * stride
            extents.append(length)
            strides.append(stride * step)
        return TensorSlice(start, tuple(extents), tuple(strides), math.prod(extents))

    def dropped(self, dim: int, index: int) -> TensorSlice:
        """Fix ``dim`` at ``index``, giving an order N-1 descriptor.

        ``dropped(0, i)`` is row ``i``, ``dropped(1, j)`` is column ``j``.
        """
        assert 0 <= dim < self.order, "Dimension out of range"
        assert 0 <= index < self.extents[dim], "Index out of range"
        extents = self.extents[:dim] + self.extents[dim + 1 :]
        strides = self.strides[:dim] + self.strides[dim + 1 :]
        return TensorSlice(
            self.start + index * self.strides[dim],
            extents,
            strides,
            math.prod(extents),
        )

    def transpose(self) -> TensorSlice:
        return TensorSlice(
            self.start, self.extents[::-1], self.strides[::-1], self.size
        )

    def expanded(self) -> TensorSlice:
        """Add a leading dimension of extent 1 (numpy ``newaxis``)."""
        outer = self.extents[0] * self.strides[0] if self.order else 1
        return TensorSlice(
            self.start, (1,) + self.extents, (outer,) + self.strides, self.size
        )

    def grown(self, dim: int, amount: int) -> TensorSlice:
        """Fresh row-major descriptor with ``dim`` changed by ``amount``."""
        extents = list(self.extents)
        extents[dim] += amount
        return TensorSlice.from_extents(*extents)

    @property
    def is_contiguous(self) -> bool:
        return self.strides == _row_major_strides(self.extents)


def same_extents(a: TensorSlice, b: TensorSlice) -> bool:
    """Whether two descriptors address regions of identical shape."""
    return a.extents == b.extents


__all__ = [
    "Slice",
    "ALL",
    "TensorSlice",
    "same_extents",
]
