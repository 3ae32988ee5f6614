"""Strided tensor containers for audio and spectral data.

Tensor owns contiguous storage; View addresses part of some storage
without owning it. Both share one indexing and slicing vocabulary:

    >>> frames = Tensor(2, 1024)
    >>> left = frames.row(0)                     # View, no copy
    >>> head = frames.slice(ALL, Slice(0, 512))  # first 512 columns
    >>> frames.transpose().shape
    (1024, 2)
"""

from __future__ import annotations

from .slice import ALL, Slice, TensorSlice, same_extents
from .tensor import Tensor
from .view import TensorBase, View

__all__ = [
    "Slice",
    "ALL",
    "TensorSlice",
    "same_extents",
    "TensorBase",
    "View",
    "Tensor",
]
