"""Array conversion at the numpy/MLX boundary.

All storage in mlx-spectral is numpy, because frames are written in place
through aliasing views. MLX arrays are accepted wherever sample data
enters the library and can be produced on the way out.
"""

from __future__ import annotations

from typing import Any

import mlx.core as mx
import numpy as np


def to_numpy(data: Any, dtype: np.dtype | None = None) -> np.ndarray:
    """Convert array-like data to a numpy array.

    numpy arrays, Tensors and Views are returned without copying when the
    dtype already matches, so writes into the result reach the original
    storage. MLX arrays are always copied.

    Args:
        data: numpy array, mx.array, Tensor/View, or nested sequence
        dtype: Optional target dtype

    Returns:
        numpy array
    """
    if isinstance(data, mx.array):
        return np.array(data, dtype=dtype)
    return np.asarray(data, dtype=dtype)


def to_mlx(data: Any) -> mx.array:
    """Convert array-like data (including Tensors and Views) to an mx.array copy."""
    if isinstance(data, mx.array):
        return data
    return mx.array(np.ascontiguousarray(to_numpy(data)))


def as_channel_rows(block: Any) -> Any:
    """Normalize a host block to something indexable by channel.

    Accepts a 2-D array-like ([channels, samples]), a 1-D array (treated as
    one channel), or a sequence of per-channel 1-D arrays. Sequences are
    returned as a list of numpy rows so no sample data is stacked.

    Args:
        block: Host audio block

    Returns:
        2-D numpy array or list of 1-D numpy arrays
    """
    if isinstance(block, (list, tuple)):
        return [to_numpy(row) for row in block]
    array = to_numpy(block)
    if array.ndim == 1:
        return array[np.newaxis, :]
    return array


__all__ = [
    "to_numpy",
    "to_mlx",
    "as_channel_rows",
]
