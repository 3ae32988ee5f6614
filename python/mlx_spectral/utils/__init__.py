"""Utility functions for mlx-spectral.

Submodules:
    conversion: numpy/MLX boundary conversion helpers
"""

from __future__ import annotations

from mlx_spectral.utils.conversion import (
    as_channel_rows,
    to_mlx,
    to_numpy,
)

__all__ = [
    "to_numpy",
    "to_mlx",
    "as_channel_rows",
]
