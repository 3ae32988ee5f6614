"""Constants module for mlx-spectral.

This module centralizes default sizes and numerical tolerances used
throughout the codebase.

Submodules:
    audio_processing: Frame, hop and buffer size defaults
    spectral: Window and overlap-add constants
"""

from __future__ import annotations

from mlx_spectral.constants.audio_processing import *
from mlx_spectral.constants.spectral import *

__all__ = [
    # Audio processing
    "DEFAULT_WINDOW_SIZE",
    "DEFAULT_MAX_FFT_SIZE",
    "DEFAULT_CHANNELS",
    "MIN_FFT_SIZE",
    # Spectral
    "DEFAULT_WINDOW",
    "WINDOW_CACHE_MAXSIZE",
    "NOLA_TOLERANCE",
]
