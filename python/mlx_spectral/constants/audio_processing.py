"""Audio processing constants for frames, hops and ring buffers.

These constants define the default sizes used by the streaming
pipeline when the caller does not override them.
"""

from __future__ import annotations

DEFAULT_WINDOW_SIZE = 1024
"""Default analysis window length in samples."""

DEFAULT_MAX_FFT_SIZE = 16384
"""Default largest FFT the streaming pipeline preallocates for."""

DEFAULT_CHANNELS = 1
"""Default number of audio channels (mono)."""

MIN_FFT_SIZE = 2
"""Smallest FFT the split-format kernel accepts."""

__all__ = [
    "DEFAULT_WINDOW_SIZE",
    "DEFAULT_MAX_FFT_SIZE",
    "DEFAULT_CHANNELS",
    "MIN_FFT_SIZE",
]
