"""Streaming spectral processing for mlx-spectral.

This module turns a continuous stream of host blocks into overlapping
analysis frames, runs a per-frame spectral callback, and reassembles a
continuous output stream with normalized overlap-add.

Example:
    >>> from mlx_spectral.streaming import (
    ...     FFTParams,
    ...     SpectralGainProcessor,
    ...     STFTBufferedProcess,
    ... )
    >>>
    >>> stft = STFTBufferedProcess(max_fft_size=4096, channels_in=2, channels_out=2)
    >>> params = FFTParams(window_size=1024, hop_size=256)
    >>> processor = SpectralGainProcessor(0.5)
    >>> for block in blocks:  # [2, host_size] each
    ...     out = stft.run(processor, params, block)
"""

from __future__ import annotations

# Core types
from mlx_spectral.streaming._types import ChannelRole, ProcessStats

# Buffering
from mlx_spectral.streaming.buffer import FrameSink, FrameSource

# Pipeline
from mlx_spectral.streaming.buffered import BufferedProcess, STFTBufferedProcess

# Parameters
from mlx_spectral.streaming.params import (
    FFTParams,
    ParameterSnapshot,
    ParameterTrackChanges,
    next_power_of_two,
)

# Processor base classes
from mlx_spectral.streaming.processor import (
    IdentitySpectralProcessor,
    MagnitudeAnalyser,
    SpectralGainProcessor,
    SpectralProcessor,
)

__all__ = [
    # Types
    "ChannelRole",
    "ProcessStats",
    # Buffer
    "FrameSource",
    "FrameSink",
    # Parameters
    "FFTParams",
    "ParameterTrackChanges",
    "ParameterSnapshot",
    "next_power_of_two",
    # Pipeline
    "BufferedProcess",
    "STFTBufferedProcess",
    # Processor
    "SpectralProcessor",
    "IdentitySpectralProcessor",
    "SpectralGainProcessor",
    "MagnitudeAnalyser",
]
