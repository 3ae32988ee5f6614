"""mlx-spectral: strided tensors and streaming spectral processing.

A small numerical-audio substrate: an owning/non-owning strided array
pair for addressing sample data without copying, and a streaming
STFT -> per-frame callback -> ISTFT pipeline with normalized overlap-add
that runs in bounded time per host block. MLX arrays are accepted and
produced at every boundary.

Quick Start:
    >>> import numpy as np
    >>> from mlx_spectral import FFTParams, STFTBufferedProcess, IdentitySpectralProcessor
    >>> stft = STFTBufferedProcess(max_fft_size=2048, channels_in=1, channels_out=1)
    >>> params = FFTParams(window_size=1024, hop_size=256)
    >>> out = stft.run(IdentitySpectralProcessor(), params, np.random.randn(1, 512))

Submodules:
    - mlx_spectral.tensor: Descriptors, Slice specs, View and Tensor
    - mlx_spectral.primitives: Windows, split-format FFT, STFT/ISTFT
    - mlx_spectral.streaming: Ring buffers, parameters, buffered processes
"""

from mlx_spectral._version import __version__
from mlx_spectral.exceptions import ConfigurationError, MLXSpectralError
from mlx_spectral.primitives import FFT, IFFT, ISTFT, STFT, WindowType, get_window
from mlx_spectral.streaming import (
    BufferedProcess,
    ChannelRole,
    FFTParams,
    IdentitySpectralProcessor,
    MagnitudeAnalyser,
    ParameterSnapshot,
    SpectralGainProcessor,
    SpectralProcessor,
    STFTBufferedProcess,
)
from mlx_spectral.tensor import ALL, Slice, Tensor, View

__all__ = [
    "__version__",
    # Errors
    "MLXSpectralError",
    "ConfigurationError",
    # Tensors
    "Tensor",
    "View",
    "Slice",
    "ALL",
    # Primitives
    "FFT",
    "IFFT",
    "STFT",
    "ISTFT",
    "WindowType",
    "get_window",
    # Streaming
    "FFTParams",
    "ParameterSnapshot",
    "BufferedProcess",
    "STFTBufferedProcess",
    "ChannelRole",
    "SpectralProcessor",
    "IdentitySpectralProcessor",
    "SpectralGainProcessor",
    "MagnitudeAnalyser",
]
