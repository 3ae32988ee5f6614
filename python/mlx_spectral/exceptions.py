"""Custom exception hierarchy for mlx-spectral.

All mlx-spectral specific exceptions inherit from MLXSpectralError,
making it easy to catch any library-specific error.

Only configuration mistakes made while setting a pipeline up are reported
as exceptions. Precondition violations on the per-frame path (bad indices,
oversized windows, channel mismatches) are assertions.
"""

from __future__ import annotations


class MLXSpectralError(Exception):
    """Base exception for all mlx-spectral errors.

    Example:
        try:
            params = FFTParams(window_size=1024, fft_size=1000)
        except MLXSpectralError as e:
            print(f"mlx-spectral error: {e}")
    """

    pass


class ConfigurationError(MLXSpectralError):
    """Invalid transform or pipeline configuration.

    Raised when:
        - FFT parameters are out of valid range
        - The FFT size is not a power of two, or is smaller than the window
        - A window type is unknown
        - A processor asks for channel roles the pipeline cannot serve
    """

    pass


__all__ = [
    "MLXSpectralError",
    "ConfigurationError",
]
