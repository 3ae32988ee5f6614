"""
Spectral primitives: windows, split-format FFT and frame transforms.

Core Operations
---------------
FFT : Real forward FFT producing size // 2 + 1 complex bins
IFFT : Inverse of FFT, scaled so IFFT(FFT(x)) == x
STFT : Windowed analysis of single frames (and whole signals)
ISTFT : Windowed resynthesis of single bin-frames (and spectrograms)
check_nola : Check the nonzero overlap-add constraint

Window Functions
----------------
get_window : Periodic window coefficients, cached and read-only
WindowType : Supported window names

Kernel
------
RealFFTKernel : Native split-complex real FFT (Nyquist folded into imag[0])
SplitComplex : Owned real/imaginary buffer pair used by the kernel
"""

from __future__ import annotations

from .fft import FFT, IFFT, RealFFTKernel, SplitComplex
from .stft import ISTFT, STFT, check_nola
from .windows import WindowType, get_window

__all__ = [
    # Transforms
    "FFT",
    "IFFT",
    "STFT",
    "ISTFT",
    "check_nola",
    # Windows
    "get_window",
    "WindowType",
    # Kernel
    "RealFFTKernel",
    "SplitComplex",
]
