"""
Power-of-two real FFT with split real/imaginary packing.

Two layers live here:

``RealFFTKernel``
    The native kernel. A real input of length ``n`` is transformed with a
    half-length complex FFT (even samples as real part, odd samples as
    imaginary part) and a twiddle post-pass. Its output is the packed
    split-complex form: ``n/2`` real parts and ``n/2`` imaginary parts,
    where the imaginary slot of bin 0 carries the (purely real) Nyquist
    bin. The inverse consumes the same packing.

``FFT`` / ``IFFT``
    The adapter everything else uses. It unpacks the kernel output into
    ``n/2 + 1`` ordinary complex bins (Nyquist moved from ``imag[0]`` to
    ``real[n/2]``, both ``imag[0]`` and ``imag[n/2]`` zeroed), and folds
    ``real[n/2]`` back into ``imag[0]`` before running the inverse kernel.

The inverse is scaled by ``1/n``, so ``IFFT(FFT(x)) == x``.
"""

from __future__ import annotations

from typing import Any

import numpy as np

from mlx_spectral.constants import MIN_FFT_SIZE


class SplitComplex:
    """Separate real and imaginary arrays backed by one owned buffer.

    Both arrays hold ``length`` float64 values. The buffer is allocated once
    and released with the object.
    """

    def __init__(self, length: int) -> None:
        self._storage = np.zeros((2, length), dtype=np.float64)
        self.realp = self._storage[0]
        self.imagp = self._storage[1]

    def __len__(self) -> int:
        return self._storage.shape[1]

    def clear(self) -> None:
        self._storage.fill(0.0)


class RealFFTKernel:
    """
    Split-format real FFT kernel for a fixed power-of-two size.

    Parameters
    ----------
    size : int
        Transform length ``n``; a power of two, at least 2.
    """

    def __init__(self, size: int) -> None:
        assert size >= MIN_FFT_SIZE and not size & (size - 1), (
            "FFT size must be a power of two"
        )
        half = size // 2
        self._size = size
        self._half = half
        bins = np.arange(half)
        self._twiddle = np.exp(-2j * np.pi * bins / size)
        self._mirror = (-bins) % half
        self._reverse = half - bins
        self._packed = np.zeros(half, dtype=np.complex128)
        self._full = np.zeros(half + 1, dtype=np.complex128)

    @property
    def size(self) -> int:
        return self._size

    def forward(self, x: np.ndarray, split: SplitComplex) -> None:
        """Transform ``size`` real samples into packed ``split[:size/2]``."""
        assert x.shape == (self._size,), "Input length must equal FFT size"
        half = self._half
        packed = self._packed
        packed.real[:] = x[0::2]
        packed.imag[:] = x[1::2]
        spectrum = np.fft.fft(packed)

        mirrored = np.conj(spectrum[self._mirror])
        even = 0.5 * (spectrum + mirrored)
        odd = -0.5j * (spectrum - mirrored)
        bins = even + self._twiddle * odd

        split.realp[:half] = bins.real
        split.imagp[:half] = bins.imag
        dc = spectrum[0]
        split.realp[0] = dc.real + dc.imag
        split.imagp[0] = dc.real - dc.imag

    def inverse(self, split: SplitComplex, out: np.ndarray) -> None:
        """Transform packed ``split[:size/2]`` into ``size`` real samples."""
        assert out.shape == (self._size,), "Output length must equal FFT size"
        half = self._half
        full = self._full
        full.real[:half] = split.realp[:half]
        full.imag[:half] = split.imagp[:half]
        full[0] = split.realp[0]
        full[half] = split.imagp[0]

        head = full[:half]
        mirrored = np.conj(full[self._reverse])
        even = 0.5 * (head + mirrored)
        odd = 0.5 * (head - mirrored) * np.conj(self._twiddle)
        samples = np.fft.ifft(even + 1j * odd)

        out[0::2] = samples.real
        out[1::2] = samples.imag


class FFT:
    """
    Forward real FFT producing ``size // 2 + 1`` complex bins.

    Parameters
    ----------
    size : int
        Transform length; a power of two, at least 2.

    Examples
    --------
    >>> fft = FFT(8)
    >>> bins = np.zeros(fft.frame_size, dtype=np.complex128)
    >>> fft.process(np.array([1.0, 0, 0, 0, 0, 0, 0, 0]), bins)
    >>> bins.real
    array([1., 1., 1., 1., 1.])
    """

    def __init__(self, size: int) -> None:
        self._kernel = RealFFTKernel(size)
        self._size = size
        self._frame_size = size // 2 + 1
        self._split = SplitComplex(self._frame_size)

    @property
    def size(self) -> int:
        return self._size

    @property
    def frame_size(self) -> int:
        """Number of complex bins, ``size // 2 + 1``."""
        return self._frame_size

    def process(self, input: Any, output: Any) -> Any:
        """Transform real ``input`` (length ``size``) into complex ``output``.

        ``output`` must be writable with ``frame_size`` complex elements;
        numpy arrays and Views are written in place.
        """
        split = self._split
        self._kernel.forward(np.asarray(input), split)
        last = self._frame_size - 1
        split.realp[last] = split.imagp[0]
        split.imagp[last] = 0.0
        split.imagp[0] = 0.0

        out = np.asarray(output)
        assert out.shape == (self._frame_size,), "Output must hold frame_size bins"
        out.real[...] = split.realp
        out.imag[...] = split.imagp
        return output


class IFFT(FFT):
    """Inverse of ``FFT``: ``size // 2 + 1`` complex bins to ``size`` real samples."""

    def process(self, input: Any, output: Any) -> Any:
        """Transform complex ``input`` into real ``output`` (written in place)."""
        spectrum = np.asarray(input)
        assert spectrum.shape == (self._frame_size,), "Input must hold frame_size bins"
        split = self._split
        split.realp[:] = spectrum.real
        split.imagp[:] = spectrum.imag
        split.imagp[0] = split.realp[self._frame_size - 1]
        self._kernel.inverse(split, np.asarray(output))
        return output


__all__ = [
    "SplitComplex",
    "RealFFTKernel",
    "FFT",
    "IFFT",
]
