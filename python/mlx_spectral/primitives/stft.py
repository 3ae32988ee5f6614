"""
Frame-level STFT analysis and ISTFT resynthesis.

``STFT.process_frame`` windows one frame (zero-padded up to the FFT size)
and transforms it; ``ISTFT.process_frame`` inverts one bin-frame and
applies the synthesis window, ready to be overlap-added. Both keep their
window coefficients and scratch frame for their whole lifetime, so the
per-frame path does not allocate buffers. An analysis/synthesis pair
should be built with the same window length, otherwise overlap-add
reconstruction is not exact.

The batch ``process`` methods run the same frame transforms over a whole
signal, for offline use and for checking the streaming path.
"""

from __future__ import annotations

from typing import Any

import numpy as np

from mlx_spectral.constants import NOLA_TOLERANCE
from mlx_spectral.tensor import Tensor, TensorSlice, View

from .fft import FFT, IFFT
from .windows import WindowType, get_window


def check_nola(window: np.ndarray, hop_size: int, tol: float = NOLA_TOLERANCE) -> bool:
    """
    Check the nonzero overlap-add constraint for a window and hop.

    Parameters
    ----------
    window : np.ndarray
        Window coefficients (analysis and synthesis are assumed equal).
    hop_size : int
        Hop between frames in samples.
    tol : float
        Smallest acceptable summed window product.

    Returns
    -------
    bool
        True if every output position receives a summed squared window
        above ``tol`` in steady state.
    """
    squared = np.asarray(window, dtype=np.float64) ** 2
    padding = (-len(squared)) % hop_size
    padded = np.concatenate([squared, np.zeros(padding)])
    return bool(np.all(padded.reshape(-1, hop_size).sum(axis=0) > tol))


class _FrameTransform:
    def __init__(
        self,
        window_size: int,
        fft_size: int,
        hop_size: int,
        window: str | WindowType = WindowType.HANN,
    ) -> None:
        assert 0 < window_size <= fft_size, "Window must fit in the FFT"
        self._window_size = window_size
        self._fft_size = fft_size
        self._hop_size = hop_size
        self._window_type = WindowType.parse(window)
        self._window = get_window(self._window_type, window_size)
        self._frame = np.zeros(fft_size, dtype=np.float64)

    @property
    def window_size(self) -> int:
        return self._window_size

    @property
    def fft_size(self) -> int:
        return self._fft_size

    @property
    def hop_size(self) -> int:
        return self._hop_size

    @property
    def frame_size(self) -> int:
        return self._fft_size // 2 + 1

    @property
    def window_type(self) -> WindowType:
        return self._window_type

    def window(self) -> np.ndarray:
        """Read-only window coefficients (length ``window_size``)."""
        return self._window


class STFT(_FrameTransform):
    """
    Windowed forward transform of single frames.

    Parameters
    ----------
    window_size : int
        Frame length in samples.
    fft_size : int
        Transform length, a power of two >= ``window_size``.
    hop_size : int
        Frame advance, used by ``process``.
    window : str or WindowType, default='hann'
        Analysis window.
    """

    def __init__(
        self,
        window_size: int,
        fft_size: int,
        hop_size: int,
        window: str | WindowType = WindowType.HANN,
    ) -> None:
        super().__init__(window_size, fft_size, hop_size, window)
        self._fft = FFT(fft_size)

    def process_frame(self, frame: Any, output: Any) -> Any:
        """Window ``frame`` (``window_size`` samples) and write its bins to ``output``."""
        samples = np.asarray(frame)
        assert samples.shape[0] >= self._window_size, "Frame shorter than window"
        scratch = self._frame
        scratch[self._window_size :] = 0.0
        np.multiply(
            samples[: self._window_size],
            self._window,
            out=scratch[: self._window_size],
        )
        return self._fft.process(scratch, output)

    def process(self, signal: Any) -> Tensor:
        """
        Transform a whole signal.

        Frames are centred: the signal is padded by ``window_size // 2``
        zeros on each side before framing.

        Parameters
        ----------
        signal : array-like
            Mono signal of shape (samples,).

        Returns
        -------
        Tensor
            Complex spectrogram of shape (n_frames, frame_size).
        """
        samples = np.asarray(signal, dtype=np.float64)
        assert samples.ndim == 1, "process() expects a mono signal"
        pad = self._window_size // 2
        length = max(len(samples) + 2 * pad, self._window_size)
        padded = np.zeros(length, dtype=np.float64)
        padded[pad : pad + len(samples)] = samples

        n_frames = 1 + (length - self._window_size) // self._hop_size
        frames = View(
            TensorSlice(
                0,
                (n_frames, self._window_size),
                (self._hop_size, 1),
                n_frames * self._window_size,
            ),
            padded,
        )
        spectrogram = Tensor(n_frames, self.frame_size, dtype=np.complex128)
        for i in range(n_frames):
            self.process_frame(frames.row(i), spectrogram.row(i))
        return spectrogram


class ISTFT(_FrameTransform):
    """
    Inverse transform of single bin-frames, followed by the synthesis window.

    Parameters match ``STFT``; use the same values for a matched pair.
    """

    def __init__(
        self,
        window_size: int,
        fft_size: int,
        hop_size: int,
        window: str | WindowType = WindowType.HANN,
    ) -> None:
        super().__init__(window_size, fft_size, hop_size, window)
        self._ifft = IFFT(fft_size)

    def process_frame(self, spectrum: Any, output: Any) -> Any:
        """Invert ``spectrum`` and write the windowed first ``window_size`` samples."""
        self._ifft.process(spectrum, self._frame)
        out = np.asarray(output)
        np.multiply(
            self._frame[: self._window_size],
            self._window,
            out=out[: self._window_size],
        )
        return output

    def process(self, spectrogram: Any, length: int | None = None) -> Tensor:
        """
        Resynthesize a spectrogram produced by ``STFT.process``.

        Overlapping frames are summed and divided by the summed product of
        analysis and synthesis windows; positions with zero summed window
        are left as they are.

        Parameters
        ----------
        spectrogram : array-like
            Complex spectrogram of shape (n_frames, frame_size).
        length : int, optional
            Output length. Default: everything between the centring pads.

        Returns
        -------
        Tensor
            Signal of shape (length,).
        """
        frames = np.asarray(spectrogram)
        assert frames.ndim == 2 and frames.shape[1] == self.frame_size
        n_frames = frames.shape[0]
        pad = self._window_size // 2
        total = (n_frames - 1) * self._hop_size + self._window_size
        if length is None:
            length = max(total - 2 * pad, 0)

        output = np.zeros(max(total, pad + length), dtype=np.float64)
        gain = np.zeros_like(output)
        frame = np.zeros(self._window_size, dtype=np.float64)
        window_product = self._window * self._window
        for i in range(n_frames):
            start = i * self._hop_size
            end = start + self._window_size
            self.process_frame(frames[i], frame)
            output[start:end] += frame
            gain[start:end] += window_product

        np.divide(output, gain, out=output, where=gain != 0)
        return Tensor.from_array(output[pad : pad + length])


__all__ = [
    "STFT",
    "ISTFT",
    "check_nola",
]
