"""Base class and stock per-frame spectral processors."""

from __future__ import annotations

from abc import ABC, abstractmethod

import mlx.core as mx
import numpy as np

from mlx_spectral.tensor import Tensor, TensorBase

from ._types import ChannelRole


class SpectralProcessor(ABC):
    """Abstract base class for per-frame spectral processors.

    A processor is the callback handed to ``STFTBufferedProcess``. It
    declares the roles it plays on the callback boundary, which
    ``STFTBufferedProcess.run`` uses to pick between resynthesis and
    analysis-only processing.

    Subclasses must implement:
    - process_frame: Handle one [channels, bins] complex frame

    Example:
        >>> class Lowpass(SpectralProcessor):
        ...     def __init__(self, cutoff_bin):
        ...         self.cutoff_bin = cutoff_bin
        ...
        ...     def process_frame(self, spectrum_in, spectrum_out):
        ...         spectrum_out.assign(spectrum_in)
        ...         np.asarray(spectrum_out)[:, self.cutoff_bin :] = 0
    """

    roles: frozenset[ChannelRole] = frozenset(
        {ChannelRole.AUDIO_IN, ChannelRole.AUDIO_OUT}
    )

    @abstractmethod
    def process_frame(
        self, spectrum_in: TensorBase, spectrum_out: TensorBase | None
    ) -> None:
        """Process a single spectral frame.

        Called once per hop, from the audio path. Must not keep references
        to the Views beyond the call.

        Args:
            spectrum_in: Analysis bins with shape [channels_in, frame_size]
            spectrum_out: Bins to resynthesize with shape
                [channels_out, frame_size], zeroed on entry, or None for
                analysis-only processing
        """
        ...

    def __call__(
        self, spectrum_in: TensorBase, spectrum_out: TensorBase | None = None
    ) -> None:
        self.process_frame(spectrum_in, spectrum_out)


class IdentitySpectralProcessor(SpectralProcessor):
    """A pass-through processor that copies input bins to the output.

    Useful for testing pipelines without actual processing. Output
    channels beyond the input channels stay silent.
    """

    def process_frame(
        self, spectrum_in: TensorBase, spectrum_out: TensorBase | None
    ) -> None:
        spectrum_out.assign(spectrum_in)


class SpectralGainProcessor(SpectralProcessor):
    """Scales every bin by a constant gain.

    Args:
        gain: Gain factor (1.0 = unity, 0.5 = -6dB, 2.0 = +6dB)
    """

    def __init__(self, gain: float = 1.0) -> None:
        self._gain = gain

    def process_frame(
        self, spectrum_in: TensorBase, spectrum_out: TensorBase | None
    ) -> None:
        spectrum_out.assign(spectrum_in)
        bins = np.asarray(spectrum_out)
        np.multiply(bins, self._gain, out=bins)

    @property
    def gain(self) -> float:
        """Current gain value."""
        return self._gain

    @gain.setter
    def gain(self, value: float) -> None:
        self._gain = value


class MagnitudeAnalyser(SpectralProcessor):
    """Analysis-only processor keeping the magnitudes of the latest frame.

    The magnitude frame is preallocated and only reallocated when the
    frame size or channel count changes.

    Example:
        >>> analyser = MagnitudeAnalyser()
        >>> stft.run(analyser, params, block)
        >>> analyser.magnitudes.shape
        (1, 513)
    """

    roles = frozenset({ChannelRole.AUDIO_IN, ChannelRole.CONTROL_OUT})

    def __init__(self) -> None:
        self._magnitudes = Tensor(1, 0)
        self._frames = 0

    def process_frame(
        self, spectrum_in: TensorBase, spectrum_out: TensorBase | None = None
    ) -> None:
        if self._magnitudes.shape != spectrum_in.shape:
            self._magnitudes.resize(*spectrum_in.shape)
        np.abs(np.asarray(spectrum_in), out=np.asarray(self._magnitudes))
        self._frames += 1

    @property
    def magnitudes(self) -> Tensor:
        """Magnitudes of the most recent frame, [channels, frame_size]."""
        return self._magnitudes

    @property
    def frames(self) -> int:
        """Number of frames analysed so far."""
        return self._frames

    def to_mlx(self) -> mx.array:
        """Latest magnitudes as an mx.array."""
        return self._magnitudes.to_mlx()


__all__ = [
    "SpectralProcessor",
    "IdentitySpectralProcessor",
    "SpectralGainProcessor",
    "MagnitudeAnalyser",
]
