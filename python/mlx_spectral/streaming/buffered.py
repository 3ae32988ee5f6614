"""
Streaming windowed processing over host blocks of any size.

``BufferedProcess`` turns a sequence of host blocks into frames at an
arbitrary hop: every call pushes one block into a FrameSource, pulls
frames while the frame cursor is inside that block, and overlap-adds the
processed frames into a FrameSink. The cursor carries over into the next
call, so hops never need to line up with host block boundaries.

``STFTBufferedProcess`` puts an STFT/ISTFT pair around a per-frame
spectral callback and normalizes the overlap-added output by the summed
window product, which it accumulates as one extra sink channel.

Both run in bounded time per call and only allocate when the host block
size or the FFT parameters change.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Any

import numpy as np

from mlx_spectral.constants import DEFAULT_CHANNELS, DEFAULT_MAX_FFT_SIZE
from mlx_spectral.exceptions import ConfigurationError
from mlx_spectral.primitives._validation import validate_positive, validate_power_of_two
from mlx_spectral.primitives.stft import ISTFT, STFT, check_nola
from mlx_spectral.tensor import ALL, Slice, Tensor, TensorBase, View
from mlx_spectral.utils.conversion import as_channel_rows

from ._types import ChannelRole, ProcessStats
from .buffer import FrameSink, FrameSource
from .params import FFTParams, ParameterSnapshot, ParameterTrackChanges

_logger = logging.getLogger(__name__)

FrameCallback = Callable[[View, View], Any]
SpectralCallback = Callable[[Tensor, View], Any]


class BufferedProcess:
    """Hop-driven frame loop between a FrameSource and a FrameSink.

    Call ``max_size`` once to allocate, ``set_host_size`` whenever the
    host block size changes, then per host block: ``push`` the input,
    ``process`` (or ``process_input``), and ``pull`` the output.

    Example:
        >>> bp = BufferedProcess()
        >>> bp.max_size(1024, channels_in=1, channels_out=1)
        >>> bp.set_host_size(256)
        >>> bp.push(block)
        >>> bp.process(1024, 256, lambda frame_in, frame_out: frame_out.assign(frame_in))
        >>> bp.pull(out)
    """

    def __init__(self) -> None:
        self._frame_time = 0
        self._host_size = 0
        self._frame_in = Tensor(1, 0)
        self._frame_out = Tensor(1, 0)
        self._source = FrameSource(0, 1)
        self._sink = FrameSink(0, 1)

    def max_size(self, frames: int, channels_in: int, channels_out: int) -> None:
        """Allocate rings and frame buffers for windows up to ``frames`` samples."""
        self._source.set_size(frames)
        self._source.reset(channels_in)
        self._sink.set_size(frames)
        self._sink.reset(channels_out)
        if self._frame_in.shape != (channels_in, frames):
            self._frame_in.resize(channels_in, frames)
        if self._frame_out.shape != (channels_out, frames):
            self._frame_out.resize(channels_out, frames)
        self._frame_time = 0
        _logger.debug(
            "Allocated buffers: frames=%d, channels_in=%d, channels_out=%d",
            frames,
            channels_in,
            channels_out,
        )

    @property
    def host_size(self) -> int:
        return self._host_size

    def set_host_size(self, size: int) -> None:
        """Set the host block size; clears both rings and rewinds the frame cursor."""
        self._host_size = size
        self._source.set_host_buffer_size(size)
        self._sink.set_host_buffer_size(size)
        self._source.reset()
        self._sink.reset()
        self._frame_time = 0

    @property
    def max_window_size(self) -> int:
        return self._frame_in.cols

    @property
    def frame_time(self) -> int:
        """Offset of the next frame boundary within the next host block."""
        return self._frame_time

    @property
    def channels_in(self) -> int:
        return self._source.channels

    @property
    def channels_out(self) -> int:
        return self._sink.channels

    def process(self, window_size: int, hop_size: int, func: FrameCallback) -> int:
        """Run ``func(frame_in, frame_out)`` on every frame in the current host block.

        Args:
            window_size: Frame length, at most ``max_window_size``
            hop_size: Frame advance in samples
            func: Called with [channels_in, window] input and
                [channels_out, window] output Views; the output View is
                overlap-added into the sink afterwards

        Returns:
            Number of frames processed
        """
        assert window_size <= self.max_window_size, "Window bigger than maximum"
        assert hop_size > 0, "Hop size must be positive"
        window_in = self._frame_in.slice(ALL, Slice(0, window_size))
        window_out = self._frame_out.slice(ALL, Slice(0, window_size))
        frames = 0
        while self._frame_time < self._host_size:
            self._source.pull(window_in, self._frame_time)
            window_out.fill(0.0)
            func(window_in, window_out)
            self._sink.push(window_out, self._frame_time)
            self._frame_time += hop_size
            frames += 1
        self._wrap_frame_time()
        return frames

    def process_input(
        self, window_size: int, hop_size: int, func: Callable[[View], Any]
    ) -> int:
        """Analysis-only variant of ``process``: ``func(frame_in)`` per frame."""
        assert window_size <= self.max_window_size, "Window bigger than maximum"
        assert hop_size > 0, "Hop size must be positive"
        window_in = self._frame_in.slice(ALL, Slice(0, window_size))
        frames = 0
        while self._frame_time < self._host_size:
            self._source.pull(window_in, self._frame_time)
            func(window_in)
            self._frame_time += hop_size
            frames += 1
        self._wrap_frame_time()
        return frames

    def push(self, block: Any) -> None:
        """Append a [channels_in, host_size] block to the source."""
        self._source.push(block)

    def pull(self, out: Any) -> Any:
        """Move the next host block of overlap-added output into ``out``."""
        return self._sink.pull(out)

    def _wrap_frame_time(self) -> None:
        if self._frame_time >= self._host_size:
            self._frame_time -= self._host_size


class STFTBufferedProcess:
    """Streaming STFT -> spectral callback -> ISTFT with overlap-add.

    Output lags input by ``window_size`` samples. With ``normalise`` on,
    every output sample is divided by the summed product of analysis and
    synthesis windows that overlapped it (samples with zero summed gain
    are left as they are), which gives unity gain for any window/hop pair
    that satisfies constant overlap-add.

    FFT parameters are read once per call, from an FFTParams or a
    ParameterSnapshot. A change in window size, hop, FFT size or window
    type rebuilds the transforms before that call's first frame; energy
    already overlap-added with the old window is not corrected.

    Args:
        max_fft_size: Largest FFT (and window) size that will be used
        channels_in: Number of input channels
        channels_out: Number of output channels
        normalise: Divide the output by the accumulated window product

    Example:
        >>> stft = STFTBufferedProcess(4096, channels_in=1, channels_out=1)
        >>> params = FFTParams(window_size=1024, hop_size=256)
        >>> def callback(spectrum_in, spectrum_out):
        ...     spectrum_out.assign(spectrum_in)
        >>> for block in blocks:
        ...     out = stft.process(params, block, None, callback)
    """

    def __init__(
        self,
        max_fft_size: int = DEFAULT_MAX_FFT_SIZE,
        channels_in: int = DEFAULT_CHANNELS,
        channels_out: int = DEFAULT_CHANNELS,
        *,
        normalise: bool = True,
    ) -> None:
        validate_power_of_two(max_fft_size, "max_fft_size")
        validate_positive(channels_in, "channels_in")
        if channels_out < 0:
            raise ConfigurationError(
                f"channels_out must be non-negative, got {channels_out}"
            )

        self._max_fft_size = max_fft_size
        self._channels_out = channels_out
        self._normalise = normalise
        self._buffered = BufferedProcess()
        self._buffered.max_size(max_fft_size, channels_in, channels_out + normalise)

        self._track_values = ParameterTrackChanges()
        self._track_host_size = ParameterTrackChanges()
        self._stft: STFT | None = None
        self._istft: ISTFT | None = None
        self._window_product = np.zeros(0)
        self._params: FFTParams | None = None

        self._spectrum_in = Tensor(channels_in, 0, dtype=np.complex128)
        self._spectrum_out = Tensor(channels_out, 0, dtype=np.complex128)
        self._frame_and_window = Tensor(channels_out + normalise, 0)
        self.stats = ProcessStats()

    # ------------------------------------------------------------------
    # Properties

    @property
    def channels_in(self) -> int:
        return self._buffered.channels_in

    @property
    def channels_out(self) -> int:
        """Number of audio output channels (excluding the gain track)."""
        return self._channels_out

    @property
    def max_fft_size(self) -> int:
        return self._max_fft_size

    @property
    def normalise(self) -> bool:
        return self._normalise

    @property
    def params(self) -> FFTParams | None:
        """Parameters used by the most recent call."""
        return self._params

    @property
    def latency(self) -> int:
        """Delay in samples between input and output (the window size)."""
        return self._params.window_size if self._params is not None else 0

    @property
    def roles(self) -> frozenset[ChannelRole]:
        """Roles this pipeline can serve on the callback boundary."""
        roles = {ChannelRole.AUDIO_IN, ChannelRole.CONTROL_OUT}
        if self._channels_out:
            roles.add(ChannelRole.AUDIO_OUT)
        return frozenset(roles)

    # ------------------------------------------------------------------
    # Processing

    def process(
        self,
        params: FFTParams | ParameterSnapshot,
        input: Any,
        output: Any,
        callback: SpectralCallback,
    ) -> View | None:
        """Process one host block through analysis, ``callback`` and resynthesis.

        Args:
            params: FFT parameters, or a snapshot read once for this call
            input: [channels_in, samples] block (numpy, mx.array, or a
                sequence of per-channel rows). ``None``, an empty block, or a
                sequence whose first row is ``None`` is a no-op.
            output: Writable [channels_out, samples] numpy array or View, a
                sequence of such per-channel rows (``None`` entries are
                skipped), or ``None``. mx.arrays are immutable and are not
                accepted as output targets.
            callback: ``callback(spectrum_in, spectrum_out)`` per frame;
                ``spectrum_in`` is [channels_in, frame_size] complex and
                ``spectrum_out`` is [channels_out, frame_size] complex,
                zeroed before each call

        Returns:
            View of the output block, valid until the next call, or None
            for a no-op call
        """
        rows = self._rows(input)
        if rows is None:
            return None

        fft_params = self._setup(params, rows)
        chans_in = self.channels_in
        chans_out = self._channels_out
        host = self._buffered.host_size
        stft, istft = self._stft, self._istft
        spectrum_in = self._spectrum_in
        spectrum_out = self._spectrum_out.view()
        window_product = self._window_product
        normalise = self._normalise

        def frame(frame_in: View, frame_out: View) -> None:
            for i in range(chans_in):
                stft.process_frame(frame_in.row(i), spectrum_in.row(i))
            spectrum_out.fill(0.0)
            callback(spectrum_in, spectrum_out)
            for i in range(chans_out):
                istft.process_frame(spectrum_out.row(i), frame_out.row(i))
            if normalise:
                frame_out.row(chans_out).assign(window_product)

        frames = self._buffered.process(fft_params.window_size, fft_params.hop_size, frame)
        self.stats.frames_processed += frames

        block = self._frame_and_window.slice(ALL, Slice(0, host))
        if self._buffered.channels_out:
            self._buffered.pull(block)
        audio = block.slice(Slice(0, chans_out), ALL)
        if normalise:
            gain = np.asarray(block.row(chans_out))
            samples = np.asarray(audio)
            np.divide(samples, gain, out=samples, where=gain != 0)
        self._write_outputs(output, audio)
        return audio

    def process_input(
        self,
        params: FFTParams | ParameterSnapshot,
        input: Any,
        callback: Callable[[Tensor], Any],
    ) -> int:
        """Analysis only: ``callback(spectrum_in)`` per frame, nothing resynthesized.

        Returns:
            Number of frames analysed (0 for a no-op call)
        """
        rows = self._rows(input)
        if rows is None:
            return 0

        fft_params = self._setup(params, rows)
        chans_in = self.channels_in
        stft = self._stft
        spectrum_in = self._spectrum_in

        def frame(frame_in: View) -> None:
            for i in range(chans_in):
                stft.process_frame(frame_in.row(i), spectrum_in.row(i))
            callback(spectrum_in)

        frames = self._buffered.process_input(
            fft_params.window_size, fft_params.hop_size, frame
        )
        self.stats.frames_processed += frames
        return frames

    def run(
        self,
        processor: Any,
        params: FFTParams | ParameterSnapshot,
        input: Any,
        output: Any = None,
    ) -> Any:
        """Dispatch on the processor's roles.

        Processors producing audio (AUDIO_OUT) run through ``process``;
        analysis-only processors (AUDIO_IN without AUDIO_OUT) run through
        ``process_input``.

        Raises:
            ConfigurationError: If the pipeline cannot serve the roles
        """
        roles = frozenset(processor.roles)
        missing = roles - self.roles
        if missing:
            names = ", ".join(sorted(role.name for role in missing))
            raise ConfigurationError(f"Pipeline cannot serve processor roles: {names}")
        if ChannelRole.AUDIO_IN not in roles:
            raise ConfigurationError("Spectral processors must consume AUDIO_IN frames")
        if ChannelRole.AUDIO_OUT in roles:
            return self.process(params, input, output, processor)
        return self.process_input(params, input, processor)

    def reset(self) -> None:
        """Clear buffered audio and force a rebuild on the next call."""
        self._buffered.max_size(
            self._max_fft_size,
            self.channels_in,
            self._channels_out + self._normalise,
        )
        self._track_values.reset()
        self._track_host_size.reset()
        self._params = None

    # ------------------------------------------------------------------
    # Internals

    def _rows(self, input: Any) -> Any:
        if input is None:
            return None
        rows = as_channel_rows(input)
        if len(rows) == 0 or rows[0].ndim == 0 or len(rows[0]) == 0:
            return None
        assert len(rows) == self.channels_in, "Input channel count mismatch"
        return rows

    def _setup(self, params: FFTParams | ParameterSnapshot, rows: Any) -> FFTParams:
        if isinstance(params, ParameterSnapshot):
            params, _ = params.read()
        assert params.fft_size <= self._max_fft_size, "FFT bigger than maximum"

        host = len(rows[0])
        if self._track_host_size.changed(host):
            _logger.debug("Host block size set to %d", host)
            self._buffered.set_host_size(host)
            self.stats.host_size_changes += 1

        changed = self._track_values.changed(
            params.window_size, params.hop_size, params.fft_size, params.window
        )
        if changed or self._stft is None:
            self._rebuild(params)

        frame_size = params.frame_size
        if self._spectrum_in.cols != frame_size:
            self._spectrum_in.resize(self.channels_in, frame_size)
        if self._spectrum_out.cols != frame_size:
            self._spectrum_out.resize(self._channels_out, frame_size)
        width = max(self._buffered.max_window_size, host)
        if width > self._frame_and_window.cols:
            self._frame_and_window.resize(self._frame_and_window.rows, width)

        self._buffered.push(rows)
        self._params = params
        self.stats.calls += 1
        self.stats.samples_processed += host
        return params

    def _rebuild(self, params: FFTParams) -> None:
        window_size, fft_size, hop_size = params.window_size, params.fft_size, params.hop_size
        self._stft = STFT(window_size, fft_size, hop_size, params.window)
        self._istft = ISTFT(window_size, fft_size, hop_size, params.window)
        self._window_product = self._stft.window() * self._istft.window()
        self.stats.reallocations += 1
        _logger.debug(
            "Rebuilt STFT: window=%d, hop=%d, fft=%d, window_type=%s",
            window_size,
            hop_size,
            fft_size,
            params.window.value,
        )
        if self._normalise and not check_nola(self._stft.window(), hop_size):
            _logger.warning(
                "Window %s of %d samples with hop %d violates NOLA; "
                "some output samples will not be normalised",
                params.window.value,
                window_size,
                hop_size,
            )

    def _write_outputs(self, output: Any, block: View) -> None:
        if output is None:
            return
        if isinstance(output, Sequence):
            assert len(output) == self._channels_out, "Output channel count mismatch"
            for i, target in enumerate(output):
                if target is not None:
                    _writable(target)[...] = block.row(i)
            return
        target = _writable(output)
        if target.ndim == 1:
            target = target[np.newaxis, :]
        assert target.shape[0] == self._channels_out, "Output channel count mismatch"
        target[...] = block


def _writable(target: Any) -> np.ndarray:
    # np.asarray would copy an mx.array or a list, losing the write.
    assert isinstance(target, (np.ndarray, TensorBase)), (
        "Output targets must be numpy arrays or Views"
    )
    array = np.asarray(target)
    assert array.flags.writeable, "Output target is read-only"
    return array


__all__ = [
    "BufferedProcess",
    "STFTBufferedProcess",
]
