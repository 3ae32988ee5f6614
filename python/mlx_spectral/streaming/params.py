"""FFT parameters, change detection, and cross-thread publication."""

from __future__ import annotations

import dataclasses
import threading
from dataclasses import dataclass
from typing import Any

from mlx_spectral.constants import DEFAULT_WINDOW, DEFAULT_WINDOW_SIZE
from mlx_spectral.primitives._validation import (
    validate_at_least,
    validate_positive,
    validate_power_of_two,
)
from mlx_spectral.primitives.windows import WindowType


def next_power_of_two(value: int) -> int:
    """Smallest power of two >= ``value`` (and >= 2)."""
    return max(2, 1 << (int(value) - 1).bit_length())


@dataclass(frozen=True)
class FFTParams:
    """Window, hop and transform sizes for a spectral process.

    Attributes:
        window_size: Analysis/synthesis window length in samples
        hop_size: Frame advance in samples (default: window_size // 2)
        fft_size: Transform length, a power of two >= window_size
            (default: next power of two >= window_size)
        window: Window type (default: Hann)

    Example:
        >>> params = FFTParams(window_size=1000)
        >>> params.hop_size, params.fft_size, params.frame_size
        (500, 1024, 513)
    """

    window_size: int = DEFAULT_WINDOW_SIZE
    hop_size: int | None = None
    fft_size: int | None = None
    window: WindowType | str = DEFAULT_WINDOW

    def __post_init__(self) -> None:
        validate_positive(self.window_size, "window_size")
        if self.hop_size is None:
            object.__setattr__(self, "hop_size", max(1, self.window_size // 2))
        if self.fft_size is None:
            object.__setattr__(self, "fft_size", next_power_of_two(self.window_size))
        object.__setattr__(self, "window", WindowType.parse(self.window))

        validate_positive(self.hop_size, "hop_size")
        validate_power_of_two(self.fft_size, "fft_size")
        validate_at_least(self.fft_size, self.window_size, "fft_size", "window_size")

    @property
    def frame_size(self) -> int:
        """Number of complex bins per frame."""
        return self.fft_size // 2 + 1

    def replace(self, **changes: Any) -> FFTParams:
        """Validated copy with some fields changed.

        Derived defaults are recomputed when ``window_size`` changes and
        the dependent field is not given.
        """
        if "window_size" in changes:
            changes.setdefault("hop_size", None)
            changes.setdefault("fft_size", None)
        return dataclasses.replace(self, **changes)


class ParameterTrackChanges:
    """Remembers the last observed values and reports when they differ.

    Example:
        >>> tracker = ParameterTrackChanges()
        >>> tracker.changed(1024, 512)
        True
        >>> tracker.changed(1024, 512)
        False
    """

    def __init__(self) -> None:
        self._values: tuple[Any, ...] | None = None

    def changed(self, *values: Any) -> bool:
        """True on first observation or if any value differs; records ``values``."""
        if values == self._values:
            return False
        self._values = values
        return True

    def reset(self) -> None:
        """Forget the recorded values so the next observation counts as a change."""
        self._values = None


class ParameterSnapshot:
    """Lock-protected FFTParams shared between a control thread and the audio path.

    Writers ``publish`` (or ``update``) a complete FFTParams; the audio path
    ``read``s exactly one snapshot per process call, so a call never sees a
    half-applied change. Each publication bumps ``version``.

    Args:
        params: Initial parameters (default: FFTParams())
    """

    def __init__(self, params: FFTParams | None = None) -> None:
        self._lock = threading.Lock()
        self._params = params if params is not None else FFTParams()
        self._version = 0

    def publish(self, params: FFTParams) -> int:
        """Replace the parameters; returns the new version."""
        with self._lock:
            self._params = params
            self._version += 1
            return self._version

    def update(self, **changes: Any) -> int:
        """Publish a copy of the current parameters with ``changes`` applied.

        Raises:
            ConfigurationError: If the resulting parameters are invalid
        """
        with self._lock:
            self._params = self._params.replace(**changes)
            self._version += 1
            return self._version

    def read(self) -> tuple[FFTParams, int]:
        """Current (params, version) pair."""
        with self._lock:
            return self._params, self._version

    @property
    def params(self) -> FFTParams:
        return self.read()[0]

    @property
    def version(self) -> int:
        with self._lock:
            return self._version


__all__ = [
    "FFTParams",
    "ParameterTrackChanges",
    "ParameterSnapshot",
    "next_power_of_two",
]
