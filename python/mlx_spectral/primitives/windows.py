"""
Window function table.

Coefficients come from ``scipy.signal.get_window`` in periodic form
(``fftbins=True``), which is what overlap-add analysis/resynthesis needs.
Tables are cached per (window, length) and handed out read-only; callers
that need to modify coefficients must copy them.
"""

from __future__ import annotations

from enum import Enum
from functools import lru_cache

import numpy as np
from scipy.signal import get_window as _scipy_get_window

from mlx_spectral.constants import WINDOW_CACHE_MAXSIZE
from mlx_spectral.exceptions import ConfigurationError

from ._validation import validate_positive


class WindowType(str, Enum):
    """Supported analysis/synthesis windows (values are scipy names)."""

    HANN = "hann"
    HAMMING = "hamming"
    BLACKMAN = "blackman"
    BLACKMAN_HARRIS = "blackmanharris"
    RECTANGULAR = "boxcar"

    @classmethod
    def parse(cls, window: str | WindowType) -> WindowType:
        """Accept a WindowType or its name, e.g. ``"hann"`` or ``"HANN"``."""
        if isinstance(window, WindowType):
            return window
        try:
            return cls(window.lower())
        except ValueError:
            pass
        try:
            return cls[window.upper()]
        except KeyError:
            raise ConfigurationError(
                f"Unknown window {window!r}. "
                f"Expected one of: {', '.join(w.value for w in cls)}"
            ) from None


@lru_cache(maxsize=WINDOW_CACHE_MAXSIZE)
def _cached_window(window: WindowType, length: int) -> np.ndarray:
    coefficients = np.asarray(
        _scipy_get_window(window.value, length, fftbins=True), dtype=np.float64
    )
    coefficients.flags.writeable = False
    return coefficients


def get_window(window: str | WindowType, length: int) -> np.ndarray:
    """
    Get periodic window coefficients.

    Parameters
    ----------
    window : str or WindowType
        Window type, e.g. ``"hann"``.
    length : int
        Number of coefficients.

    Returns
    -------
    np.ndarray
        Read-only float64 array of shape (length,).

    Raises
    ------
    ConfigurationError
        If the window type is unknown or ``length`` is not positive.
    """
    validate_positive(length, "window length")
    return _cached_window(WindowType.parse(window), int(length))


__all__ = [
    "WindowType",
    "get_window",
]
