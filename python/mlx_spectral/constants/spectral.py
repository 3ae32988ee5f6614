"""Window and overlap-add constants."""

from __future__ import annotations

DEFAULT_WINDOW = "hann"
"""Default window function for analysis and synthesis."""

WINDOW_CACHE_MAXSIZE = 32
"""Number of (window, length) coefficient tables kept in memory."""

NOLA_TOLERANCE = 1e-10
"""Smallest summed window product still treated as non-zero by check_nola."""

__all__ = [
    "DEFAULT_WINDOW",
    "WINDOW_CACHE_MAXSIZE",
    "NOLA_TOLERANCE",
]
