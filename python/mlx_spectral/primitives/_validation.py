"""Parameter validation helpers shared by the primitives and pipeline setup."""

from __future__ import annotations

from mlx_spectral.exceptions import ConfigurationError


def validate_positive(value: int, name: str) -> None:
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {value}")


def validate_power_of_two(value: int, name: str) -> None:
    """Raise unless ``value`` is a power of two of at least 2."""
    if value < 2 or value & (value - 1):
        raise ConfigurationError(f"{name} must be a power of two >= 2, got {value}")


def validate_at_least(value: int, minimum: int, name: str, other: str) -> None:
    if value < minimum:
        raise ConfigurationError(
            f"{name} ({value}) must be >= {other} ({minimum})"
        )


__all__ = [
    "validate_positive",
    "validate_power_of_two",
    "validate_at_least",
]
