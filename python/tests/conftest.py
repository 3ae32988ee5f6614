"""Pytest configuration and fixtures for mlx-spectral tests."""

import numpy as np
import pytest

_TEST_SEED = 42


@pytest.fixture
def random_audio():
    """Random audio signal for testing."""
    rng = np.random.default_rng(_TEST_SEED)
    return rng.standard_normal(22050)


@pytest.fixture
def stereo_audio():
    """Random stereo audio for testing."""
    rng = np.random.default_rng(_TEST_SEED)
    return rng.standard_normal((2, 44100))
