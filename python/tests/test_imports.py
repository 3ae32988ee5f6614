"""Basic import tests for mlx-spectral."""


def test_version():
    """Test version is accessible."""
    from mlx_spectral import __version__

    assert __version__ == "0.1.0"


def test_tensor_imports():
    """Test tensor module imports."""
    from mlx_spectral.tensor import ALL, Slice, Tensor, TensorSlice, View

    assert Tensor is not None
    assert View is not None
    assert TensorSlice is not None
    assert isinstance(ALL, Slice)


def test_primitives_imports():
    """Test primitives module imports."""
    from mlx_spectral.primitives import FFT, IFFT, ISTFT, STFT, check_nola, get_window

    assert FFT is not None
    assert IFFT is not None
    assert STFT is not None
    assert ISTFT is not None
    assert callable(check_nola)
    assert callable(get_window)


def test_streaming_imports():
    """Test streaming module imports."""
    from mlx_spectral.streaming import (
        BufferedProcess,
        FFTParams,
        FrameSink,
        FrameSource,
        STFTBufferedProcess,
    )

    assert BufferedProcess is not None
    assert STFTBufferedProcess is not None
    assert FrameSource is not None
    assert FrameSink is not None
    assert FFTParams is not None


def test_exceptions_hierarchy():
    """Test all package errors derive from the base error."""
    from mlx_spectral import ConfigurationError, MLXSpectralError

    assert issubclass(ConfigurationError, MLXSpectralError)


def test_top_level_exports():
    """Test the top-level namespace re-exports the main entry points."""
    import mlx_spectral

    for name in mlx_spectral.__all__:
        assert hasattr(mlx_spectral, name), name
