"""Ring buffers bridging host block sizes and analysis frame sizes."""

from __future__ import annotations

from typing import Any

import numpy as np

from mlx_spectral.utils.conversion import as_channel_rows


class _FrameRing:
    """Multichannel circular storage shared by FrameSource and FrameSink.

    Capacity is ``size + host_buffer_size`` samples per channel: room for
    the largest frame plus one host block. Storage shape is
    [channels, capacity] and is only (re)allocated by ``reset``.
    """

    def __init__(self, size: int = 0, channels: int = 1, dtype: Any = np.float64) -> None:
        self._size = size
        self._channels = channels
        self._host_buffer_size = 0
        self._dtype = dtype
        self._counter = 0
        self._buffer = np.zeros((channels, size), dtype=dtype)

    @property
    def channels(self) -> int:
        return self._channels

    @property
    def size(self) -> int:
        """Largest frame this ring is sized for."""
        return self._size

    @property
    def host_buffer_size(self) -> int:
        return self._host_buffer_size

    @property
    def buffer_size(self) -> int:
        """Capacity in samples per channel."""
        return self._size + self._host_buffer_size

    @property
    def counter(self) -> int:
        """Current write (source) or read (sink) position."""
        return self._counter

    def set_size(self, size: int) -> None:
        """Set the largest frame size; takes effect at the next reset()."""
        self._size = size

    def set_host_buffer_size(self, size: int) -> None:
        """Set the host block size; takes effect at the next reset()."""
        self._host_buffer_size = size

    def reset(self, channels: int | None = None) -> None:
        """Zero the ring and rewind the cursor, reallocating only on a shape change."""
        if channels is not None:
            self._channels = channels
        shape = (self._channels, self.buffer_size)
        if self._buffer.shape != shape:
            self._buffer = np.zeros(shape, dtype=self._dtype)
        else:
            self._buffer.fill(0)
        self._counter = 0

    def _segments(self, start: int, length: int) -> tuple[tuple[slice, slice], ...]:
        """(ring slice, block slice) pairs covering ``length`` samples from ``start``."""
        capacity = self.buffer_size
        end = start + length
        if end <= capacity:
            return ((slice(start, end), slice(0, length)),)
        first = capacity - start
        return (
            (slice(start, capacity), slice(0, first)),
            (slice(0, end - capacity), slice(first, length)),
        )


class FrameSource(_FrameRing):
    """Ring buffer holding recent host input, read back as analysis frames.

    ``push`` appends one host block. ``pull`` copies the frame that ends
    ``frame_time`` samples after the start of the most recent host block,
    so frames can be taken at any hop regardless of host block boundaries.

    Args:
        size: Largest frame to be pulled
        channels: Number of audio channels
        dtype: Sample type (default: float64)

    Example:
        >>> source = FrameSource(size=1024, channels=2)
        >>> source.set_host_buffer_size(256)
        >>> source.reset()
        >>> source.push(block)              # [2, 256]
        >>> source.pull(frame, frame_time)  # frame: [2, 1024], written in place
    """

    def push(self, block: Any) -> None:
        """Append a host block of shape [channels, samples]."""
        rows = as_channel_rows(block)
        assert len(rows) == self._channels, "Channel count mismatch"
        length = len(rows[0])
        if length == 0:
            return
        assert length <= self.buffer_size, "Block larger than ring"

        start = self._counter
        for ring_part, block_part in self._segments(start, length):
            for channel in range(self._channels):
                self._buffer[channel, ring_part] = rows[channel][block_part]
        self._counter = (start + length) % self.buffer_size

    def pull(self, out: Any, frame_time: int) -> Any:
        """Copy the frame ending at ``frame_time`` within the latest host block.

        Args:
            out: Writable [channels, frame] array or View
            frame_time: Position in the latest host block, 0..host size

        Returns:
            ``out``
        """
        frame = np.asarray(out)
        assert frame.shape[0] == self._channels, "Channel count mismatch"
        length = frame.shape[1]
        capacity = self.buffer_size
        assert 0 < capacity and length <= capacity, "Frame larger than ring"
        assert 0 <= frame_time <= self._host_buffer_size, "frame_time out of range"

        start = (self._counter - self._host_buffer_size + frame_time - length) % capacity
        for ring_part, frame_part in self._segments(start, length):
            frame[:, frame_part] = self._buffer[:, ring_part]
        return out


class FrameSink(_FrameRing):
    """Ring buffer accumulating synthesized frames by overlap-add.

    ``push`` adds a frame at ``frame_time`` samples after the current read
    position; ``pull`` hands out one host block and clears it, so the next
    frames accumulate onto silence.

    Args:
        size: Largest frame to be pushed
        channels: Number of channels (including any gain track)
        dtype: Sample type (default: float64)
    """

    def push(self, frame: Any, frame_time: int) -> None:
        """Add a [channels, frame] block into the ring at ``frame_time``."""
        block = np.asarray(frame)
        assert block.shape[0] == self._channels, "Channel count mismatch"
        length = block.shape[1]
        capacity = self.buffer_size
        assert 0 < capacity and length <= capacity, "Frame larger than ring"

        start = (self._counter + frame_time) % capacity
        for ring_part, frame_part in self._segments(start, length):
            target = self._buffer[:, ring_part]
            np.add(target, block[:, frame_part], out=target)

    def pull(self, out: Any) -> Any:
        """Move the next host block out of the ring (and zero it).

        Only the first ``out.shape[0]`` channels are copied; every channel
        is cleared.

        Args:
            out: Writable [channels, samples] array or View

        Returns:
            ``out``
        """
        block = np.asarray(out)
        assert block.shape[0] <= self._channels, "Too many output channels"
        length = block.shape[1]
        capacity = self.buffer_size
        assert 0 < capacity and length <= capacity, "Block larger than ring"

        start = self._counter
        rows = block.shape[0]
        for ring_part, block_part in self._segments(start, length):
            block[:, block_part] = self._buffer[:rows, ring_part]
            self._buffer[:, ring_part] = 0
        self._counter = (start + length) % capacity
        return out


__all__ = [
    "FrameSource",
    "FrameSink",
]
