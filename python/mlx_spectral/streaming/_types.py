"""Core types for streaming spectral processing."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class ChannelRole(Enum):
    """Role a processor plays on the callback boundary.

    AUDIO_IN consumes analysis frames, AUDIO_OUT produces frames for
    resynthesis, CONTROL_OUT produces values that are not audio (e.g.
    analysis results read after each call).
    """

    AUDIO_IN = auto()
    AUDIO_OUT = auto()
    CONTROL_OUT = auto()


@dataclass
class ProcessStats:
    """Statistics for a streaming spectral process.

    Attributes:
        calls: Number of external process calls that carried input
        frames_processed: Number of hops (analysis frames) handled
        samples_processed: Total host samples pushed
        reallocations: Number of transform/buffer rebuilds
        host_size_changes: Number of times the host block size changed
    """

    calls: int = 0
    frames_processed: int = 0
    samples_processed: int = 0
    reallocations: int = 0
    host_size_changes: int = 0

    def reset(self) -> None:
        self.calls = 0
        self.frames_processed = 0
        self.samples_processed = 0
        self.reallocations = 0
        self.host_size_changes = 0
