"""Windowing of arbitrary audio chunks into fixed-length frames."""

from typing import ClassVar, List

import numpy as np

from ..logger import get_logger

logger = get_logger(__name__)


class FrameBuffer:
    """Accumulates audio chunks and hands out complete, non-overlapping frames.

    Samples that do not yet fill a frame are kept for the next push. Chunks
    with more than one channel are reduced to their first channel.
    """

    FRAME_SIZE: ClassVar[int] = 2048

    def __init__(self, frame_size: int = FRAME_SIZE) -> None:
        if frame_size <= 0:
            raise ValueError(f"Frame size must be positive, got {frame_size}")
        self._frame_size = int(frame_size)
        self._pending = np.zeros(0, dtype=np.float32)

    @property
    def frame_size(self) -> int:
        return self._frame_size

    @property
    def pending(self) -> int:
        """Number of samples waiting for the next frame."""
        return len(self._pending)

    def push(self, chunk: np.ndarray) -> List[np.ndarray]:
        """Add a chunk and return every frame it completes.

        Args:
            chunk: Samples shaped (n,) or (n, channels)

        Returns:
            List of 1-D float32 arrays of exactly frame_size samples
        """
        chunk = np.asarray(chunk, dtype=np.float32)
        if chunk.ndim > 1:
            chunk = chunk[:, 0]

        data = np.concatenate([self._pending, chunk])
        n_frames = len(data) // self._frame_size
        frames = [
            data[i * self._frame_size : (i + 1) * self._frame_size].copy()
            for i in range(n_frames)
        ]
        self._pending = data[n_frames * self._frame_size :].copy()
        return frames

    def clear(self) -> None:
        """Drop any pending samples."""
        self._pending = np.zeros(0, dtype=np.float32)
