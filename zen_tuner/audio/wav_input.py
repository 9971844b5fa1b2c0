"""Frame source that reads audio from a sound file."""

from __future__ import annotations

import threading
import time
from typing import Callable, Iterator, Optional

import soundfile as sf

from ..core.interfaces import IFrameSource
from ..logger import get_logger
from ..note_types import Frame
from .frame_buffer import FrameBuffer

logger = get_logger(__name__)


class WavFileInput(IFrameSource):
    """Provides frames by reading from a WAV (or any libsndfile) file."""

    def __init__(
        self,
        file_path: str,
        frame_size: int = FrameBuffer.FRAME_SIZE,
        gain: float = 1.0,
        realtime: bool = False,
    ) -> None:
        """Initialize the file input.

        Args:
            file_path: Path of the sound file
            frame_size: Samples per frame
            gain: Linear gain applied to every sample
            realtime: If True, pace delivery at the file's sample rate when streaming
        """
        if frame_size <= 0:
            raise ValueError(f"Frame size must be positive, got {frame_size}")

        self._file_path = file_path
        self._frame_size = int(frame_size)
        self._gain = float(gain)
        self._realtime = realtime
        self._running = False
        self._thread: Optional[threading.Thread] = None

        with sf.SoundFile(self._file_path) as f:
            self._sample_rate = f.samplerate
            self._channels = f.channels

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def channels(self) -> int:
        return self._channels

    def frames(self) -> Iterator[Frame]:
        """Yield consecutive frames of the file; a trailing partial frame is dropped."""
        buffer = FrameBuffer(self._frame_size)
        with sf.SoundFile(self._file_path) as f:
            for block in f.blocks(blocksize=self._frame_size, dtype="float32", always_2d=True):
                if self._gain != 1.0:
                    block = block * self._gain
                for samples in buffer.push(block):
                    yield Frame(samples, self._sample_rate)

    def start(self, callback: Callable[[Frame], None]) -> bool:
        """Stream the file's frames to the callback on a worker thread."""
        if self._running:
            logger.warning("File input already running")
            return True

        self._running = True
        self._thread = threading.Thread(
            target=self._stream_frames, args=(callback,), daemon=True
        )
        self._thread.start()
        logger.info(f"Streaming frames from {self._file_path}")
        return True

    def stop(self) -> None:
        self._running = False
        if self._thread and self._thread is not threading.current_thread():
            self._thread.join()
        self._thread = None

    def is_running(self) -> bool:
        return self._running

    def wait(self, timeout: Optional[float] = None) -> None:
        """Block until the whole file has been delivered."""
        if self._thread:
            self._thread.join(timeout)

    def _stream_frames(self, callback: Callable[[Frame], None]) -> None:
        try:
            for frame in self.frames():
                if not self._running:
                    break
                callback(frame)
                if self._realtime:
                    time.sleep(self._frame_size / self._sample_rate)
        except Exception:
            logger.exception(f"Error streaming {self._file_path}")
        finally:
            self._running = False
