"""Live microphone frame source using sounddevice."""

from __future__ import annotations

from typing import Callable, ClassVar, Dict, List, Optional

import numpy as np
import sounddevice as sd

from ..core.interfaces import IFrameSource
from ..logger import get_logger
from ..note_types import Frame
from .frame_buffer import FrameBuffer

logger = get_logger(__name__)


def list_input_devices() -> List[Dict]:
    """Return the audio devices that have at least one input channel."""
    devices = []
    for i, device in enumerate(sd.query_devices()):
        if device["max_input_channels"] > 0:
            devices.append(
                {
                    "id": i,
                    "name": device["name"],
                    "channels": device["max_input_channels"],
                    "default_samplerate": device["default_samplerate"],
                }
            )
    return devices


class SoundDeviceInput(IFrameSource):
    """Captures microphone audio and delivers it as fixed-length frames."""

    # Audio configuration
    SAMPLE_RATE: ClassVar[int] = 44100  # Hz
    FRAME_SIZE: ClassVar[int] = FrameBuffer.FRAME_SIZE
    CHANNELS: ClassVar[int] = 1  # Mono audio

    def __init__(
        self,
        device_id: Optional[int] = None,
        sample_rate: Optional[int] = None,
        frame_size: Optional[int] = None,
        channels: Optional[int] = None,
    ) -> None:
        """Initialize the audio input handler.

        Args:
            device_id: Audio input device ID, or None for the system default
            sample_rate: Sample rate in Hz, or None for default (44100)
            frame_size: Samples per analysis frame, or None for default (2048)
            channels: Number of audio channels, or None for default (1)
        """
        self._device_id = device_id
        self._sample_rate = int(sample_rate or self.SAMPLE_RATE)
        self._frame_size = int(frame_size or self.FRAME_SIZE)
        self._channels = int(channels or self.CHANNELS)

        self._buffer = FrameBuffer(self._frame_size)
        self._stream: Optional[sd.InputStream] = None
        self._callback: Optional[Callable[[Frame], None]] = None
        self._running = False

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    def start(self, callback: Callable[[Frame], None]) -> bool:
        """Open the input stream and start delivering frames.

        Raises:
            sounddevice.PortAudioError: If the device cannot be opened
        """
        if self._running:
            logger.warning("Audio input already running")
            return True

        self._callback = callback
        self._buffer.clear()
        self._stream = sd.InputStream(
            device=self._device_id,
            channels=self._channels,
            samplerate=self._sample_rate,
            blocksize=self._frame_size,
            dtype="float32",
            callback=self._audio_callback,
        )
        self._stream.start()
        self._running = True
        logger.info(
            f"Audio input started: device={self._device_id}, "
            f"rate={self._sample_rate}Hz, frame={self._frame_size}"
        )
        return True

    def stop(self) -> None:
        """Stop and close the input stream."""
        if self._stream is not None:
            self._stream.stop()
            self._stream.close()
            self._stream = None
        self._running = False
        self._buffer.clear()
        logger.info("Audio input stopped")

    def is_running(self) -> bool:
        return self._running

    def _audio_callback(self, indata: np.ndarray, frames: int, time_info, status) -> None:
        if status:
            logger.warning(f"Audio status: {status}")
        if self._callback is None:
            return
        for samples in self._buffer.push(indata):
            try:
                self._callback(Frame(samples, self._sample_rate))
            except Exception as e:
                # Exceptions must not escape into the PortAudio thread
                logger.error(f"Error processing audio frame: {e}", exc_info=True)
