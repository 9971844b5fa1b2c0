"""Frame sources for the tuner.

The live microphone input lives in ``zen_tuner.audio.audio_input`` and is not
imported here, so that file-based analysis works without PortAudio installed.
"""

from .frame_buffer import FrameBuffer
from .wav_input import WavFileInput

__all__ = ["FrameBuffer", "WavFileInput"]
