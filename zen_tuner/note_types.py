"""Type definitions for the Zen Tuner project."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Union

import numpy as np


class InvalidFrameError(ValueError):
    """Raised when a frame cannot be analyzed (empty, bad sample rate, NaN/inf)."""


class NoPitchReason(Enum):
    """Why a frame did not yield a pitch."""

    INSUFFICIENT_SIGNAL = "insufficient_signal"
    DEGENERATE_AUTOCORRELATION = "degenerate_autocorrelation"


class TunerStatus(Enum):
    """Lifecycle state of the tuner service."""

    IDLE = "Idle"
    LISTENING = "Listening"
    ERROR = "Error"


@dataclass(frozen=True, eq=False)
class Frame:
    """A fixed-length window of mono audio and the rate it was captured at.

    The samples are copied into a read-only float64 array on construction, so
    a Frame cannot be changed by whoever produced the original buffer.
    """

    samples: np.ndarray
    sample_rate: int

    def __init__(self, samples: Union[np.ndarray, Sequence[float]], sample_rate: int):
        if isinstance(sample_rate, bool) or not isinstance(
            sample_rate, (int, np.integer)
        ):
            raise InvalidFrameError(
                f"Sample rate must be an integer, got {sample_rate!r}"
            )
        if sample_rate <= 0:
            raise InvalidFrameError(f"Sample rate must be positive, got {sample_rate}")

        try:
            data = np.array(samples, dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise InvalidFrameError(f"Samples are not numeric: {e}") from e

        if data.ndim != 1:
            raise InvalidFrameError(
                f"Frame must be one-dimensional (mono), got shape {data.shape}"
            )
        if data.size == 0:
            raise InvalidFrameError("Frame is empty")
        if not np.all(np.isfinite(data)):
            raise InvalidFrameError("Frame contains non-finite samples")

        data.setflags(write=False)
        object.__setattr__(self, "samples", data)
        object.__setattr__(self, "sample_rate", int(sample_rate))

    def __len__(self) -> int:
        return int(self.samples.size)

    @property
    def rms(self) -> float:
        """Root-mean-square level of the whole frame."""
        return float(np.sqrt(np.mean(self.samples * self.samples)))

    @property
    def duration(self) -> float:
        """Length of the frame in seconds."""
        return len(self) / self.sample_rate


@dataclass(frozen=True)
class PitchEstimate:
    """Outcome of analyzing one frame: a frequency, or the reason there is none."""

    frequency: Optional[float] = None  # Hz, set only when a pitch was detected
    reason: Optional[NoPitchReason] = None
    rms: float = 0.0  # Signal level of the analyzed frame

    @classmethod
    def detected(cls, frequency: float, rms: float = 0.0) -> PitchEstimate:
        return cls(frequency=float(frequency), reason=None, rms=rms)

    @classmethod
    def no_pitch(cls, reason: NoPitchReason, rms: float = 0.0) -> PitchEstimate:
        return cls(frequency=None, reason=reason, rms=rms)

    @property
    def is_detected(self) -> bool:
        return self.frequency is not None

    def __str__(self):
        if self.is_detected:
            return f"{self.frequency:.2f}Hz"
        return f"no pitch ({self.reason.value})"


@dataclass(frozen=True)
class NoteInfo:
    """A frequency quantized to the nearest equal-tempered note."""

    name: str  # Pitch class (e.g., 'A', 'C#' or 'Db')
    octave: int  # SPN octave, C4 is middle C
    frequency: float  # Measured frequency in Hz
    cents_deviation: int  # Signed distance from the exact note frequency
    midi_number: int  # MIDI-style index, A4 is 69

    @property
    def cents_off(self) -> int:
        return self.cents_deviation

    @property
    def label(self) -> str:
        return f"{self.name}{self.octave}"

    @property
    def perfect_frequency(self) -> float:
        """Exact frequency of the note under A4 = 440 Hz equal temperament."""
        return 440.0 * math.pow(2.0, (self.midi_number - 69) / 12.0)

    def __str__(self):
        return f"{self.label} ({self.frequency:.1f}Hz, {self.cents_deviation:+d} cents)"
