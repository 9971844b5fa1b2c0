"""Quantization of a frequency to the nearest equal-tempered note."""

import math
from typing import ClassVar, Dict, List, TypeAlias

import numpy as np

from ..logger import get_logger
from ..note_types import NoteInfo
from ..note_utils import A4_FREQ, A4_MIDI, NOTE_NAMES_SHARPS, SHARP_TO_FLAT

logger = get_logger(__name__)


class NoteMapper:
    """Maps a frequency to note name, octave and cents deviation (A4 = 440Hz).

    The semitone is chosen with Python's ``round`` (half to even), so a
    frequency exactly between two notes always resolves to the same
    neighbour. The cents deviation is floored by default, which is what the
    tuner display has always shown: -0.3 cents reads as -1, +0.9 as 0.
    ``cents_rounding="round"`` reports the nearest integer instead.
    """

    NoteName: TypeAlias = str
    Frequency: TypeAlias = float

    SHARP_NOTES: ClassVar[List[NoteName]] = NOTE_NAMES_SHARPS
    SHARP_TO_FLAT: ClassVar[Dict[NoteName, NoteName]] = SHARP_TO_FLAT

    A4_FREQ: ClassVar[Frequency] = A4_FREQ
    A4_MIDI: ClassVar[int] = A4_MIDI

    CENTS_ROUNDING_MODES: ClassVar[List[str]] = ["floor", "round"]

    def __init__(self, use_flats: bool = False, cents_rounding: str = "floor") -> None:
        """Initialize the mapper.

        Args:
            use_flats: If True, name accidentals as flats (e.g., 'Bb') instead of sharps ('A#')
            cents_rounding: 'floor' (default) or 'round'

        Raises:
            ValueError: If cents_rounding is not a known mode
        """
        if cents_rounding not in self.CENTS_ROUNDING_MODES:
            raise ValueError(
                f"Unknown cents rounding {cents_rounding!r}, "
                f"expected one of {self.CENTS_ROUNDING_MODES}"
            )
        self._use_flats = bool(use_flats)
        self._cents_rounding = cents_rounding

    @property
    def use_flats(self) -> bool:
        return self._use_flats

    @property
    def cents_rounding(self) -> str:
        return self._cents_rounding

    @classmethod
    def nearest_midi_number(cls, half_steps: float) -> int:
        """MIDI number of the semitone nearest to a signed distance from A4.

        Exact half-way values go to the even neighbour: +0.5 gives A4 (69),
        +1.5 gives B4 (71).
        """
        return int(round(half_steps)) + cls.A4_MIDI

    def map_frequency(self, frequency: float) -> NoteInfo:
        """Convert a frequency in Hz to the nearest note.

        Any positive frequency is accepted; callers should filter to the
        instrument's range first, since a frequency far from music still maps
        to some note with a large deviation.

        Args:
            frequency: The frequency in Hz to convert

        Returns:
            NoteInfo for the nearest semitone

        Raises:
            ValueError: If frequency is not a positive finite number
        """
        if (
            isinstance(frequency, bool)
            or not isinstance(frequency, (int, float, np.floating, np.integer))
            or not np.isfinite(frequency)
        ):
            raise ValueError(f"Invalid frequency value: {frequency!r}")
        if frequency <= 0:
            raise ValueError(f"Frequency must be positive, got {frequency}")

        frequency = float(frequency)

        # Half steps from A4
        note_num = 12 * math.log2(frequency / self.A4_FREQ)
        midi_number = self.nearest_midi_number(note_num)

        name = self.SHARP_NOTES[midi_number % 12]
        if self._use_flats and name in self.SHARP_TO_FLAT:
            name = self.SHARP_TO_FLAT[name]
        octave = (midi_number // 12) - 1

        perfect_freq = self.A4_FREQ * math.pow(2.0, (midi_number - self.A4_MIDI) / 12.0)
        exact_cents = 1200 * math.log2(frequency / perfect_freq)
        if self._cents_rounding == "floor":
            cents = math.floor(exact_cents)
        else:
            cents = int(round(exact_cents))

        return NoteInfo(
            name=name,
            octave=octave,
            frequency=frequency,
            cents_deviation=cents,
            midi_number=midi_number,
        )
