"""Guitar tuning reference and display helpers for note readings."""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from .note_types import NoteInfo
from .note_utils import convert_note_notation


@dataclass(frozen=True)
class GuitarString:
    """An open string of the instrument in standard tuning."""

    note: str
    octave: int
    frequency: float  # Hz
    label: str

    def __str__(self):
        return f"{self.note}{self.octave}"


@dataclass(frozen=True)
class StringState:
    """How a reading relates to one open string."""

    string: GuitarString
    active: bool  # Same note and octave
    nearly_active: bool  # Same note, different octave


class TuningAccuracy(Enum):
    IN_TUNE = "in tune"
    CLOSE = "close"
    FLAT = "flat"
    SHARP = "sharp"


# Standard guitar tuning, low to high
STANDARD_TUNING: List[GuitarString] = [
    GuitarString("E", 2, 82.41, "6 (Low E)"),
    GuitarString("A", 2, 110.00, "5 (A)"),
    GuitarString("D", 3, 146.83, "4 (D)"),
    GuitarString("G", 3, 196.00, "3 (G)"),
    GuitarString("B", 3, 246.94, "2 (B)"),
    GuitarString("E", 4, 329.63, "1 (High E)"),
]

IN_TUNE_CENTS = 5  # |deviation| below this reads as in tune
CLOSE_CENTS = 15  # |deviation| below this reads as close
METER_RANGE_CENTS = 50  # Needle travel either side of centre


def string_states(
    note: Optional[NoteInfo], tuning: Optional[List[GuitarString]] = None
) -> List[StringState]:
    """Match a reading against each open string.

    A string is active when both note and octave match, and nearly active when
    only the pitch class matches. Flat and sharp spellings compare equal.
    """
    tuning = STANDARD_TUNING if tuning is None else tuning
    states = []
    played = convert_note_notation(note.name) if note else None
    for string in tuning:
        same_name = played is not None and played == convert_note_notation(string.note)
        active = same_name and note.octave == string.octave
        states.append(
            StringState(string=string, active=active, nearly_active=same_name and not active)
        )
    return states


def classify_deviation(cents: int) -> TuningAccuracy:
    """Bucket a cents deviation the way the meter colours it."""
    if abs(cents) < IN_TUNE_CENTS:
        return TuningAccuracy.IN_TUNE
    if abs(cents) < CLOSE_CENTS:
        return TuningAccuracy.CLOSE
    return TuningAccuracy.SHARP if cents > 0 else TuningAccuracy.FLAT


def meter_position(note: Optional[NoteInfo], active: bool = True) -> int:
    """Needle position in cents, clamped to the meter; parked left when idle."""
    if note is None or not active:
        return -METER_RANGE_CENTS
    return max(-METER_RANGE_CENTS, min(METER_RANGE_CENTS, note.cents_deviation))


def format_cents(cents: int) -> str:
    if cents > 0:
        return f"+{cents} cents"
    return f"{cents} cents"
