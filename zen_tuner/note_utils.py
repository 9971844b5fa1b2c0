"""Utility functions for working with musical notes and frequencies."""

from typing import Dict, List

A4_FREQ = 440.0  # Reference pitch in Hz
A4_MIDI = 69  # A4 is 69 in MIDI

NOTE_NAMES_SHARPS: List[str] = [
    "C",
    "C#",
    "D",
    "D#",
    "E",
    "F",
    "F#",
    "G",
    "G#",
    "A",
    "A#",
    "B",
]

SHARP_TO_FLAT: Dict[str, str] = {
    "C#": "Db",
    "D#": "Eb",
    "F#": "Gb",
    "G#": "Ab",
    "A#": "Bb",
}
FLAT_TO_SHARP: Dict[str, str] = {v: k for k, v in SHARP_TO_FLAT.items()}


def convert_note_notation(note_name: str, to_flats: bool = False) -> str:
    """Convert a note name between sharp and flat notation.

    Args:
        note_name: The note name to convert (e.g., 'F#2' or 'Gb2')
        to_flats: If True, convert to flats (e.g., 'Gb2'), otherwise to sharps (e.g., 'F#2')

    Returns:
        str: The converted note name, or note_name unchanged if it has no other spelling

    Examples:
        >>> convert_note_notation('F#2', to_flats=True)
        'Gb2'
        >>> convert_note_notation('Gb2', to_flats=False)
        'F#2'
    """
    if not note_name or not isinstance(note_name, str):
        return note_name or ""

    # Split into pitch class and octave
    note_part = "".join(c for c in note_name if not c.isdigit() and c != "-").strip()
    octave_part = note_name[len(note_part) :]

    if to_flats and note_part in SHARP_TO_FLAT:
        return f"{SHARP_TO_FLAT[note_part]}{octave_part}"
    elif not to_flats and note_part in FLAT_TO_SHARP:
        return f"{FLAT_TO_SHARP[note_part]}{octave_part}"

    # No conversion needed or possible
    return note_name


def midi_to_frequency(midi_number: int) -> float:
    """Exact equal-tempered frequency of a MIDI note number (A4 = 69 = 440Hz)."""
    return A4_FREQ * 2.0 ** ((midi_number - A4_MIDI) / 12.0)


def note_frequency(name: str, octave: int) -> float:
    """Frequency of a named note in Scientific Pitch Notation.

    Args:
        name: Pitch class, sharps or flats (e.g., 'A', 'C#', 'Bb')
        octave: SPN octave (C4 is middle C)

    Returns:
        Frequency in Hz under A4 = 440Hz equal temperament

    Raises:
        ValueError: If the name is not one of the 12 pitch classes
    """
    sharp_name = convert_note_notation(name, to_flats=False)
    if sharp_name not in NOTE_NAMES_SHARPS:
        raise ValueError(f"Unknown note name: {name!r}")
    midi_number = (octave + 1) * 12 + NOTE_NAMES_SHARPS.index(sharp_name)
    return midi_to_frequency(midi_number)


def get_note_name(freq: float, use_flats: bool = False) -> str:
    """Convert frequency to note name using Scientific Pitch Notation (SPN).

    Args:
        freq: Frequency in Hz
        use_flats: If True, use flat notes (e.g., 'Bb') instead of sharps (e.g., 'A#')

    Returns:
        Note name with octave in SPN (e.g., 'A4', 'C#4', 'Bb3'), or '---'
        when the frequency is not a positive number

    Note:
        - Middle C is C4 (261.63 Hz)
        - A4 is 440 Hz
        - Octave numbers change between B and C (e.g., B3 -> C4)
    """
    from .services.note_mapper import NoteMapper

    try:
        return NoteMapper(use_flats=use_flats).map_frequency(freq).label
    except ValueError:
        return "---"
