import unittest
from zen_tuner.note_utils import (
    convert_note_notation,
    get_note_name,
    midi_to_frequency,
    note_frequency,
)


class TestScientificPitchNotation(unittest.TestCase):
    def test_middle_c(self):
        # Middle C (C4) should be ~261.63 Hz
        self.assertEqual(get_note_name(261.63), "C4")

    def test_a4(self):
        self.assertEqual(get_note_name(440.0), "A4")

    def test_octave_transitions(self):
        # Test octave transitions (B3 -> C4)
        self.assertEqual(get_note_name(246.94), "B3")
        self.assertEqual(get_note_name(261.63), "C4")

    def test_sharps_and_flats(self):
        self.assertEqual(get_note_name(277.18), "C#4")
        self.assertEqual(get_note_name(311.13), "D#4")

        self.assertEqual(get_note_name(277.18, use_flats=True), "Db4")
        self.assertEqual(get_note_name(311.13, use_flats=True), "Eb4")

        # Naturals never turn into flats
        self.assertEqual(get_note_name(329.63, use_flats=True), "E4")
        self.assertEqual(get_note_name(493.88, use_flats=True), "B4")

    def test_invalid_frequency(self):
        self.assertEqual(get_note_name(0), "---")
        self.assertEqual(get_note_name(-10.0), "---")
        self.assertEqual(get_note_name(float("nan")), "---")


class TestNoteNotation(unittest.TestCase):
    def test_convert(self):
        self.assertEqual(convert_note_notation("F#2", to_flats=True), "Gb2")
        self.assertEqual(convert_note_notation("Gb2", to_flats=False), "F#2")
        self.assertEqual(convert_note_notation("A#", to_flats=True), "Bb")

    def test_no_conversion_needed(self):
        self.assertEqual(convert_note_notation("E2", to_flats=True), "E2")
        self.assertEqual(convert_note_notation("F#2", to_flats=False), "F#2")
        self.assertEqual(convert_note_notation(""), "")

    def test_note_frequency(self):
        self.assertAlmostEqual(note_frequency("A", 4), 440.0)
        self.assertAlmostEqual(note_frequency("E", 2), 82.4069, places=3)
        self.assertAlmostEqual(note_frequency("Bb", 4), note_frequency("A#", 4))
        self.assertAlmostEqual(note_frequency("C", 4), 261.6256, places=3)

    def test_note_frequency_unknown_name(self):
        with self.assertRaises(ValueError):
            note_frequency("H", 4)

    def test_midi_to_frequency(self):
        self.assertEqual(midi_to_frequency(69), 440.0)
        self.assertAlmostEqual(midi_to_frequency(81), 880.0)


if __name__ == "__main__":
    unittest.main()
