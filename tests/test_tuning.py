import unittest

from zen_tuner.note_types import NoteInfo
from zen_tuner.services.note_mapper import NoteMapper
from zen_tuner.tuning import (
    STANDARD_TUNING,
    GuitarString,
    TuningAccuracy,
    classify_deviation,
    format_cents,
    meter_position,
    string_states,
)


def note(name, octave, cents=0):
    return NoteInfo(name=name, octave=octave, frequency=100.0, cents_deviation=cents, midi_number=0)


class TestStandardTuning(unittest.TestCase):
    def test_strings_match_their_notes(self):
        mapper = NoteMapper()
        for string in STANDARD_TUNING:
            with self.subTest(string=str(string)):
                mapped = mapper.map_frequency(string.frequency)
                self.assertEqual((mapped.name, mapped.octave), (string.note, string.octave))

    def test_low_to_high(self):
        freqs = [s.frequency for s in STANDARD_TUNING]
        self.assertEqual(freqs, sorted(freqs))
        self.assertEqual(STANDARD_TUNING[0].label, "6 (Low E)")
        self.assertEqual(STANDARD_TUNING[-1].label, "1 (High E)")


class TestStringStates(unittest.TestCase):
    def test_low_e(self):
        states = string_states(note("E", 2))
        self.assertTrue(states[0].active)
        self.assertFalse(states[0].nearly_active)
        # High E shares the name only
        self.assertFalse(states[5].active)
        self.assertTrue(states[5].nearly_active)
        for state in states[1:5]:
            self.assertFalse(state.active or state.nearly_active)

    def test_no_note(self):
        for state in string_states(None):
            self.assertFalse(state.active)
            self.assertFalse(state.nearly_active)

    def test_flat_spelling(self):
        tuning = [GuitarString("Eb", 2, 77.78, "6 (Low Eb)")]
        self.assertTrue(string_states(note("D#", 2), tuning)[0].active)
        self.assertTrue(string_states(note("Eb", 3), tuning)[0].nearly_active)

    def test_unrelated_note(self):
        states = string_states(note("C#", 3))
        self.assertFalse(any(s.active or s.nearly_active for s in states))


class TestMeter(unittest.TestCase):
    def test_classify(self):
        self.assertEqual(classify_deviation(0), TuningAccuracy.IN_TUNE)
        self.assertEqual(classify_deviation(-4), TuningAccuracy.IN_TUNE)
        self.assertEqual(classify_deviation(5), TuningAccuracy.CLOSE)
        self.assertEqual(classify_deviation(-14), TuningAccuracy.CLOSE)
        self.assertEqual(classify_deviation(15), TuningAccuracy.SHARP)
        self.assertEqual(classify_deviation(-30), TuningAccuracy.FLAT)

    def test_meter_position(self):
        self.assertEqual(meter_position(note("A", 4, 12)), 12)
        self.assertEqual(meter_position(note("A", 4, 80)), 50)
        self.assertEqual(meter_position(note("A", 4, -80)), -50)
        self.assertEqual(meter_position(None), -50)
        self.assertEqual(meter_position(note("A", 4, 12), active=False), -50)

    def test_format_cents(self):
        self.assertEqual(format_cents(12), "+12 cents")
        self.assertEqual(format_cents(-3), "-3 cents")
        self.assertEqual(format_cents(0), "0 cents")


if __name__ == "__main__":
    unittest.main()
