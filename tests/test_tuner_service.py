import unittest

import numpy as np

from zen_tuner.core.interfaces import IFrameSource, IPitchDetector
from zen_tuner.note_types import (
    Frame,
    InvalidFrameError,
    NoPitchReason,
    PitchEstimate,
    TunerStatus,
)
from zen_tuner.services.note_mapper import NoteMapper
from zen_tuner.services.tuner_service import TunerService

SAMPLE_RATE = 44100


def sine(freq, amplitude=0.5, n=2048):
    t = np.arange(n) / SAMPLE_RATE
    return amplitude * np.sin(2 * np.pi * freq * t)


class FixedDetector(IPitchDetector):
    """Returns queued estimates instead of analyzing."""

    def __init__(self, *estimates):
        self.estimates = list(estimates)

    def analyze(self, frame):
        return self.estimates.pop(0)


class FakeSource(IFrameSource):
    def __init__(self, fail_with=None):
        self.callback = None
        self.running = False
        self.fail_with = fail_with

    def start(self, callback):
        if self.fail_with:
            raise self.fail_with
        self.callback = callback
        self.running = True
        return True

    def stop(self):
        self.running = False

    def is_running(self):
        return self.running

    def push(self, samples):
        self.callback(Frame(samples, SAMPLE_RATE))


class TestProcessFrame(unittest.TestCase):
    def test_sine_becomes_note(self):
        service = TunerService()
        note = service.process_samples(sine(110.0), SAMPLE_RATE)
        self.assertIsNotNone(note)
        self.assertEqual(note.label, "A2")
        self.assertEqual(service.current_note, note)
        self.assertTrue(service.last_estimate.is_detected)

    def test_silence_keeps_previous_note(self):
        service = TunerService()
        first = service.process_samples(sine(196.0), SAMPLE_RATE)
        self.assertIsNone(service.process_samples(np.zeros(2048), SAMPLE_RATE))
        self.assertEqual(service.current_note, first)
        self.assertEqual(service.last_estimate.reason, NoPitchReason.INSUFFICIENT_SIGNAL)

    def test_newest_note_wins(self):
        service = TunerService()
        service.process_samples(sine(110.0), SAMPLE_RATE)
        service.process_samples(sine(329.63), SAMPLE_RATE)
        self.assertEqual(service.current_note.label, "E4")

    def test_display_range_is_exclusive(self):
        detector = FixedDetector(
            PitchEstimate.detected(60.0),
            PitchEstimate.detected(1000.0),
            PitchEstimate.detected(45.0),
            PitchEstimate.detected(1500.0),
            PitchEstimate.detected(60.5),
        )
        service = TunerService(analyzer=detector)
        frame = Frame(np.zeros(8), SAMPLE_RATE)
        for _ in range(4):
            self.assertIsNone(service.process_frame(frame))
        self.assertIsNone(service.current_note)
        self.assertIsNotNone(service.process_frame(frame))

    def test_custom_range(self):
        detector = FixedDetector(PitchEstimate.detected(1500.0))
        service = TunerService(analyzer=detector, max_frequency=2000.0)
        note = service.process_frame(Frame(np.zeros(8), SAMPLE_RATE))
        self.assertEqual(note.label, "F#6")

    def test_invalid_range(self):
        with self.assertRaises(ValueError):
            TunerService(min_frequency=500.0, max_frequency=100.0)

    def test_uses_mapper_settings(self):
        detector = FixedDetector(PitchEstimate.detected(466.16))
        service = TunerService(analyzer=detector, mapper=NoteMapper(use_flats=True))
        self.assertEqual(service.process_frame(Frame(np.zeros(8), SAMPLE_RATE)).name, "Bb")

    def test_invalid_samples_raise(self):
        service = TunerService()
        with self.assertRaises(InvalidFrameError):
            service.process_samples([], SAMPLE_RATE)

    def test_note_event(self):
        service = TunerService()
        received = []
        service.events.on_note_detected(received.append)
        service.process_samples(sine(246.94), SAMPLE_RATE)
        service.process_samples(np.zeros(2048), SAMPLE_RATE)
        self.assertEqual([n.label for n in received], ["B3"])

    def test_failing_listener_does_not_break_others(self):
        service = TunerService()
        received = []

        def broken(note):
            raise RuntimeError("listener failure")

        service.events.on_note_detected(broken)
        service.events.on_note_detected(received.append)
        self.assertIsNotNone(service.process_samples(sine(220.0), SAMPLE_RATE))
        self.assertEqual(len(received), 1)


class TestLifecycle(unittest.TestCase):
    def test_start_and_stop(self):
        source = FakeSource()
        service = TunerService(frame_source=source)
        notes = []

        self.assertEqual(service.status, TunerStatus.IDLE)
        self.assertTrue(service.start(notes.append))
        self.assertEqual(service.status, TunerStatus.LISTENING)
        self.assertTrue(service.is_running())

        source.push(sine(110.0))
        source.push(np.zeros(2048))
        self.assertEqual([n.label for n in notes], ["A2"])
        self.assertEqual(service.current_note.label, "A2")

        service.stop()
        self.assertEqual(service.status, TunerStatus.IDLE)
        self.assertFalse(source.running)
        self.assertIsNone(service.current_note)

    def test_start_twice(self):
        service = TunerService(frame_source=FakeSource())
        self.assertTrue(service.start())
        self.assertTrue(service.start())
        self.assertEqual(service.status, TunerStatus.LISTENING)

    def test_start_without_source(self):
        with self.assertRaises(RuntimeError):
            TunerService().start()

    def test_source_failure(self):
        service = TunerService(frame_source=FakeSource(fail_with=OSError("Microphone access denied")))
        errors = []
        service.events.on_error(errors.append)

        self.assertFalse(service.start())
        self.assertEqual(service.status, TunerStatus.ERROR)
        self.assertEqual(service.error, "Microphone access denied")
        self.assertEqual(errors, ["Microphone access denied"])
        self.assertFalse(service.is_running())

    def test_restart_after_failure(self):
        source = FakeSource(fail_with=OSError("busy"))
        service = TunerService(frame_source=source)
        self.assertFalse(service.start())
        source.fail_with = None
        self.assertTrue(service.start())
        self.assertIsNone(service.error)
        self.assertEqual(service.status, TunerStatus.LISTENING)


if __name__ == "__main__":
    unittest.main()
