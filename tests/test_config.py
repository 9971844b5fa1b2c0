import json
import os
import tempfile
import unittest

from zen_tuner.core.config import ConfigManager
from zen_tuner.core.events import EventEmitter
from zen_tuner.core.factory import ComponentFactory
from zen_tuner.detection.signal_analyzer import SignalAnalyzer


class ConfigTestCase(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)
        self.config_dir = self.tmpdir.name


class TestConfigManager(ConfigTestCase):
    def test_defaults_written(self):
        manager = ConfigManager(self.config_dir)
        self.assertEqual(manager.get_config("signal_analyzer")["noise_gate_rms"], 0.01)
        self.assertEqual(manager.get_config("tuner")["min_frequency"], 60.0)
        self.assertEqual(manager.get_config("audio_input")["frame_size"], 2048)
        for name in ("signal_analyzer", "note_mapper", "tuner", "audio_input"):
            self.assertTrue(os.path.exists(os.path.join(self.config_dir, f"{name}.json")))

    def test_update_persists(self):
        manager = ConfigManager(self.config_dir)
        self.assertTrue(manager.update_config("note_mapper", {"use_flats": True}))
        reloaded = ConfigManager(self.config_dir)
        self.assertTrue(reloaded.get_config("note_mapper")["use_flats"])
        self.assertEqual(reloaded.get_config("note_mapper")["cents_rounding"], "floor")

    def test_missing_keys_filled(self):
        with open(os.path.join(self.config_dir, "tuner.json"), "w") as f:
            json.dump({"max_frequency": 500.0}, f)
        config = ConfigManager(self.config_dir).get_config("tuner")
        self.assertEqual(config, {"max_frequency": 500.0, "min_frequency": 60.0})

    def test_corrupt_file_uses_defaults(self):
        with open(os.path.join(self.config_dir, "tuner.json"), "w") as f:
            f.write("{not json")
        config = ConfigManager(self.config_dir).get_config("tuner")
        self.assertEqual(config["max_frequency"], 1000.0)

    def test_reset(self):
        manager = ConfigManager(self.config_dir)
        manager.update_config("tuner", {"max_frequency": 500.0})
        self.assertTrue(manager.reset_config("tuner"))
        self.assertEqual(manager.get_config("tuner")["max_frequency"], 1000.0)

    def test_unknown_config(self):
        manager = ConfigManager(self.config_dir)
        self.assertFalse(manager.update_config("nope", {}))
        self.assertFalse(manager.reset_config("nope"))
        self.assertEqual(manager.get_config("nope"), {})

    def test_get_config_returns_copy(self):
        manager = ConfigManager(self.config_dir)
        manager.get_config("tuner")["max_frequency"] = 1.0
        self.assertEqual(manager.get_config("tuner")["max_frequency"], 1000.0)


class TestComponentFactory(ConfigTestCase):
    def test_pitch_detector_from_config(self):
        manager = ConfigManager(self.config_dir)
        manager.update_config("signal_analyzer", {"trim_threshold": 0.3})
        detector = ComponentFactory(manager).create_pitch_detector(noise_gate_rms=0.05)
        self.assertIsInstance(detector, SignalAnalyzer)
        self.assertEqual(detector.trim_threshold, 0.3)
        self.assertEqual(detector.noise_gate_rms, 0.05)

    def test_unknown_implementation(self):
        factory = ComponentFactory(ConfigManager(self.config_dir))
        with self.assertRaises(ValueError):
            factory.create_pitch_detector("yin")

    def test_tuner_service_from_config(self):
        manager = ConfigManager(self.config_dir)
        manager.update_config("tuner", {"max_frequency": 500.0})
        manager.update_config("note_mapper", {"use_flats": True})
        service = ComponentFactory(manager).create_tuner_service()
        self.assertFalse(service.in_range(600.0))
        self.assertTrue(service.in_range(466.16))

    def test_note_mapper_from_config(self):
        manager = ConfigManager(self.config_dir)
        manager.update_config("note_mapper", {"use_flats": True})
        mapper = ComponentFactory(manager).create_note_mapper()
        self.assertEqual(mapper.map_frequency(466.16).name, "Bb")


class TestEventEmitter(unittest.TestCase):
    def test_on_emit_off(self):
        emitter = EventEmitter()
        received = []
        emitter.on("tick", received.append)
        emitter.on("tick", received.append)  # Registered once
        emitter.emit("tick", 1)
        emitter.off("tick", received.append)
        emitter.emit("tick", 2)
        emitter.emit("unknown", 3)
        self.assertEqual(received, [1])

    def test_clear(self):
        emitter = EventEmitter()
        received = []
        emitter.on("tick", received.append)
        emitter.clear()
        emitter.emit("tick", 1)
        self.assertEqual(received, [])


if __name__ == "__main__":
    unittest.main()
