"""Factory for creating Zen Tuner components."""

from typing import Optional, Dict, Type

from ..logger import get_logger
from ..detection.signal_analyzer import SignalAnalyzer
from ..services.note_mapper import NoteMapper
from ..services.tuner_service import TunerService
from .config import ConfigManager
from .interfaces import IFrameSource, IPitchDetector

logger = get_logger(__name__)


class ComponentFactory:
    """Factory for creating Zen Tuner components."""

    def __init__(self, config_manager: Optional[ConfigManager] = None):
        """Initialize the component factory.

        Args:
            config_manager: Configuration manager, or None to create a default one
        """
        self.config_manager = config_manager or ConfigManager()

        # Register default component implementations
        self.pitch_detector_classes: Dict[str, Type[IPitchDetector]] = {
            "default": SignalAnalyzer,
        }

    def create_pitch_detector(
        self, implementation: str = "default", **kwargs
    ) -> IPitchDetector:
        """Create a pitch detector.

        Args:
            implementation: Name of the implementation to use
            **kwargs: Additional parameters to pass to the constructor

        Returns:
            Pitch detector instance

        Raises:
            ValueError: If the implementation is not registered
        """
        if implementation not in self.pitch_detector_classes:
            raise ValueError(f"Unknown pitch detector implementation: {implementation}")

        config = self.config_manager.get_config("signal_analyzer")
        config.update(kwargs)

        cls = self.pitch_detector_classes[implementation]
        instance = cls(**config)

        logger.info(f"Created pitch detector: {implementation}")
        return instance

    def create_note_mapper(self, **kwargs) -> NoteMapper:
        """Create a note mapper from the 'note_mapper' configuration."""
        config = self.config_manager.get_config("note_mapper")
        config.update(kwargs)
        return NoteMapper(**config)

    def create_audio_input(self, **kwargs) -> IFrameSource:
        """Create a live microphone input from the 'audio_input' configuration.

        sounddevice needs the PortAudio library, so it is only imported here.
        """
        from ..audio.audio_input import SoundDeviceInput

        config = self.config_manager.get_config("audio_input")
        config.update(kwargs)

        instance = SoundDeviceInput(**config)
        logger.info("Created audio input")
        return instance

    def create_tuner_service(self, **kwargs) -> TunerService:
        """Create a tuner service.

        Args:
            **kwargs: Components ('frame_source', 'analyzer', 'mapper') or
                range overrides ('min_frequency', 'max_frequency')

        Returns:
            Tuner service instance
        """
        if "analyzer" not in kwargs:
            kwargs["analyzer"] = self.create_pitch_detector()

        if "mapper" not in kwargs:
            kwargs["mapper"] = self.create_note_mapper()

        config = self.config_manager.get_config("tuner")
        config.update(kwargs)

        instance = TunerService(**config)

        logger.info("Created tuner service")
        return instance
