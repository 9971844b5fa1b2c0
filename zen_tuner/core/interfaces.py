"""Defines the core interfaces for the Zen Tuner application."""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Optional, Callable

from ..note_types import Frame, NoteInfo, PitchEstimate


class IPitchDetector(ABC):
    """Interface for pitch detection algorithms."""

    @abstractmethod
    def analyze(self, frame: Frame) -> PitchEstimate:
        """Estimate the fundamental frequency of one frame."""
        pass


class IFrameSource(ABC):
    """Interface for anything that delivers fixed-length audio frames."""

    @abstractmethod
    def start(self, callback: Callable[[Frame], None]) -> bool:
        """Start delivering frames to the callback."""
        pass

    @abstractmethod
    def stop(self) -> None:
        """Stop delivering frames."""
        pass

    @abstractmethod
    def is_running(self) -> bool:
        """Check if frames are being delivered."""
        pass


class ITunerService(ABC):
    """Interface for the frame-to-note tuner pipeline."""

    @abstractmethod
    def process_frame(self, frame: Frame) -> Optional[NoteInfo]:
        """Analyze one frame and return the note shown for it, if any."""
        pass

    @abstractmethod
    def start(self, callback: Optional[Callable[[NoteInfo], None]] = None) -> bool:
        """Start listening to the frame source."""
        pass

    @abstractmethod
    def stop(self) -> None:
        """Stop listening."""
        pass

    @abstractmethod
    def is_running(self) -> bool:
        """Check if the service is listening."""
        pass
