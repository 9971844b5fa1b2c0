"""Tuner service that turns audio frames into note readings."""

from __future__ import annotations

import threading
from typing import Callable, ClassVar, Optional, Sequence, Union

import numpy as np

from ..core.events import TunerEvents
from ..core.interfaces import IFrameSource, IPitchDetector, ITunerService
from ..detection.signal_analyzer import SignalAnalyzer
from ..logger import get_logger
from ..note_types import Frame, NoteInfo, PitchEstimate, TunerStatus
from .note_mapper import NoteMapper

logger = get_logger(__name__)


class TunerService(ITunerService):
    """Runs the per-frame pipeline: analyze, range filter, map to a note.

    Only the newest accepted reading is kept. Frames with no pitch, or with a
    pitch outside the display range, leave the current note as it was.
    """

    # Display range in Hz, exclusive on both ends
    MIN_FREQUENCY: ClassVar[float] = 60.0
    MAX_FREQUENCY: ClassVar[float] = 1000.0

    def __init__(
        self,
        frame_source: Optional[IFrameSource] = None,
        analyzer: Optional[IPitchDetector] = None,
        mapper: Optional[NoteMapper] = None,
        min_frequency: Optional[float] = None,
        max_frequency: Optional[float] = None,
    ) -> None:
        """Initialize the tuner service.

        Args:
            frame_source: Source of frames for start()/stop(), or None to drive
                the service only through process_frame()
            analyzer: Pitch detector, or None for a default SignalAnalyzer
            mapper: Note mapper, or None for a default NoteMapper
            min_frequency: Lowest frequency shown, exclusive (default 60.0)
            max_frequency: Highest frequency shown, exclusive (default 1000.0)
        """
        self._frame_source = frame_source
        self._analyzer = analyzer or SignalAnalyzer()
        self._mapper = mapper or NoteMapper()
        self._min_frequency = float(
            min_frequency if min_frequency is not None else self.MIN_FREQUENCY
        )
        self._max_frequency = float(
            max_frequency if max_frequency is not None else self.MAX_FREQUENCY
        )
        if self._min_frequency >= self._max_frequency:
            raise ValueError(
                f"min_frequency ({self._min_frequency}) must be below "
                f"max_frequency ({self._max_frequency})"
            )

        self.events = TunerEvents()
        self._lock = threading.Lock()
        self._current_note: Optional[NoteInfo] = None
        self._last_estimate: Optional[PitchEstimate] = None
        self._status = TunerStatus.IDLE
        self._error: Optional[str] = None
        self._callback: Optional[Callable[[NoteInfo], None]] = None

    @property
    def status(self) -> TunerStatus:
        return self._status

    @property
    def error(self) -> Optional[str]:
        """Message of the last failure to start, if any."""
        return self._error

    @property
    def current_note(self) -> Optional[NoteInfo]:
        with self._lock:
            return self._current_note

    @property
    def last_estimate(self) -> Optional[PitchEstimate]:
        with self._lock:
            return self._last_estimate

    def in_range(self, frequency: float) -> bool:
        return self._min_frequency < frequency < self._max_frequency

    def process_frame(self, frame: Frame) -> Optional[NoteInfo]:
        """Analyze a frame and update the current note.

        Args:
            frame: The frame to analyze

        Returns:
            The new NoteInfo, or None when the frame produced no displayable pitch
        """
        estimate = self._analyzer.analyze(frame)
        note = None
        if estimate.is_detected and self.in_range(estimate.frequency):
            note = self._mapper.map_frequency(estimate.frequency)
        elif estimate.is_detected:
            logger.debug(f"Ignoring {estimate.frequency:.1f}Hz outside display range")

        with self._lock:
            self._last_estimate = estimate
            if note is not None:
                self._current_note = note

        if note is not None:
            logger.debug(f"Note: {note}")
            self.events.emit_note_detected(note)
            if self._callback:
                self._callback(note)
        return note

    def process_samples(
        self, samples: Union[np.ndarray, Sequence[float]], sample_rate: int
    ) -> Optional[NoteInfo]:
        """Wrap raw samples in a Frame and process it.

        Raises:
            InvalidFrameError: If the samples or sample rate are unusable
        """
        return self.process_frame(Frame(samples, sample_rate))

    def start(self, callback: Optional[Callable[[NoteInfo], None]] = None) -> bool:
        """Start listening to the frame source.

        Args:
            callback: Optional function called with every accepted NoteInfo

        Returns:
            True if listening, False if the frame source could not be started
        """
        if self._frame_source is None:
            raise RuntimeError("TunerService has no frame source to start")
        if self._status == TunerStatus.LISTENING:
            logger.warning("Tuner already listening")
            return True

        self._callback = callback
        self._error = None
        try:
            started = self._frame_source.start(self._on_frame)
        except Exception as e:
            logger.error(f"Could not start audio input: {e}", exc_info=True)
            self._set_error(str(e))
            return False

        if not started:
            self._set_error("Audio input did not start")
            return False

        self._status = TunerStatus.LISTENING
        logger.info("Tuner started")
        return True

    def stop(self) -> None:
        """Stop listening and clear the current note."""
        if self._frame_source is not None and self._frame_source.is_running():
            self._frame_source.stop()
        with self._lock:
            self._current_note = None
            self._last_estimate = None
        self._callback = None
        if self._status == TunerStatus.LISTENING:
            logger.info("Tuner stopped")
        self._status = TunerStatus.IDLE

    def is_running(self) -> bool:
        return self._status == TunerStatus.LISTENING

    def _on_frame(self, frame: Frame) -> None:
        self.process_frame(frame)

    def _set_error(self, message: str) -> None:
        self._status = TunerStatus.ERROR
        self._error = message
        self.events.emit_error(message)
