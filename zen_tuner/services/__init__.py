"""Services built on top of pitch detection."""

from .note_mapper import NoteMapper
from .tuner_service import TunerService

__all__ = ["NoteMapper", "TunerService"]
