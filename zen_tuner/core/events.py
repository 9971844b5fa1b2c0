"""Event system for Zen Tuner components."""

from typing import Dict, List, Callable, Any
from enum import Enum, auto

from ..logger import get_logger

logger = get_logger(__name__)


class TunerEventType(Enum):
    """Event types for the tuner."""

    NOTE_DETECTED = auto()
    ERROR = auto()


class EventEmitter:
    """Event emitter for Zen Tuner components."""

    def __init__(self):
        """Initialize the event emitter."""
        self._listeners: Dict[Any, List[Callable]] = {}

    def on(self, event_type: Any, callback: Callable) -> None:
        """Register a callback for an event type.

        Args:
            event_type: Event type to listen for
            callback: Function to call when the event occurs
        """
        if event_type not in self._listeners:
            self._listeners[event_type] = []

        if callback not in self._listeners[event_type]:
            self._listeners[event_type].append(callback)
            logger.debug(f"Added listener for event {event_type}")

    def off(self, event_type: Any, callback: Callable) -> None:
        """Remove a previously registered callback."""
        listeners = self._listeners.get(event_type, [])
        if callback in listeners:
            listeners.remove(callback)
            logger.debug(f"Removed listener for event {event_type}")

    def emit(self, event_type: Any, *args, **kwargs) -> None:
        """Emit an event.

        Args:
            event_type: Event type to emit
            *args: Positional arguments to pass to listeners
            **kwargs: Keyword arguments to pass to listeners
        """
        if event_type not in self._listeners:
            return

        for callback in list(self._listeners[event_type]):
            try:
                callback(*args, **kwargs)
            except Exception as e:
                logger.error(f"Error in event listener for {event_type}: {e}")

    def clear(self) -> None:
        """Remove all event listeners."""
        self._listeners = {}
        logger.debug("Cleared all event listeners")


class TunerEvents:
    """Event emitter specifically for tuner events."""

    def __init__(self):
        self._emitter = EventEmitter()

    def on_note_detected(self, callback: Callable) -> None:
        """Register a callback taking the NoteInfo of each accepted reading."""
        self._emitter.on(TunerEventType.NOTE_DETECTED, callback)

    def on_error(self, callback: Callable) -> None:
        """Register a callback taking an error message."""
        self._emitter.on(TunerEventType.ERROR, callback)

    def off_note_detected(self, callback: Callable) -> None:
        self._emitter.off(TunerEventType.NOTE_DETECTED, callback)

    def emit_note_detected(self, note) -> None:
        self._emitter.emit(TunerEventType.NOTE_DETECTED, note)

    def emit_error(self, message: str) -> None:
        self._emitter.emit(TunerEventType.ERROR, message)

    def clear(self) -> None:
        """Remove all event listeners."""
        self._emitter.clear()
