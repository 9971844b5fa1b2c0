"""Core components for the Zen Tuner application."""

# Import interfaces for easier access
from .interfaces import (
    IPitchDetector,
    IFrameSource,
    ITunerService,
)

__all__ = ["IPitchDetector", "IFrameSource", "ITunerService"]
