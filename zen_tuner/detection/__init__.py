"""Pitch detection for single audio frames."""

from .signal_analyzer import SignalAnalyzer

__all__ = ["SignalAnalyzer"]
