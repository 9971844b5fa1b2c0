"""Command-line interface for Zen Tuner."""

from .main import main

__all__ = ["main"]
