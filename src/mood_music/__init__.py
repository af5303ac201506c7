"""Mood Music: mood-tagged personal music library (data layer)."""

__version__ = "0.1.0"
