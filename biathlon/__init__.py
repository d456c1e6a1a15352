"""Biathlon race event processing and results reporting."""

__version__ = "0.1.0"