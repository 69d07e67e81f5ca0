"""Flatten in-process call-frame trees into detailed traces."""

__version__ = "0.1.0"
