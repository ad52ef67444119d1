"""Duplicate and similarity detection for Apocaliptyx prediction scenarios."""

__version__ = "1.0.0"
