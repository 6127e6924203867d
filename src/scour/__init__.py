"""Scour - resumable research pipeline from objective to dataset."""

__version__ = "0.1.0"

__all__ = ["__version__"]
