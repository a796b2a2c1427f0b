"""Versioned template store with interchangeable local and REST backends."""

__version__ = "0.1.0"
