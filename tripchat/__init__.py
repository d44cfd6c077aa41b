"""Trip planning conversation service."""

__version__ = "1.0.0"
