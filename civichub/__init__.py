"""CivicHub: civic issue reporting service."""

__version__ = "0.1.0"
