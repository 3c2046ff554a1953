"""Launchscope - resilient Product Hunt listing extraction."""

__version__ = "1.0.0"
