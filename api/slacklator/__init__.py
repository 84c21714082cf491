"""Slacklator: cost-optimized chat translation core."""

__version__ = "1.0.0"
