"""Wellness Analytics - statistics for mood and goal tracking."""

__version__ = "0.1.0"
