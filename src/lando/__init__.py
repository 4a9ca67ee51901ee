"""Lando configuration resolution and update checks."""

__version__ = "3.0.0"
