"""Utility modules for Lando."""
