"""Batch archive or unarchive GitHub repositories via the GitHub CLI."""

__version__ = "1.0.0"
