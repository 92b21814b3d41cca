"""Lesson score rollups with spreadsheet and PDF exports."""

__version__ = "0.1.0"
