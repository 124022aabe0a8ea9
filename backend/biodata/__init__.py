"""Biodata Manager API: materials, generic tables, files and folders."""

__version__ = "1.0.0"
