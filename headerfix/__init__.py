"""Detect and add missing license headers to version-controlled source files."""

__version__ = "0.1.0"
