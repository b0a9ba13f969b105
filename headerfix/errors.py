"""Exception types raised by headerfix components."""

from __future__ import annotations


class HeaderFixError(RuntimeError):
    """Base class for headerfix failures."""


class ConfigError(HeaderFixError):
    """Raised when the configuration file cannot be parsed."""


class GitError(HeaderFixError):
    """Raised when a git command fails or returns unusable output."""


class RepositoryError(HeaderFixError):
    """Raised when the repository or its head revision cannot be resolved."""


class RenderError(HeaderFixError):
    """Raised when a header template cannot be rendered."""


class EmptyFileError(OSError):
    """Raised when a candidate file yields no bytes to sniff."""


__all__ = [
    "ConfigError",
    "EmptyFileError",
    "GitError",
    "HeaderFixError",
    "RenderError",
    "RepositoryError",
]
