"""Git integration for headerfix."""

from .repository import GitRepository, parse_line_porcelain

__all__ = ["GitRepository", "parse_line_porcelain"]
