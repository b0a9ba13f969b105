"""Repository walking and candidate-file selection."""

from __future__ import annotations

import os
import stat
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Sequence

from .config import HeaderFixConfig
from .logging import get_logger

_EXCLUDED_DIRS = {".git", ".hg", ".svn"}

logger = get_logger("scanner")

FilePredicate = Callable[[Path, os.stat_result], bool]
DirPredicate = Callable[[Path], bool]


@dataclass
class IgnoreRule:
    """Represents an exclude pattern from .headerfix.yml, using gitignore-like matching."""

    pattern: str
    directory_only: bool
    anchored: bool
    negate: bool
    has_slash: bool

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if not self.pattern:
            return False
        if self.directory_only and not is_dir:
            return False

        if self.anchored or self.has_slash:
            if fnmatchcase(rel_path, self.pattern):
                return True
            if self.directory_only and rel_path.startswith(f"{self.pattern}/"):
                return True
            return False

        for part in rel_path.split("/"):
            if fnmatchcase(part, self.pattern):
                return True
        return False


def build_ignore_rule(pattern: str) -> IgnoreRule | None:
    pattern = pattern.strip()
    if not pattern or pattern.startswith("#"):
        return None

    negate = pattern.startswith("!")
    if negate:
        pattern = pattern[1:]

    directory_only = pattern.endswith("/")
    if directory_only:
        pattern = pattern[:-1]

    anchored = pattern.startswith("/")
    if anchored:
        pattern = pattern[1:]

    return IgnoreRule(
        pattern=pattern,
        directory_only=directory_only,
        anchored=anchored,
        negate=negate,
        has_slash="/" in pattern,
    )


def is_ignored(rel_path: str, is_dir: bool, rules: Sequence[IgnoreRule]) -> bool:
    ignored = False
    for rule in rules:
        if rule.matches(rel_path, is_dir):
            ignored = not rule.negate
    return ignored


class SourceFilePredicate:
    """Selects regular source files outside vendored, generated and excluded paths."""

    def __init__(
        self,
        root: Path,
        *,
        suffixes: Sequence[str],
        vendor_segments: Sequence[str] = (),
        generated_names: Sequence[str] = (),
        exclude_paths: Sequence[str] = (),
    ) -> None:
        self.root = root
        self.suffixes = tuple(suffixes)
        self._vendor = tuple(
            f"/{segment.strip('/')}/" for segment in vendor_segments if segment.strip("/")
        )
        self._generated = frozenset(generated_names)
        self._rules: List[IgnoreRule] = [
            rule for rule in (build_ignore_rule(p) for p in exclude_paths) if rule is not None
        ]

    @classmethod
    def from_config(cls, root: Path, config: HeaderFixConfig) -> "SourceFilePredicate":
        return cls(
            root,
            suffixes=config.suffixes,
            vendor_segments=config.vendor_segments,
            generated_names=config.generated_names,
            exclude_paths=config.exclude_paths,
        )

    def __call__(self, path: Path, stat_result: os.stat_result) -> bool:
        if not stat.S_ISREG(stat_result.st_mode):
            return False
        if not path.name.endswith(self.suffixes):
            return False
        if path.name in self._generated:
            return False
        rel_path = _relative(self.root, path)
        if self._in_vendor(rel_path):
            return False
        return not is_ignored(rel_path, False, self._rules)

    def allows_dir(self, path: Path) -> bool:
        """Return False for directories whose contents can never match."""
        rel_dir = _relative(self.root, path)
        if self._in_vendor(f"{rel_dir}/"):
            return False
        return not is_ignored(rel_dir, True, self._rules)

    def _in_vendor(self, rel_path: str) -> bool:
        padded = f"/{rel_path}"
        return any(segment in padded for segment in self._vendor)


def iter_files(
    root: Path,
    predicate: FilePredicate,
    *,
    descend: Optional[DirPredicate] = None,
) -> Iterator[Path]:
    """Yield regular files under `root` accepted by `predicate`, lazily and unordered.

    Entries the walk cannot read are skipped rather than aborting the traversal.
    """

    def _on_error(exc: OSError) -> None:
        logger.debug("Skipping unreadable entry %s: %s", exc.filename, exc.strerror or exc)

    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error):
        current_dir = Path(dirpath)

        kept = []
        for name in dirnames:
            if name in _EXCLUDED_DIRS:
                continue
            if descend is not None and not descend(current_dir / name):
                continue
            kept.append(name)
        dirnames[:] = kept

        for filename in filenames:
            path = current_dir / filename
            try:
                stat_result = os.lstat(path)
            except OSError as exc:
                _on_error(exc)
                continue
            if predicate(path, stat_result):
                yield path


def _relative(root: Path, path: Path) -> str:
    if path == root:
        return ""
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()


__all__ = [
    "IgnoreRule",
    "SourceFilePredicate",
    "build_ignore_rule",
    "is_ignored",
    "iter_files",
]
