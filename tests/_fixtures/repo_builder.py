"""Helper utilities for constructing temporary git repositories in tests."""

from __future__ import annotations

import os
import shutil
import subprocess
import textwrap
from pathlib import Path
from typing import Mapping

import pytest

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git binary not available")


class RepoBuilder:
    """Utility for writing files into a throwaway repository and committing them."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "repo"
        self.root.mkdir()

    def write(self, files: Mapping[str, str | bytes]) -> None:
        """Write `path -> contents` entries into the repository."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_text(textwrap.dedent(content).lstrip("\n"), encoding="utf-8")

    def init(self) -> None:
        self._git("init", "-q")

    def commit(self, message: str, *, date: str) -> str:
        """Stage everything and commit it with the given author/committer date."""
        env = {"GIT_AUTHOR_DATE": date, "GIT_COMMITTER_DATE": date}
        self._git("add", "-A")
        self._git("commit", "-q", "--allow-empty", "-m", message, env=env)
        return self._git("rev-parse", "HEAD").strip()

    def read(self, relative: str) -> bytes:
        return (self.root / relative).read_bytes()

    def path(self) -> Path:
        """Return the repository root path."""
        return self.root

    def _git(self, *args: str, env: Mapping[str, str] | None = None) -> str:
        full_env = os.environ.copy()
        full_env.update(
            {
                "GIT_AUTHOR_NAME": "headerfix",
                "GIT_AUTHOR_EMAIL": "headerfix@example.com",
                "GIT_COMMITTER_NAME": "headerfix",
                "GIT_COMMITTER_EMAIL": "headerfix@example.com",
                "GIT_CONFIG_NOSYSTEM": "1",
            }
        )
        if env:
            full_env.update(env)
        completed = subprocess.run(
            ["git", "-c", "commit.gpgsign=false", *args],
            cwd=str(self.root),
            env=full_env,
            check=True,
            text=True,
            capture_output=True,
        )
        return completed.stdout


__all__ = ["RepoBuilder", "requires_git"]
