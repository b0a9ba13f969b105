"""Read-only access to a git repository through the git CLI."""

from __future__ import annotations

import re
import subprocess
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from ..errors import GitError
from ..models import BlameLine, Commit

_ENTRY_HEADER = re.compile(r"^([0-9a-f]{40}|[0-9a-f]{64}) \d+ \d+(?: \d+)?$")
_TZ_OFFSET = re.compile(r"^([+-])(\d{2})(\d{2})$")


class GitRepository:
    """Resolves revisions and line attribution for one working copy."""

    def __init__(self, root: Path, runner: Callable[..., str] | None = None) -> None:
        self.root = root
        self._runner = runner or self._default_runner

    @classmethod
    def open(cls, path: Path | str, runner: Callable[..., str] | None = None) -> "GitRepository":
        """Locate the working-copy top level containing `path`."""
        start = Path(path).expanduser().resolve()
        if not start.is_dir():
            raise GitError(f"Repository path is not a directory: {path}")
        probe = cls(start, runner=runner)
        toplevel = probe._run(["git", "rev-parse", "--show-toplevel"]).strip()
        if not toplevel:
            raise GitError(f"{start} is not inside a git working tree")
        return cls(Path(toplevel).resolve(), runner=runner)

    def head(self) -> str:
        """Return the full hash HEAD currently points at."""
        output = self._run(["git", "rev-parse", "--verify", "HEAD^{commit}"]).strip()
        if not output:
            raise GitError("HEAD does not resolve to a commit")
        return output

    def commit(self, revision: str) -> Commit:
        output = self._run(
            ["git", "show", "-s", "--format=%H%n%at%n%ai", f"{revision}^{{commit}}"]
        )
        lines = output.strip().splitlines()
        if len(lines) < 3:
            raise GitError(f"Unexpected output describing {revision}: {output!r}")
        sha, timestamp, iso = lines[0].strip(), lines[1].strip(), lines[2].strip()
        offset = iso.rsplit(" ", 1)[-1] if " " in iso else "+0000"
        return Commit(sha=sha, when=_to_datetime(timestamp, offset))

    def blame(self, commit: Commit, relative_path: str) -> List[BlameLine]:
        """Attribute each line of `relative_path` as it exists in `commit`."""
        output = self._run(
            ["git", "blame", "--line-porcelain", commit.sha, "--", relative_path]
        )
        return parse_line_porcelain(output)

    # ------------------------------------------------------------------
    # Internals

    def _run(self, args: Iterable[str]) -> str:
        args = list(args)
        try:
            return self._runner(args, cwd=self.root, capture_output=True)
        except subprocess.CalledProcessError as exc:
            detail = _decode(exc.stderr).strip() or f"exit status {exc.returncode}"
            raise GitError(f"{' '.join(args[:2])} failed: {detail}") from exc
        except OSError as exc:
            raise GitError(f"Unable to run git: {exc}") from exc

    @staticmethod
    def _default_runner(
        args: Iterable[str],
        *,
        cwd: Path,
        capture_output: bool = False,
    ) -> str:
        # Bytes mode keeps a bare \r inside blamed content intact.
        completed = subprocess.run(
            list(args),
            cwd=str(cwd),
            check=True,
            capture_output=capture_output,
        )
        return _decode(completed.stdout) if capture_output else ""


def parse_line_porcelain(output: str) -> List[BlameLine]:
    """Parse `git blame --line-porcelain` output into per-line records."""
    lines: List[BlameLine] = []
    revision: Optional[str] = None
    author_time: Optional[str] = None
    author_tz = "+0000"

    # Porcelain records end with \n; content may itself hold \r, \f and other breaks.
    records = output.split("\n")
    if records and records[-1] == "":
        records.pop()
    for raw in records:
        if raw.startswith("\t"):
            if revision is None:
                raise GitError("Malformed blame output: content before entry header")
            when = _to_datetime(author_time or "0", author_tz)
            lines.append(BlameLine(line=raw[1:], when=when, revision=revision))
            revision, author_time, author_tz = None, None, "+0000"
            continue

        if _ENTRY_HEADER.match(raw):
            revision = raw.split(" ", 1)[0]
            continue

        key, _, value = raw.partition(" ")
        if key == "author-time":
            author_time = value.strip()
        elif key == "author-tz":
            author_tz = value.strip()

    return lines


def _decode(data: bytes | str | None) -> str:
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data


def _to_datetime(timestamp: str, offset: str) -> datetime:
    try:
        seconds = int(timestamp)
    except ValueError as exc:
        raise GitError(f"Invalid timestamp in git output: {timestamp!r}") from exc
    return datetime.fromtimestamp(seconds, tz=_parse_offset(offset))


def _parse_offset(offset: str) -> timezone:
    match = _TZ_OFFSET.match(offset)
    if not match:
        return timezone.utc
    sign, hours, minutes = match.groups()
    delta = timedelta(hours=int(hours), minutes=int(minutes))
    return timezone(-delta if sign == "-" else delta)


__all__ = ["GitRepository", "parse_line_porcelain"]
