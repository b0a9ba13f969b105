"""Per-file decision and rewrite logic."""

from __future__ import annotations

from pathlib import Path

from .dates import DateResolver
from .errors import GitError, RenderError
from .git.repository import GitRepository
from .logging import get_logger
from .models import CopyrightInfo, Outcome, WorkItem
from .render import render_header
from .sniffer import sniff

REASON_LICENSED = "licensed"
REASON_GENERATED = "generated"
REASON_REPORT_ONLY = "report-only"
REASON_NO_HISTORY = "no-history"


class Remediator:
    """Sniffs a file and, when it lacks a header, prepends one dated from history."""

    def __init__(
        self,
        repository: GitRepository,
        *,
        resolver: DateResolver | None = None,
        comment_prefix: str = "//",
    ) -> None:
        self.repository = repository
        self.resolver = resolver or DateResolver(repository)
        self.comment_prefix = comment_prefix
        self.logger = get_logger("remediator")

    def process(self, item: WorkItem) -> Outcome:
        try:
            sniffed = sniff(item.path)
        except OSError as exc:
            return Outcome.error_for(item.path, exc)

        handle = sniffed.handle
        try:
            if sniffed.licensed:
                return Outcome.skipped(item.path, REASON_LICENSED)
            if sniffed.generated:
                return Outcome.skipped(item.path, REASON_GENERATED)

            relative_path = _relative_to_root(item.path, item.repo_root)
            earliest = self.resolver.resolve(item.head, relative_path)
            if earliest is None:
                return Outcome.skipped(item.path, REASON_NO_HISTORY)
            if not item.fix:
                self.logger.debug("Missing header (report-only): %s", relative_path)
                return Outcome.skipped(item.path, REASON_REPORT_ONLY)

            header = render_header(
                CopyrightInfo(year=earliest.year, holder=item.holder),
                item.template,
                comment=self.comment_prefix,
            )
            content = b"".join((header, sniffed.prefix, handle.read()))
            handle.close()
            # Truncate-and-write in place; an interrupted write can leave a partial file.
            Path(item.path).write_bytes(content)
        except (OSError, GitError, RenderError, ValueError) as exc:
            return Outcome.error_for(item.path, exc)
        finally:
            handle.close()

        self.logger.debug("Added %s header to %s", item.template.value, item.path)
        return Outcome.done(item.path)


def _relative_to_root(path: str, repo_root: str) -> str:
    return Path(path).resolve().relative_to(Path(repo_root).resolve()).as_posix()


__all__ = [
    "REASON_GENERATED",
    "REASON_LICENSED",
    "REASON_NO_HISTORY",
    "REASON_REPORT_ONLY",
    "Remediator",
]
