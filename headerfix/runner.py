"""Run orchestration: preconditions, work-item production and reporting."""

from __future__ import annotations

import time
from datetime import timedelta
from pathlib import Path
from typing import Callable, Iterator, Optional

from .config import HeaderFixConfig, load_config
from .errors import GitError, RepositoryError
from .git.repository import GitRepository
from .logging import get_logger
from .models import Commit, Tally, WorkItem
from .pipeline import run_pipeline
from .remediator import Remediator
from .render import HeaderTemplate, select_template
from .report import Reporter
from .scanner import SourceFilePredicate, iter_files


class HeaderFixer:
    """Coordinates a full scan-and-fix run over one repository."""

    def __init__(
        self,
        repository_factory: Callable[[Path], GitRepository] | None = None,
        reporter: Reporter | None = None,
    ) -> None:
        self._open_repository = repository_factory or GitRepository.open
        self.reporter = reporter or Reporter()
        self.logger = get_logger("runner")

    def run(
        self,
        path: str | Path,
        *,
        fix: bool = False,
        holder: Optional[str] = None,
        template: Optional[str] = None,
        concurrency: Optional[int] = None,
        config: Optional[HeaderFixConfig] = None,
    ) -> Tally:
        """Scan `path`, reporting (and with `fix`, adding) missing license headers.

        Raises RepositoryError when the repository or its head cannot be resolved.
        """
        started = time.monotonic()
        scan_root = Path(path).expanduser().resolve()

        try:
            repository = self._open_repository(scan_root)
        except GitError as exc:
            raise RepositoryError(f"Cannot open repository at {scan_root}: {exc}") from exc
        try:
            head = repository.commit(repository.head())
        except GitError as exc:
            raise RepositoryError(f"Cannot resolve HEAD of {repository.root}: {exc}") from exc

        settings = config or load_config(repository.root)
        effective_holder = holder or settings.holder
        effective_template = select_template(template or settings.template)
        workers = concurrency or settings.concurrency

        self.logger.info(
            "Scanning %s at %s (%s, fix=%s, concurrency=%d)",
            scan_root,
            head.sha[:12],
            effective_template.value,
            fix,
            workers,
        )

        predicate = SourceFilePredicate.from_config(repository.root, settings)
        remediator = Remediator(repository, comment_prefix=settings.comment_prefix)
        items = self._work_items(
            scan_root,
            predicate,
            repo_root=repository.root,
            holder=effective_holder,
            fix=fix,
            head=head,
            template=effective_template,
        )

        tally = self.reporter.consume(run_pipeline(items, remediator.process, workers))
        self.reporter.finish(timedelta(seconds=time.monotonic() - started))
        return tally

    @staticmethod
    def _work_items(
        scan_root: Path,
        predicate: SourceFilePredicate,
        *,
        repo_root: Path,
        holder: str,
        fix: bool,
        head: Commit,
        template: HeaderTemplate,
    ) -> Iterator[WorkItem]:
        for file_path in iter_files(scan_root, predicate, descend=predicate.allows_dir):
            yield WorkItem(
                path=str(file_path),
                repo_root=str(repo_root),
                holder=holder,
                fix=fix,
                head=head,
                template=template,
            )


__all__ = ["HeaderFixer"]
