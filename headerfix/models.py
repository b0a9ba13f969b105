"""Core data models shared across headerfix components."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import IO, TYPE_CHECKING, Optional

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .render import HeaderTemplate


@dataclass(frozen=True)
class Commit:
    """A resolved revision of the repository."""

    sha: str
    when: datetime


@dataclass(frozen=True)
class BlameLine:
    """Attribution of a single source line to the commit that last touched it."""

    line: str
    when: datetime
    revision: str


@dataclass(frozen=True)
class CopyrightInfo:
    """Values substituted into a header template."""

    year: int
    holder: str


@dataclass(frozen=True)
class WorkItem:
    """One candidate file awaiting processing; `path` doubles as the job key."""

    path: str
    repo_root: str
    holder: str
    fix: bool
    head: Commit
    template: "HeaderTemplate"

    @property
    def key(self) -> str:
        return self.path


@dataclass
class SniffResult:
    """Bounded file prefix plus the handle positioned right after it."""

    prefix: bytes
    handle: IO[bytes]
    licensed: bool
    generated: bool


class OutcomeKind(str, Enum):
    REWRITTEN = "rewritten"
    NO_ACTION = "no-action"
    FAILED = "failed"


@dataclass(frozen=True)
class Outcome:
    """Terminal result of processing one work item."""

    path: str
    kind: OutcomeKind
    reason: Optional[str] = None
    error: Optional[BaseException] = field(default=None, compare=False)
    trace: Optional[str] = field(default=None, compare=False)

    @property
    def rewritten(self) -> bool:
        return self.kind is OutcomeKind.REWRITTEN

    @property
    def failed(self) -> bool:
        return self.kind is OutcomeKind.FAILED

    @classmethod
    def done(cls, path: str) -> "Outcome":
        return cls(path=path, kind=OutcomeKind.REWRITTEN)

    @classmethod
    def skipped(cls, path: str, reason: str) -> "Outcome":
        return cls(path=path, kind=OutcomeKind.NO_ACTION, reason=reason)

    @classmethod
    def error_for(
        cls, path: str, error: BaseException, trace: Optional[str] = None
    ) -> "Outcome":
        return cls(path=path, kind=OutcomeKind.FAILED, error=error, trace=trace)


@dataclass
class Tally:
    """Running totals folded from the outcome stream."""

    total: int = 0
    fixed: int = 0
    compliant: int = 0
    errored: int = 0

    def record(self, outcome: Outcome) -> None:
        if outcome.rewritten:
            self.fixed += 1
        elif outcome.failed:
            self.errored += 1
        else:
            self.compliant += 1
        self.total += 1
