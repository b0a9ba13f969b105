"""Copyright-date resolution from line-level history attribution."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Iterable, Optional

from .git.repository import GitRepository
from .logging import get_logger
from .models import BlameLine, Commit

UNSET_TIME = datetime.fromtimestamp(0, tz=timezone.utc)

logger = get_logger("dates")


def earliest_timestamp(lines: Iterable[BlameLine], now: datetime) -> datetime:
    """Return the minimum positive line timestamp, or `now` when there is none."""
    earliest = now
    for line in lines:
        if UNSET_TIME < line.when < earliest:
            earliest = line.when
    return earliest


class DateResolver:
    """Finds the earliest commit date of any line of a tracked file."""

    def __init__(
        self,
        repository: GitRepository,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.repository = repository
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def resolve(self, head: Commit, relative_path: str) -> Optional[datetime]:
        """Return the earliest attributed timestamp, or None when no line has history.

        Raises GitError when blame cannot be computed for the path at `head`.
        """
        lines = self.repository.blame(head, relative_path)
        now = self._clock()
        earliest = earliest_timestamp(lines, now)
        if earliest is now:
            logger.debug("No dated history for %s at %s", relative_path, head.sha[:12])
            return None
        return earliest


__all__ = ["DateResolver", "UNSET_TIME", "earliest_timestamp"]
