"""Progress reporting over the outcome stream."""

from __future__ import annotations

import sys
from datetime import timedelta
from typing import Iterable, TextIO

from .logging import get_logger, note_progress_line
from .models import Outcome, Tally


class Reporter:
    """Folds outcomes into a Tally and prints a cumulative progress line after each."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream = stream if stream is not None else sys.stdout
        self.logger = get_logger("report")

    def consume(self, outcomes: Iterable[Outcome]) -> Tally:
        tally = Tally()
        for outcome in outcomes:
            tally.record(outcome)
            if outcome.failed:
                self.logger.error("err:: %r: %s", outcome.path, outcome.error)
                if outcome.trace:
                    self.logger.debug("%s", outcome.trace)
            elif outcome.reason:
                self.logger.debug("%s: %s", outcome.reason, outcome.path)
            self.stream.write(format_progress(tally) + "\r")
            self.stream.flush()
            note_progress_line()
        return tally

    def finish(self, elapsed: timedelta) -> None:
        self.stream.write(f"\nTimeSpent: {format_elapsed(elapsed)}\n")
        self.stream.flush()
        note_progress_line(False)


def format_progress(tally: Tally) -> str:
    return (
        f"Total: {tally.total} :: AddedLicenses: {tally.fixed} "
        f"AlreadyHaveLicenses: {tally.compliant} Errors: {tally.errored}"
    )


def format_elapsed(elapsed: timedelta) -> str:
    return f"{elapsed.total_seconds():.3f}s"


__all__ = ["Reporter", "format_elapsed", "format_progress"]
