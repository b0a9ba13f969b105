"""Bounded-concurrency execution of work items."""

from __future__ import annotations

import queue
import threading
import traceback
from typing import Callable, Iterable, Iterator, List, Optional, Set

from .logging import get_logger
from .models import Outcome, WorkItem

DEFAULT_CONCURRENCY = 6

Job = Callable[[WorkItem], Outcome]

_DONE = object()

logger = get_logger("pipeline")


def run_pipeline(
    items: Iterable[WorkItem],
    job: Job,
    concurrency: int = DEFAULT_CONCURRENCY,
    *,
    queue_size: Optional[int] = None,
) -> Iterator[Outcome]:
    """Run `job` over `items` with at most `concurrency` executing at once.

    Outcomes are yielded as they complete, in no particular order, exactly one
    per distinct work item. The stream ends once every item has been consumed
    and every worker has exited.
    """
    if concurrency < 1:
        raise ValueError("concurrency must be at least 1")

    work: "queue.Queue[object]" = queue.Queue(maxsize=queue_size or concurrency * 2)
    results: "queue.Queue[object]" = queue.Queue()
    producer_errors: List[BaseException] = []
    worker_errors: List[BaseException] = []

    def _produce() -> None:
        seen: Set[str] = set()
        try:
            for item in items:
                if item.key in seen:
                    logger.warning("Dropping duplicate work item %s", item.key)
                    continue
                seen.add(item.key)
                work.put(item)
        except Exception as exc:
            producer_errors.append(exc)
        finally:
            for _ in range(concurrency):
                work.put(_DONE)

    def _work() -> None:
        try:
            while True:
                item = work.get()
                if item is _DONE:
                    return
                try:
                    outcome = _execute(job, item)  # type: ignore[arg-type]
                except BaseException as exc:
                    # Still one outcome for the item; the abort resurfaces in the consumer.
                    worker_errors.append(exc)
                    outcome = Outcome.error_for(
                        item.path, exc, trace=traceback.format_exc()  # type: ignore[attr-defined]
                    )
                results.put(outcome)
        finally:
            results.put(_DONE)

    producer = threading.Thread(target=_produce, name="headerfix-producer", daemon=True)
    workers = [
        threading.Thread(target=_work, name=f"headerfix-worker-{index}", daemon=True)
        for index in range(concurrency)
    ]
    producer.start()
    for worker in workers:
        worker.start()

    remaining = concurrency
    while remaining:
        result = results.get()
        if result is _DONE:
            remaining -= 1
            continue
        yield result  # type: ignore[misc]

    producer.join()
    for worker in workers:
        worker.join()

    if producer_errors:
        raise producer_errors[0]
    if worker_errors:
        raise worker_errors[0]


def _execute(job: Job, item: WorkItem) -> Outcome:
    try:
        return job(item)
    except Exception as exc:
        return Outcome.error_for(item.path, exc, trace=traceback.format_exc())


__all__ = ["DEFAULT_CONCURRENCY", "Job", "run_pipeline"]
