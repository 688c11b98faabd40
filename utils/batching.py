import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable

logger = logging.getLogger(__name__)


@dataclass
class BatchOutcome:
    succeeded: list = field(default_factory=list)
    failed: list[tuple[Any, Exception]] = field(default_factory=list)


def run_bounded(
    func: Callable[[Any], Any],
    items: Iterable,
    max_workers: int = 4,
) -> BatchOutcome:
    """Apply func to every item with at most max_workers calls in flight.

    A failing item is recorded and the rest keep going; nothing is rolled back.
    """
    items = list(items)
    outcome = BatchOutcome()
    if not items:
        return outcome
    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(items)))) as pool:
        futures = [(item, pool.submit(func, item)) for item in items]
        for item, future in futures:
            try:
                outcome.succeeded.append(future.result())
            except Exception as e:
                logger.warning("Batch item %r failed: %s", item, e)
                outcome.failed.append((item, e))
    return outcome
