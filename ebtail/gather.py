"""
Bounded fan-out/gather over a thread pool.

Each item is handed to a worker that returns an owned result. A worker that
raises drops its item; the rest of the batch is unaffected.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Iterable, List, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


def fan_out(
    items: Iterable[T],
    task: Callable[[T], R],
    max_workers: int,
    describe: Optional[Callable[[T], str]] = None,
) -> List[R]:
    """
    Run ``task`` over every item with at most ``max_workers`` in flight.

    Args:
        items: Work items
        task: Worker; raising drops the item
        max_workers: Pool size
        describe: Renders an item for failure logs (defaults to repr)

    Returns:
        Results in completion order. Only returns once every task has
        finished or failed.
    """
    describe = describe or repr
    results: List[R] = []

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        futures = {pool.submit(task, item): item for item in items}
        for fut in as_completed(futures):
            item = futures[fut]
            try:
                results.append(fut.result())
            except Exception as e:
                logger.warning(f"Dropping {describe(item)}: {e}")

    return results
