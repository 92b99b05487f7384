"""
Parallel execution utilities for smelter_recon.

Runs a worker over many items on a thread pool with an optional tqdm progress
bar. Results come back in input order regardless of completion order.
"""

import logging
import sys
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import TypeVar

from tqdm import tqdm

logger = logging.getLogger(__name__)

T = TypeVar("T")  # Input type
R = TypeVar("R")  # Result type


def execute_parallel(
    items: Iterable[T],
    worker_func: Callable[[T], R],
    max_workers: int = 4,
    desc: str = "Processing",
    unit: str = "item",
    show_progress: bool = True,
    error_handler: Callable[[T, Exception], None] | None = None,
) -> list[tuple[T, R | None, Exception | None]]:
    """
    Execute a function in parallel across multiple items.

    Args:
        items: Iterable of items to process
        worker_func: Function to call for each item (takes item, returns result)
        max_workers: Maximum number of parallel workers
        desc: Progress bar description
        unit: Progress bar unit name
        show_progress: Whether to show progress bar
        error_handler: Optional callback for errors (item, exception) -> None

    Returns:
        List of tuples: (item, result, exception), in the order of ``items``

    Example:
        results = execute_parallel(rows, match_row, max_workers=8, desc="Matching")

        for row, outcome, error in results:
            if error:
                raise error
    """
    items_list = list(items)
    total = len(items_list)

    if total == 0:
        return []

    slots: list[tuple[T, R | None, Exception | None] | None] = [None] * total

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        future_to_slot = {
            executor.submit(worker_func, item): slot for slot, item in enumerate(items_list)
        }

        progress_bar = None
        if show_progress:
            progress_bar = tqdm(
                total=total,
                desc=desc,
                unit=unit,
                file=sys.stderr,  # Use stderr to avoid conflicts
                ncols=100,
                mininterval=1.0,  # Update at most once per second
                dynamic_ncols=True,
            )

        try:
            for future in as_completed(future_to_slot):
                slot = future_to_slot[future]
                item = items_list[slot]
                result = None
                error = None

                try:
                    result = future.result()
                except Exception as e:
                    error = e
                    if error_handler:
                        error_handler(item, e)
                    else:
                        logger.debug(f"Error processing {item}: {e}")
                finally:
                    slots[slot] = (item, result, error)
                    if progress_bar:
                        progress_bar.update(1)
        finally:
            if progress_bar:
                progress_bar.close()

    return [entry for entry in slots if entry is not None]
