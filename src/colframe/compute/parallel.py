"""Fan out per-row work across a fixed pool of workers.

Some transformations, like applying a Python function
to every value of a column, can't be vectorized through
the Arrow compute kernels. For those, the work can be split
across multiple workers.

The rows are partitioned statically in contiguous ranges,
one for each worker::

    rows:    0 1 2 3 4 5 6 7 8 9
    ranges: [0 1 2 3][4 5 6][7 8 9]

Each worker only reads its own range of the input and
produces the values for the same range of the output,
so workers never share any mutable state and no locking
is necessary. The results are concatenated back
in range order once all workers completed, which
guarantees that the output order is the same of a
sequential execution regardless of scheduling.

>>> parallel_map(lambda v: v * 2, [1, 2, 3, 4, 5], max_workers=2)
[2, 4, 6, 8, 10]
"""

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Sequence

logger = logging.getLogger(__name__)


def partition_ranges(length: int, partitions: int) -> list[range]:
    """Split ``range(length)`` in at most ``partitions`` contiguous ranges.

    The ranges have sizes that differ by at most one and
    empty ranges are never produced.

    >>> partition_ranges(10, 3)
    [range(0, 4), range(4, 7), range(7, 10)]
    """
    partitions = max(1, min(partitions, length))
    size, remainder = divmod(length, partitions)
    ranges = []
    start = 0
    for idx in range(partitions):
        end = start + size + (1 if idx < remainder else 0)
        if end > start:
            ranges.append(range(start, end))
        start = end
    return ranges


def parallel_map(
    func: Callable[[Any], Any], values: Sequence[Any], max_workers: int | None = None
) -> list[Any]:
    """Apply ``func`` to each value using a pool of workers.

    :param func: The function to apply to each value.
    :param values: The values to apply the function to.
    :param max_workers: How many workers to use, defaults to the number of CPUs.
    """
    max_workers = max_workers or os.cpu_count() or 1
    ranges = partition_ranges(len(values), max_workers)
    if len(ranges) <= 1:
        return [func(v) for v in values]

    def _run(rows: range) -> list[Any]:
        return [func(values[idx]) for idx in rows]

    logger.debug("Fan out of %d values on %d workers", len(values), len(ranges))
    with ThreadPoolExecutor(max_workers=len(ranges)) as executor:
        futures = [executor.submit(_run, rows) for rows in ranges]
        # Collecting in submission order acts as the completion barrier
        # and preserves the order of the ranges.
        results = []
        for future in futures:
            results.extend(future.result())
    return results
