"""Sorting of data based on one or more columns.

When computing ranks or looking for most significant
values, it's often necessary to sort the data based
on one or more columns.

Sorting a table can't happen by sorting each column
independently, as the rows would lose their alignment.
Instead the engine computes a single permutation,
the list of row indices in sorted order, and then
takes every column through that same permutation::

    name:  ["b", "a", "c"]        permutation: [1, 0, 2]
    value: [20,  10,  30]   -->   name:  ["a", "b", "c"]
                                  value: [10,  20,  30]

The permutation honors the keys in priority order: rows are
compared on the first key and only when they are equal on it
the next key is considered. The sort is stable, so rows
equal on all keys preserve their original relative order.

Nulls are always placed after all the non-null values,
regardless of the sort direction. Floating point NaN values
are placed after the numbers but before the nulls.

>>> import pyarrow as pa
>>> sort_indices([pa.array([3, 1, None, 4, 1])], [False]).to_pylist()
[1, 4, 0, 3, 2]
>>> sort_indices([pa.array([3, 1, None, 4, 1])], [True]).to_pylist()
[3, 0, 1, 4, 2]
"""

import logging
from typing import TYPE_CHECKING, Sequence

import pyarrow as pa
import pyarrow.compute as pc

if TYPE_CHECKING:
    from ..dataframe import Dataframe

logger = logging.getLogger(__name__)


def sort_indices(arrays: Sequence[pa.Array], descending: Sequence[bool]) -> pa.Array:
    """Compute the stable permutation that sorts the provided arrays.

    :param arrays: The keys to sort by in priority order, all of the same length.
    :param descending: If each key should be sorted in a descending order.
    """
    if len(arrays) != len(descending):
        raise ValueError("Keys and descending must have the same length")

    # Keys are named by position, so the same column can be used twice.
    names = [str(idx) for idx in range(len(arrays))]
    batch = pa.record_batch(list(arrays), names=names)
    sort_keys = [
        (name, "descending" if desc else "ascending", "at_end")
        for name, desc in zip(names, descending)
    ]
    return pc.sort_indices(batch, sort_keys=sort_keys)


class SortEngine:
    """Sort a Dataframe based on one or more columns.

    The engine expects a list of columns and a list of
    sort directions. The data will be sorted based on
    the columns in the order they are provided.

    >>> from colframe import Dataframe
    >>> df = Dataframe({"city": ["Rome", "Paris", "Rome"], "shops": [3, 5, 1]})
    >>> sorted_df = SortEngine(["city", "shops"], [False, True]).apply(df)
    >>> sorted_df.to_pydict()
    {'city': ['Paris', 'Rome', 'Rome'], 'shops': [5, 3, 1]}
    """

    def __init__(self, keys: list[str], descending: list[bool]) -> None:
        """
        :param keys: The columns to sort by in the order they should be sorted.
        :param descending: If each columns should be sorted in a descending order.
        """
        if len(keys) != len(descending):
            raise ValueError("Keys and descending must have the same length")
        if not keys:
            raise ValueError("At least one sorting key is required")

        self.keys = list(keys)
        self.descending = [bool(desc) for desc in descending]
        self.sorting = list(
            zip(self.keys, ("descending" if desc else "ascending" for desc in self.descending))
        )

    def __str__(self) -> str:
        return f"SortEngine(sorting={self.sorting})"

    def permutation(self, frame: "Dataframe") -> pa.Array:
        """Compute the row indices of ``frame`` in sorted order."""
        arrays = [frame.column(key).to_arrow() for key in self.keys]
        logger.debug("Sorting %d rows by %s", frame.height, self.sorting)
        return sort_indices(arrays, self.descending)

    def apply(self, frame: "Dataframe") -> "Dataframe":
        """Return a new Dataframe with the rows of ``frame`` sorted.

        The permutation is computed once and then applied
        uniformly to every column.
        """
        return frame.take(self.permutation(frame))
