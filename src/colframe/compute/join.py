"""Join two Dataframes on one or more key columns.

Joins are implemented with a hash join algorithm:
a hash table is built from one of the tables (the *build side*)
mapping each key to the rows having it, then the other
table (the *probe side*) is scanned looking up each of its
keys in the hash table to find the matching rows.

The right table is always the build side and the left
table is always the probe side, so the output follows
the order of the rows in the left table.

>>> from colframe import Dataframe
>>> left = Dataframe({"id": [1, 2, 3], "name": ["Alice", "Bob", "Charlie"]})
>>> right = Dataframe({"id": [3, 2], "age": [25, 30]})
>>> JoinEngine(left, right, "id").execute().to_pydict()
{'id': [2, 3], 'name': ['Bob', 'Charlie'], 'age': [30, 25]}

Supposing we have two tables::

    left:
    +----+--------+
    | id | name   |
    +----+--------+
    | 1  | Alice  |
    | 2  | Bob    |
    | 3  | Charlie|
    +----+--------+

    right:
    +----+-----+
    | id | age |
    +----+-----+
    | 3  | 25  |
    | 2  | 30  |
    +----+-----+

We would perform the following steps:

1. Build the hash table from the keys of the right table,
   mapping each key to the list of rows where it appears.
   Keys can be duplicated, in that case the list will
   contain more than one row::

    {3: [0], 2: [1]}

2. Probe the hash table with the keys of the left table,
   in order, and record a pair of row indices for each match::

    id=1 -> no match
    id=2 -> (1, 1)
    id=3 -> (2, 0)

   Depending on the join type, rows that found no match
   are discarded (inner join) or recorded with a missing index
   for the other side (left, right and outer joins).

3. Take the rows of both tables through the recorded pairs
   and combine their columns. Missing indices produce nulls::

    +----+--------+-----+
    | id | name   | age |
    +----+--------+-----+
    | 2  | Bob    | 30  |
    | 3  | Charlie| 25  |
    +----+--------+-----+

A null value in a key never matches anything,
not even another null.
"""

import logging
from typing import TYPE_CHECKING

import pyarrow as pa
import pyarrow.compute as pc

from ..errors import DuplicateColumn, TypeMismatch
from .keys import row_keys

if TYPE_CHECKING:
    from ..dataframe import Dataframe

logger = logging.getLogger(__name__)

JOIN_TYPES = ("inner", "left", "right", "outer")

JoinResult = list[tuple[int | None, int | None]]


class JoinEngine:
    """Join two Dataframes using a hash join.

    Supports inner, left, right and outer joins
    on one or more key columns.

    The result contains all the columns of the left table
    followed by the columns of the right table, except
    for the right keys, whose values are merged in the left keys.
    Any other column name present in both tables is a conflict
    and the join fails with :class:`colframe.errors.DuplicateColumn`.
    """

    def __init__(
        self,
        left: "Dataframe",
        right: "Dataframe",
        left_on: str | list[str],
        right_on: str | list[str] | None = None,
        how: str = "inner",
    ) -> None:
        """
        :param left: The left table, which is probed for matches.
        :param right: The right table, from which the hash table is built.
        :param left_on: The key or keys to join on in the left table.
        :param right_on: The key or keys to join on in the right table,
                         when not provided the same as ``left_on``.
        :param how: One of ``inner``, ``left``, ``right``, ``outer``.
        """
        if how not in JOIN_TYPES:
            raise ValueError(f"Unsupported join type {how!r}, expected one of {JOIN_TYPES}")
        if right_on is None:
            right_on = left_on
        self.left_on = [left_on] if isinstance(left_on, str) else list(left_on)
        self.right_on = [right_on] if isinstance(right_on, str) else list(right_on)
        if not self.left_on or len(self.left_on) != len(self.right_on):
            raise ValueError("Left and right keys must be provided and have the same length")

        self.left = left
        self.right = right
        self.how = how

        for left_key, right_key in zip(self.left_on, self.right_on):
            left_type = left.column(left_key).dtype
            right_type = right.column(right_key).dtype
            if left_type != right_type:
                raise TypeMismatch(
                    f"Join key '{left_key}' is {left_type} but '{right_key}' is {right_type}"
                )

    def __str__(self) -> str:
        return (
            f"JoinEngine(how={self.how}, left_on={self.left_on}, right_on={self.right_on}, "
            f"left={self.left.columns}, right={self.right.columns})"
        )

    def build(self) -> dict[tuple, list[int]]:
        """Build the hash table of the right table keys.

        Rows with a null in any of the keys are left out,
        as they can't match anything.
        """
        key_arrays = [self.right.column(key).to_arrow() for key in self.right_on]
        index: dict[tuple, list[int]] = {}
        for row_idx, key in enumerate(row_keys(key_arrays)):
            if None in key:
                continue
            index.setdefault(key, []).append(row_idx)
        return index

    def join_indices(self) -> JoinResult:
        """Compute the pairs of (left row, right row) that form the result.

        Either side of a pair can be ``None`` when a row
        had no match and the join type preserves it.
        """
        index = self.build()
        keep_left = self.how in ("left", "outer")
        keep_right = self.how in ("right", "outer")

        pairs: JoinResult = []
        matched_right: set[int] = set()
        key_arrays = [self.left.column(key).to_arrow() for key in self.left_on]
        for left_idx, key in enumerate(row_keys(key_arrays)):
            matches = None if None in key else index.get(key)
            if matches:
                for right_idx in matches:
                    pairs.append((left_idx, right_idx))
                if keep_right:
                    matched_right.update(matches)
            elif keep_left:
                pairs.append((left_idx, None))

        if keep_right:
            pairs.extend(
                (None, right_idx)
                for right_idx in range(self.right.height)
                if right_idx not in matched_right
            )

        logger.debug(
            "%s join of %d and %d rows produced %d rows",
            self.how, self.left.height, self.right.height, len(pairs),
        )
        return pairs

    def execute(self) -> "Dataframe":
        """Perform the join and return the resulting Dataframe."""
        right_columns = [name for name in self.right.columns if name not in self.right_on]
        for name in right_columns:
            if name in self.left.columns:
                raise DuplicateColumn(name)

        pairs = self.join_indices()
        left_indices = pa.array([left_idx for left_idx, _ in pairs], type=pa.int64())
        right_indices = pa.array([right_idx for _, right_idx in pairs], type=pa.int64())

        result_columns = []
        for name in self.left.columns:
            column = self.left.column(name).take(left_indices)
            if name in self.left_on:
                # Rows coming only from the right table have no left key,
                # so the key value is taken from the right table.
                right_key = self.right_on[self.left_on.index(name)]
                right_values = self.right.column(right_key).take(right_indices)
                column = column.__class__(
                    name, pc.coalesce(column.to_arrow(), right_values.to_arrow())
                )
            result_columns.append(column)
        for name in right_columns:
            result_columns.append(self.right.column(name).take(right_indices))

        return self.left.__class__(result_columns)
