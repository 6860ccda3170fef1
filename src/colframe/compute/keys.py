"""Build hashable keys out of the rows of one or more columns.

Both grouping and joining need to identify which rows
share the same values on a set of key columns.
This is done by building, for each row, a tuple
with the value of every key column for that row::

    city:  ["Rome", "Paris", "Rome"]
    shop:  ["A",    "A",     "A"]
    keys:  [("Rome", "A"), ("Paris", "A"), ("Rome", "A")]

Tuples of Python values can be used as keys of a ``dict``
so rows can be grouped by hashing them.

Nulls are represented by ``None``, which is equal to other
``None`` values, so rows with a null key in the same position
end up with equal keys. Floating point NaN values are
replaced by a marker, because NaN is not equal to itself
and each NaN would otherwise create a different key.

>>> import pyarrow as pa
>>> list(row_keys([pa.array(["Rome", "Paris", None]), pa.array([1, 2, 3])]))
[('Rome', 1), ('Paris', 2), (None, 3)]
>>> group_row_indices([pa.array(["b", "a", "b", None, None])])
{('b',): [0, 2], ('a',): [1], (None,): [3, 4]}
"""

import math
from typing import Any, Iterator, Sequence

import pyarrow as pa


class _NaNKey:
    """Stands for NaN values in row keys."""

    def __eq__(self, other: object) -> bool:
        return isinstance(other, _NaNKey)

    def __hash__(self) -> int:
        return hash("NaN")

    def __repr__(self) -> str:
        return "NaN"


NAN_KEY = _NaNKey()


def normalize_key_value(value: Any) -> Any:
    """Make a value usable as a component of a row key."""
    if isinstance(value, float) and math.isnan(value):
        return NAN_KEY
    return value


def row_keys(arrays: Sequence[pa.Array]) -> Iterator[tuple]:
    """Yield one key tuple for each row of the provided arrays."""
    columns = [[normalize_key_value(v) for v in array.to_pylist()] for array in arrays]
    return zip(*columns)


def group_row_indices(arrays: Sequence[pa.Array]) -> dict[tuple, list[int]]:
    """Map each distinct row key to the indices of the rows having it.

    Keys appear in the order they are first seen in the data,
    not in hash order, so the result is deterministic.
    """
    groups: dict[tuple, list[int]] = {}
    for row_idx, key in enumerate(row_keys(arrays)):
        groups.setdefault(key, []).append(row_idx)
    return groups
