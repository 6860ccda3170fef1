"""Row selection through boolean masks.

A common request when analysing data is to keep
only the rows that respect a specific predicate.
An example is the ``WHERE`` condition in SQL queries.

Predicates are expressed as a mask: a boolean column
that contains ``true`` for each row that has to be
preserved and ``false`` for each row that has to be discarded.
Rows where the mask is null are discarded too.

To filter multiple columns consistently, the mask is
converted once to the list of indices of the rows to keep
and then the same indices are taken from every column,
so the columns stay aligned::

    mask:    [false, true, null, true]
    indices: [1, 3]

>>> mask_indices([False, True, None, True], 4).to_pylist()
[1, 3]
"""

from typing import Any, Sequence

import pyarrow as pa
import pyarrow.compute as pc

from .. import dtypes
from ..errors import LengthMismatch, TypeMismatch


def mask_array(mask: Any, length: int) -> pa.BooleanArray:
    """Validate a mask and return its boolean array.

    :param mask: A boolean Series, a :class:`pyarrow.BooleanArray`
                 or a sequence of booleans.
    :param length: The number of rows the mask is expected to select from.
    """
    if hasattr(mask, "to_arrow"):
        mask = mask.to_arrow()
    elif not isinstance(mask, pa.Array):
        mask = pa.array(list(mask), type=dtypes.bool_)

    if mask.type != dtypes.bool_:
        raise TypeMismatch(f"A mask must be a boolean column, got {mask.type}")
    if len(mask) != length:
        raise LengthMismatch("mask", length, len(mask))
    return mask


def mask_indices(mask: Any | Sequence[bool | None], length: int) -> pa.Array:
    """Get the indices of the rows selected by a mask.

    Null entries of the mask are treated as ``false``.
    """
    mask = mask_array(mask, length)
    return pc.indices_nonzero(pc.fill_null(mask, False))
