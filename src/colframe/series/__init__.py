"""Typed nullable columns.

A :class:`Series` is the unit of storage of colframe:
a named sequence of values that all share the same
data type, where any value can be missing (null).

Values are kept in an Apache Arrow array, a contiguous
buffer of values paired with a validity bitmap
that tells which entries are null::

    values:   [1, 0, 3]
    validity: [1, 0, 1]   -->   [1, null, 3]

Operations on a Series are vectorized and never modify
their inputs, they return a new Series with the result.
Nulls propagate through arithmetic, are ``False`` in
comparisons and are skipped by reductions:

>>> s = Series("n", [1, None, 3])
>>> (s * 2).to_pylist()
[2, None, 6]
>>> (s >= 2).to_pylist()
[False, False, True]
>>> s.sum()
4

Comparisons produce boolean Series, which are used
as masks to select values or rows.
"""

from .series import Series
from .strings import StringAccessor

__all__ = ("Series", "StringAccessor")
