"""Operations specific to string columns.

String operations are exposed through the ``.str``
accessor of a :class:`colframe.Series`, which is only
available for columns of ``string`` type:

>>> from colframe import Series
>>> names = Series("names", ["Alice", None, "bob"])
>>> names.str.to_uppercase().to_pylist()
['ALICE', None, 'BOB']
>>> names.str.len().to_pylist()
[5, None, 3]

Nulls are preserved by every operation.
"""

from typing import TYPE_CHECKING

import pyarrow as pa
import pyarrow.compute as pc

from .. import dtypes
from ..errors import TypeMismatch

if TYPE_CHECKING:
    from .series import Series


class StringAccessor:
    """Apply string functions to each value of a string column."""

    def __init__(self, series: "Series") -> None:
        """
        :param series: The string column to operate on.
        """
        if not dtypes.is_string(series.dtype):
            raise TypeMismatch(
                f"String operations require a string column, "
                f"'{series.name}' is {series.dtype}"
            )
        self.series = series

    def _wrap(self, array: pa.Array) -> "Series":
        return self.series.__class__(self.series.name, array)

    def len(self) -> "Series":
        """Number of characters of each string."""
        return self._wrap(pc.utf8_length(self.series.to_arrow()))

    def contains(self, pattern: str) -> "Series":
        """If each string contains ``pattern``."""
        return self._wrap(pc.match_substring(self.series.to_arrow(), pattern))

    def startswith(self, prefix: str) -> "Series":
        return self._wrap(pc.starts_with(self.series.to_arrow(), prefix))

    def endswith(self, suffix: str) -> "Series":
        return self._wrap(pc.ends_with(self.series.to_arrow(), suffix))

    def replace(self, old: str, new: str) -> "Series":
        """Replace all occurrences of ``old`` with ``new``."""
        return self._wrap(
            pc.replace_substring(self.series.to_arrow(), pattern=old, replacement=new)
        )

    def to_uppercase(self) -> "Series":
        return self._wrap(pc.utf8_upper(self.series.to_arrow()))

    def to_lowercase(self) -> "Series":
        return self._wrap(pc.utf8_lower(self.series.to_arrow()))

    def strip(self) -> "Series":
        """Remove leading and trailing whitespaces."""
        return self._wrap(pc.utf8_trim_whitespace(self.series.to_arrow()))

    def lstrip(self) -> "Series":
        return self._wrap(pc.utf8_ltrim_whitespace(self.series.to_arrow()))

    def rstrip(self) -> "Series":
        return self._wrap(pc.utf8_rtrim_whitespace(self.series.to_arrow()))
