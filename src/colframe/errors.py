"""Errors raised by colframe.

Every error raised on purpose by the library derives from
:class:`ColframeError`, so a single ``except ColframeError``
is enough to catch any usage error coming from the engine.

When a builtin exception exists with the same meaning,
the error also derives from it. That way code which
already handles ``KeyError`` for a missing column or
``IndexError`` for an invalid position keeps working:

>>> from colframe import Dataframe
>>> df = Dataframe({"a": [1, 2, 3]})
>>> try:
...     df.column("b")
... except KeyError as e:
...     print(type(e).__name__)
ColumnNotFound
"""


class ColframeError(Exception):
    """Base class for all the errors raised by colframe."""


class ShapeError(ColframeError, ValueError):
    """Data doesn't have the expected shape.

    Raised when two columns of different length are combined
    or when the storage of a column is internally inconsistent.
    """


class LengthMismatch(ShapeError):
    """A column or mask length disagrees with the row count of a Dataframe."""

    def __init__(self, name: str, expected: int, found: int) -> None:
        self.name = name
        self.expected = expected
        self.found = found
        super().__init__(
            f"Length mismatch for '{name}': expected {expected} rows, found {found}"
        )


class DuplicateColumn(ColframeError, ValueError):
    """A column with the same name already exists."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Duplicate column name: '{name}'")


class ColumnNotFound(ColframeError, KeyError):
    """The requested column doesn't exist."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(name)

    def __str__(self) -> str:
        return f"Column not found: '{self.name}'"


class TypeMismatch(ColframeError, TypeError):
    """The data type of a column is not the one required by the operation."""


class CastError(ColframeError, ValueError):
    """Values can't be converted exactly to the requested data type."""


class UnsupportedAggregation(ColframeError, TypeError):
    """The aggregation can't be computed on the data type of the column."""


class DivisionByZero(ColframeError, ZeroDivisionError):
    """Integral division by zero."""


class IndexOutOfRange(ColframeError, IndexError):
    """Position is outside of the valid range."""

    def __init__(self, index: int, length: int) -> None:
        self.index = index
        self.length = length
        super().__init__(f"Index {index} out of range for length {length}")


class ParseError(ColframeError, ValueError):
    """An adapter was unable to parse its input."""
