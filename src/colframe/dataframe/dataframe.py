"""The Dataframe object itself."""

from typing import Any, Iterator, Mapping, Self, Sequence

import pyarrow as pa

from .. import dtypes
from ..compute.aggregate import GroupEngine
from ..compute.filtering import mask_indices
from ..compute.join import JoinEngine
from ..compute.sorting import SortEngine
from ..errors import (
    ColumnNotFound,
    DuplicateColumn,
    IndexOutOfRange,
    LengthMismatch,
    TypeMismatch,
)
from ..series import Series
from ..utils.tabulate import tabulate


class Dataframe:
    """Data structure that handles data in rows and columns.

    The Dataframe object allows to represent in-memory data
    and perform transformations over it.

    A Dataframe is an ordered collection of uniquely named
    :class:`colframe.Series`, all of the same length.
    Every operation that reorders or selects rows computes
    the row indices once and applies them to all the columns,
    so the columns never lose their alignment.

    The colframe dataframe object is eager, any transformation
    is applied immediately and returns a new Dataframe.

    >>> df = Dataframe({"name": ["Alice", "Bob", "Charlie"], "age": [25, None, 35]})
    >>> df.shape()
    (3, 2)
    >>> df.filter(df["age"] > 30).to_pydict()
    {'name': ['Charlie'], 'age': [35]}
    >>> print(df)
    name    | age
    ------- | ----
    Alice   | 25
    Bob     | null
    Charlie | 35
    """

    def __init__(
        self,
        columns: Sequence[Series] | Mapping[str, Any] | pa.Table | pa.RecordBatch | None = None,
    ) -> None:
        """
        :param columns: The columns of the Dataframe, either a list of
                        :class:`colframe.Series`, a mapping of names to values
                        or a :class:`pyarrow.Table`.
        """
        self._columns: dict[str, Series] = {}
        self._height = 0

        if columns is None:
            return
        if isinstance(columns, (pa.Table, pa.RecordBatch)):
            for name, values in zip(columns.column_names, columns.columns):
                self.add_column(name, values)
        elif isinstance(columns, Mapping):
            for name, values in columns.items():
                self.add_column(name, values)
        else:
            for column in columns:
                if not isinstance(column, Series):
                    raise TypeMismatch(f"Expected a Series, got {type(column).__name__}")
                self.add_column(column)

    @classmethod
    def from_arrow(cls, table: pa.Table | pa.RecordBatch) -> Self:
        """Create a Dataframe with the data of a :class:`pyarrow.Table`."""
        return cls(table)

    def to_arrow(self) -> pa.Table:
        """The data of the Dataframe as a :class:`pyarrow.Table`."""
        return pa.table(
            [column.to_arrow() for column in self._columns.values()],
            names=list(self._columns),
        )

    def to_pydict(self) -> dict[str, list[Any]]:
        """The values of each column, ``None`` for nulls."""
        return {name: column.to_pylist() for name, column in self._columns.items()}

    def to_pylist(self) -> list[dict[str, Any]]:
        """The rows of the Dataframe, as dictionaries."""
        return self.to_arrow().to_pylist()

    # Columns management

    def add_column(self, column: Series | str, values: Any = None) -> None:
        """Add a new column at the end of the Dataframe.

        The column can be provided as a :class:`colframe.Series`
        or as a name and the values for the column.
        When the Dataframe has no columns it takes
        the number of rows of the added column.
        """
        if isinstance(column, str):
            column = Series(column, values)
        else:
            column = column.copy()

        if self._columns and len(column) != self._height:
            raise LengthMismatch(column.name, self._height, len(column))
        if column.name in self._columns:
            raise DuplicateColumn(column.name)

        if not self._columns:
            self._height = len(column)
        self._columns[column.name] = column

    def drop_column(self, name: str) -> Series:
        """Remove a column from the Dataframe and return it."""
        if name not in self._columns:
            raise ColumnNotFound(name)
        column = self._columns.pop(name)
        if not self._columns:
            self._height = 0
        return column

    def drop(self, names: str | list[str]) -> Self:
        """A new Dataframe without the provided columns."""
        if isinstance(names, str):
            names = [names]
        for name in names:
            if name not in self._columns:
                raise ColumnNotFound(name)
        return self.__class__(
            [column for name, column in self._columns.items() if name not in names]
        )

    def rename_column(self, old: str, new: str) -> None:
        """Rename a column, preserving its position."""
        if old not in self._columns:
            raise ColumnNotFound(old)
        if new == old:
            return
        if new in self._columns:
            raise DuplicateColumn(new)
        renamed = {}
        for name, column in self._columns.items():
            if name == old:
                column.rename(new)
                name = new
            renamed[name] = column
        self._columns = renamed

    def column(self, name: str) -> Series:
        """Get a column by name.

        The returned Series is a copy, renaming it or sorting it
        doesn't affect the Dataframe.
        """
        try:
            return self._columns[name].copy()
        except KeyError:
            raise ColumnNotFound(name) from None

    def column_at(self, index: int) -> Series:
        """Get a column by position."""
        if not 0 <= index < len(self._columns):
            raise IndexOutOfRange(index, len(self._columns))
        return list(self._columns.values())[index].copy()

    def downcast_column(self, name: str, dtype: pa.DataType | str) -> Series:
        """Get a column making sure it has the expected data type.

        Unlike :meth:`colframe.Series.cast` no conversion happens,
        if the column is of a different type the call fails
        with :class:`colframe.errors.TypeMismatch`.
        """
        expected = dtypes.resolve(dtype)
        column = self.column(name)
        if column.dtype != expected:
            raise TypeMismatch(f"Column '{name}' is {column.dtype}, not {expected}")
        return column

    @property
    def columns(self) -> list[str]:
        """The names of the columns, in order."""
        return list(self._columns)

    @property
    def dtypes(self) -> dict[str, pa.DataType]:
        return {name: column.dtype for name, column in self._columns.items()}

    @property
    def schema(self) -> pa.Schema:
        return pa.schema([(name, column.dtype) for name, column in self._columns.items()])

    @property
    def height(self) -> int:
        """Number of rows."""
        return self._height

    @property
    def width(self) -> int:
        """Number of columns."""
        return len(self._columns)

    def shape(self) -> tuple[int, int]:
        return (self._height, len(self._columns))

    def is_empty(self) -> bool:
        """If the Dataframe has no rows."""
        return self._height == 0

    def __len__(self) -> int:
        return self._height

    def __contains__(self, name: str) -> bool:
        return name in self._columns

    def __iter__(self) -> Iterator[Series]:
        for column in self._columns.values():
            yield column.copy()

    def __getitem__(self, key: str | list[str]) -> "Series | Dataframe":
        if isinstance(key, str):
            return self.column(key)
        return self.select(key)

    def __str__(self) -> str:
        return tabulate(self.to_arrow())

    def __repr__(self) -> str:
        return f"Dataframe(height={self._height}, columns={self.columns})"

    def equals(self, other: "Dataframe") -> bool:
        """If the two Dataframes have the same columns with the same values."""
        if not isinstance(other, Dataframe) or self.columns != other.columns:
            return False
        return all(
            column.equals(other._columns[name]) for name, column in self._columns.items()
        )

    def copy(self) -> Self:
        return self.__class__(list(self._columns.values()))

    # Rows selection

    def select(self, names: str | list[str]) -> Self:
        """A new Dataframe with only the requested columns, in the requested order."""
        if isinstance(names, str):
            names = [names]
        return self.__class__([self.column(name) for name in names])

    def take(self, indices: pa.Array | Sequence[int | None]) -> Self:
        """A new Dataframe with the rows at the provided indices.

        The same indices are applied to every column,
        ``None`` indices produce a row of nulls.
        """
        if not isinstance(indices, pa.Array):
            indices = pa.array(list(indices), type=pa.int64())
        return self.__class__([column.take(indices) for column in self._columns.values()])

    def filter(self, mask: Series | Sequence[bool | None]) -> Self:
        """Apply a filter to the data and return a new Dataframe.

        The returned dataframe will only contain the rows
        where the mask is true.

        :param mask: A boolean :class:`colframe.Series` with one
                     entry per row, for example ``df["age"] > 30``.
        """
        return self.take(mask_indices(mask, self._height))

    def slice(self, offset: int = 0, length: int | None = None) -> Self:
        return self.__class__(
            [column.slice(offset, length) for column in self._columns.values()]
        )

    def head(self, n: int = 5) -> Self:
        """The first ``n`` rows."""
        return self.__class__([column.head(n) for column in self._columns.values()])

    def tail(self, n: int = 5) -> Self:
        """The last ``n`` rows."""
        return self.__class__([column.tail(n) for column in self._columns.values()])

    def sort(
        self, keys: str | list[str], descending: bool | list[bool] | None = None
    ) -> Self:
        """Sort the rows by one or more columns.

        :param keys: The columns to sort by, in priority order.
        :param descending: If the keys should be sorted in descending order,
                           either one value for all keys or one for each key.
                           By default all keys are sorted in ascending order.
        """
        if isinstance(keys, str):
            keys = [keys]
        if not keys:
            return self.copy()
        if descending is None:
            descending = False
        if isinstance(descending, bool):
            descending = [descending] * len(keys)
        return SortEngine(keys, descending).apply(self)

    # Grouping and joining

    def groupby(self, keys: str | list[str]) -> GroupEngine:
        """Group the rows by the values of the ``keys`` columns.

        >>> df = Dataframe({"shop": ["A", "B", "A"], "sold": [1, 2, 3]})
        >>> df.groupby("shop").sum().to_pydict()
        {'shop': ['A', 'B'], 'sold': [4, 2]}
        """
        return GroupEngine(self, keys)

    def join(
        self,
        right: "Dataframe",
        on: str | list[str] | None = None,
        left_on: str | list[str] | None = None,
        right_on: str | list[str] | None = None,
        how: str = "inner",
    ) -> Self:
        """Join with another Dataframe on one or more key columns.

        :param right: The Dataframe to join with.
        :param on: The keys when they have the same name in both Dataframes.
        :param left_on: The keys in this Dataframe.
        :param right_on: The keys in the ``right`` Dataframe.
        :param how: One of ``inner``, ``left``, ``right``, ``outer``.
        """
        if on is not None:
            left_on = right_on = on
        if left_on is None:
            raise ValueError("Join keys must be provided through on or left_on")
        return JoinEngine(self, right, left_on, right_on, how=how).execute()

    def inner_join(self, right: "Dataframe", on: str | list[str]) -> Self:
        return self.join(right, on=on, how="inner")

    def left_join(self, right: "Dataframe", on: str | list[str]) -> Self:
        return self.join(right, on=on, how="left")

    def right_join(self, right: "Dataframe", on: str | list[str]) -> Self:
        return self.join(right, on=on, how="right")

    def outer_join(self, right: "Dataframe", on: str | list[str]) -> Self:
        return self.join(right, on=on, how="outer")
