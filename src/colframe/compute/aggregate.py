"""Group data and compute aggregations.

Frequently when analysing data is necessary
to compute statistics like the min, max, average, etc...
of the data stored in datasets.

The group engine is in charge of partitioning the rows
by the values of a set of key columns and then computing
those aggregations for each group, projecting them
as new columns.

For example, given the following data::

    city, shop, n_employees
    New York, Shop A, 10
    New York, Shop B, 15
    Los Angeles, Shop C, 8
    Los Angeles, Shop D, 12
    New York, Shop E, 20

We could group by city and compute the sum of the employees
to get::

    city, n_employees
    New York, 45
    Los Angeles, 20

Groups are emitted in the order their key is first
seen in the data, so the output is deterministic.
Null values are excluded from the aggregations, and
a group where all the values of a column are null
gets a null aggregated value for that column.
"""

import abc
import logging
from typing import TYPE_CHECKING, Any

import pyarrow as pa
import pyarrow.compute as pc

from .. import dtypes
from ..errors import DuplicateColumn, UnsupportedAggregation
from .keys import group_row_indices, normalize_key_value

if TYPE_CHECKING:
    from ..dataframe import Dataframe

__all__ = (
    "GroupEngine",
    "Aggregation",
    "SumAggregation",
    "MinAggregation",
    "MaxAggregation",
    "MeanAggregation",
    "CountAggregation",
    "aggregate_array",
)

logger = logging.getLogger(__name__)


class Aggregation(abc.ABC):
    """Base class for aggregations.

    Every aggregation knows which data types it is able
    to aggregate and how to reduce the values of
    a column to a single aggregated value.
    """

    def __init__(self, column: str) -> None:
        """
        :param column: The name of the column to aggregate.
        """
        self.column = column

    def __str__(self) -> str:
        return f"{self.__class__.__name__}({self.column})"

    __repr__ = __str__

    @abc.abstractmethod
    def supports(self, dtype: pa.DataType) -> bool:
        """If the aggregation can be computed on data of type ``dtype``."""
        ...

    @abc.abstractmethod
    def compute(self, data: pa.Array) -> pa.Scalar:
        """Reduce the non-null values of ``data`` to the aggregated value."""
        ...

    def result_type(self, dtype: pa.DataType) -> pa.DataType:
        """The data type of the aggregated values for data of type ``dtype``.

        It is computed by aggregating an empty array,
        so that it's always consistent with :meth:`compute`.
        """
        return self.compute(pa.array([], type=dtype)).type


class SimpleAggregation(Aggregation):
    """Provide a base implementation for simple aggregations like min,max,sum.

    Simple aggregations are those that can be computed by
    a single compute function applied to the values,
    which already takes care of skipping nulls and of
    returning null when there are no values to aggregate.
    Columns made only of nulls aggregate to null.
    """

    @abc.abstractmethod
    def _aggregate(self, data: Any) -> Any: ...

    def compute(self, data: pa.Array) -> pa.Scalar:
        if dtypes.is_null(data.type):
            return pa.scalar(None, type=dtypes.null)
        return self._aggregate(data)


class SumAggregation(SimpleAggregation):
    """Compute the sum of an aggregated column."""

    def supports(self, dtype: pa.DataType) -> bool:
        return dtypes.is_numeric(dtype) or dtypes.is_null(dtype)

    def _aggregate(self, data: Any) -> Any:
        return pc.sum(data)


class MinAggregation(SimpleAggregation):
    """Compute the min of an aggregated column."""

    def supports(self, dtype: pa.DataType) -> bool:
        return dtypes.is_numeric(dtype) or dtype in (dtypes.string, dtypes.bool_, dtypes.null)

    def _aggregate(self, data: Any) -> Any:
        return pc.min(data)


class MaxAggregation(SimpleAggregation):
    """Compute the max of an aggregated column."""

    def supports(self, dtype: pa.DataType) -> bool:
        return dtypes.is_numeric(dtype) or dtype in (dtypes.string, dtypes.bool_, dtypes.null)

    def _aggregate(self, data: Any) -> Any:
        return pc.max(data)


class MeanAggregation(SimpleAggregation):
    """Compute the mean of an aggregated column.

    The mean is always a floating point value.
    """

    def supports(self, dtype: pa.DataType) -> bool:
        return dtypes.is_numeric(dtype) or dtypes.is_null(dtype)

    def _aggregate(self, data: Any) -> Any:
        return pc.mean(data)


class CountAggregation(Aggregation):
    """Compute the count of the non-null values of an aggregated column.

    Any type of column can be counted, and a group
    where all the values are null counts ``0``.
    """

    def supports(self, dtype: pa.DataType) -> bool:
        return True

    def compute(self, data: pa.Array) -> pa.Scalar:
        return pc.count(data, mode="only_valid")


def aggregate_array(aggregation: Aggregation, data: pa.Array) -> Any:
    """Aggregate a whole array, returning the result as a Python value."""
    if not aggregation.supports(data.type):
        raise UnsupportedAggregation(
            f"{aggregation} is not supported for data of type {data.type}"
        )
    return aggregation.compute(data).as_py()


class GroupEngine:
    """Group the rows of a Dataframe and compute aggregations.

    The engine builds a key for each row out of the values
    of the key columns and tracks the indices of the rows
    that share the same key, in the order keys are first seen.

    Aggregations then reduce the values of each group
    to produce one row per group, made of the key columns
    followed by the aggregated columns.

    >>> from colframe import Dataframe
    >>> data = Dataframe({
    ...    'city': ['New York', 'New York', 'Los Angeles', 'Los Angeles', 'New York'],
    ...    'shop': ['Shop A', 'Shop B', 'Shop C', 'Shop D', 'Shop E'],
    ...    'n_employees': [10, 15, 8, 12, 20]
    ... })
    >>> GroupEngine(data, ["city"]).sum().to_pydict()
    {'city': ['New York', 'Los Angeles'], 'n_employees': [45, 20]}
    >>> GroupEngine(data, ["city"]).agg({"total_employees": SumAggregation("n_employees")}).to_pydict()
    {'city': ['New York', 'Los Angeles'], 'total_employees': [45, 20]}
    """

    def __init__(self, frame: "Dataframe", keys: list[str] | str) -> None:
        """
        :param frame: The Dataframe with the data to group.
        :param keys: The columns to group by.
        """
        if isinstance(keys, str):
            keys = [keys]
        if not keys:
            raise ValueError("At least one grouping key is required")

        self.frame = frame
        self.keys = list(keys)
        key_arrays = [frame.column(key).to_arrow() for key in self.keys]
        self.groups: dict[tuple, list[int]] = group_row_indices(key_arrays)
        logger.debug(
            "Grouped %d rows by %s in %d groups", frame.height, self.keys, len(self.groups)
        )

    def __str__(self) -> str:
        return f"GroupEngine(keys={self.keys}, groups={len(self.groups)})"

    def __len__(self) -> int:
        return len(self.groups)

    @property
    def ngroups(self) -> int:
        """How many distinct keys were found."""
        return len(self.groups)

    def indices_of(self, key: Any) -> list[int]:
        """The indices of the rows belonging to the group of ``key``.

        For a single key column, the key can be provided as a plain value.
        """
        if not isinstance(key, tuple):
            key = (key,)
        key = tuple(normalize_key_value(v) for v in key)
        try:
            return list(self.groups[key])
        except KeyError:
            raise KeyError(f"No group for key {key}") from None

    def get_group(self, key: Any) -> "Dataframe":
        """Get the rows of a group as a new Dataframe."""
        return self.frame.take(self.indices_of(key))

    def agg(self, aggregations: dict[str, Aggregation]) -> "Dataframe":
        """Compute the requested aggregations for each group.

        :param aggregations: The aggregations to compute in the form of
                             ``{"new_col_name": Aggregation}``.
        """
        for name, aggregation in aggregations.items():
            if name in self.keys:
                raise DuplicateColumn(name)
            dtype = self.frame.column(aggregation.column).dtype
            if not aggregation.supports(dtype):
                raise UnsupportedAggregation(
                    f"{aggregation} is not supported for column "
                    f"'{aggregation.column}' of type {dtype}"
                )
        return self._aggregate(aggregations)

    def sum(self) -> "Dataframe":
        """Sum every numeric column for each group."""
        return self._aggregate_eligible(SumAggregation)

    def mean(self) -> "Dataframe":
        """Average every numeric column for each group."""
        return self._aggregate_eligible(MeanAggregation)

    def min(self) -> "Dataframe":
        """Minimum of every numeric, string or boolean column for each group."""
        return self._aggregate_eligible(MinAggregation)

    def max(self) -> "Dataframe":
        """Maximum of every numeric, string or boolean column for each group."""
        return self._aggregate_eligible(MaxAggregation)

    def count(self) -> "Dataframe":
        """Count the non-null values of every column for each group."""
        return self._aggregate_eligible(CountAggregation)

    def _aggregate_eligible(self, aggregation_class: type[Aggregation]) -> "Dataframe":
        """Apply an aggregation to all non key columns that support it.

        Columns whose data type is not supported by the
        aggregation are dropped from the result.
        """
        aggregations = {}
        for name in self.frame.columns:
            if name in self.keys:
                continue
            aggregation = aggregation_class(name)
            if aggregation.supports(self.frame.column(name).dtype):
                aggregations[name] = aggregation
        return self._aggregate(aggregations)

    def _aggregate(self, aggregations: dict[str, Aggregation]) -> "Dataframe":
        """Build the result, one row per group.

        Key columns are built by taking the first row of each group,
        so they preserve the data type of the original columns.
        Aggregated columns are built by aggregating each column
        independently over the rows of each group.
        """
        group_rows = [
            pa.array(rows, type=pa.int64()) for rows in self.groups.values()
        ]
        first_rows = pa.array([rows[0] for rows in self.groups.values()], type=pa.int64())

        result_columns = [self.frame.column(key).take(first_rows) for key in self.keys]
        for name, aggregation in aggregations.items():
            source = self.frame.column(aggregation.column)
            data = source.to_arrow()
            values = [aggregation.compute(data.take(rows)).as_py() for rows in group_rows]
            result_type = aggregation.result_type(source.dtype)
            result_columns.append(
                source.__class__(name, pa.array(values, type=result_type))
            )

        logger.debug("Computed %s on %d groups", list(aggregations.values()), len(group_rows))
        return self.frame.__class__(result_columns)
