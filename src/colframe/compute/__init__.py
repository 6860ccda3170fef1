"""The colframe Compute Engine

The compute engine implements the algorithms
that operate on whole tables: selecting rows through masks,
sorting, grouping with aggregations and joining.

The compute engine is tightly bound to Apache Arrow,
columns are stored as :class:`pyarrow.Array` and most of the
work is delegated to the :mod:`pyarrow.compute` kernels.

All the engines follow the same principle: they first compute
the row indices that form the result, and then take the rows
of every column through those indices. That way all columns
are reindexed consistently and always stay aligned::

    (Dataframe)-->Engine--(row indices)-->take--(new Dataframe)

The engines are eager, they run immediately and
return a new Dataframe that owns its own data:

>>> from colframe import Dataframe
>>> from colframe.compute import SortEngine
>>> data = Dataframe({
...    "animals": ["Flamingo", "Horse", "Brittle stars", "Centipede"],
...    "n_legs": [2, 4, 5, 100]
... })
>>> SortEngine(["n_legs"], [True]).apply(data).to_pydict()
{'animals': ['Centipede', 'Brittle stars', 'Horse', 'Flamingo'], 'n_legs': [100, 5, 4, 2]}
"""

from .aggregate import (
    Aggregation,
    CountAggregation,
    GroupEngine,
    MaxAggregation,
    MeanAggregation,
    MinAggregation,
    SumAggregation,
)
from .filtering import mask_indices
from .join import JoinEngine
from .parallel import parallel_map
from .sorting import SortEngine, sort_indices

__all__ = (
    "SortEngine",
    "sort_indices",
    "GroupEngine",
    "JoinEngine",
    "mask_indices",
    "parallel_map",
    "Aggregation",
    "CountAggregation",
    "MaxAggregation",
    "MeanAggregation",
    "MinAggregation",
    "SumAggregation",
)
