"""colframe

A typed, nullable, in-memory columnar data engine.

Data is organized in named columns, the :class:`Series`,
each holding values of a single data type where any value
can be null. Columns of the same length are combined
in a :class:`Dataframe`, which can be filtered, sorted,
grouped and joined.

The engine is constituted by multiple components, each isolated within its own
package and each self documented in literate programming style.

The primary components are:

* The Series, typed columns with vectorized operations.
* The Dataframe API, which provides an high level API for tables of Series.
* The Compute Engine, in charge of filtering, sorting, grouping and joining.
* The IO adapters, which read and write the data in CSV, JSON and YAML formats.

For the user guide and code documentation of each component, refer to the
component itself.

>>> from colframe import Dataframe
>>> people = Dataframe({"id": [1, 2, 3], "name": ["Alice", "Bob", "Charlie"]})
>>> ages = Dataframe({"id": [3, 1], "age": [35, 25]})
>>> people.left_join(ages, on="id").to_pydict()
{'id': [1, 2, 3], 'name': ['Alice', 'Bob', 'Charlie'], 'age': [25, None, 35]}
"""

from . import compute, dtypes, errors
from .dataframe import Dataframe
from .series import Series

__all__ = ("compute", "dtypes", "errors", "Dataframe", "Series")
