"""Dataframe library built on top of colframe.

A dataframe library is a tool designed to handle and manipulate structured data,
typically in the form of tables (i.e., rows and columns).
It allows users to load data from various sources (like CSV files),
explore it, apply transformations, and analyze it.

Dataframes provide an efficient way to perform operations such as filtering,
aggregation, and merging of datasets.

The colframe :class:`Dataframe` is a collection of :class:`colframe.Series`
that all have the same length. Its transformations are implemented
by the compute engines in :mod:`colframe.compute`:

>>> df = Dataframe({"city": ["Rome", "Paris", "Rome"], "sold": [3, 5, 1]})
>>> df.sort("sold", descending=True).to_pydict()
{'city': ['Paris', 'Rome', 'Rome'], 'sold': [5, 3, 1]}
>>> df.groupby("city").max().to_pydict()
{'city': ['Rome', 'Paris'], 'sold': [3, 5]}
"""

from .dataframe import Dataframe

__all__ = ("Dataframe",)
