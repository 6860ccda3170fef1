"""Save Dataframes as YAML documents.

Each row is written as a mapping of column names
to values, in column order:

>>> import io
>>> from colframe import Dataframe
>>> out = io.StringIO()
>>> write_yaml(Dataframe({"name": ["Alice", "Bob"], "age": [25, None]}), out)
>>> print(out.getvalue())
- name: Alice
  age: 25
- name: Bob
  age: null
<BLANKLINE>
"""

import logging
import os
from typing import IO

import yaml

from ..dataframe import Dataframe

logger = logging.getLogger(__name__)


def write_yaml(frame: Dataframe, path: str | os.PathLike | IO[str]) -> None:
    """Save a Dataframe as a YAML list of rows.

    :param frame: The Dataframe to save.
    :param path: The path of the file, or an open text file.
    """
    rows = frame.to_pylist()
    if hasattr(path, "write"):
        yaml.safe_dump(rows, path, sort_keys=False, allow_unicode=True)
    else:
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(rows, f, sort_keys=False, allow_unicode=True)
    logger.debug("Wrote %d rows as YAML", frame.height)
