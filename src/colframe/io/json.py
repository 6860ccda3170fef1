"""Save Dataframes as JSON documents.

>>> import io
>>> from colframe import Dataframe
>>> out = io.StringIO()
>>> write_json(Dataframe({"a": [1, None]}), out)
>>> out.getvalue()
'[{"a": 1}, {"a": null}]'

NaN and infinite values have no JSON representation
and are written as null.
"""

import json
import logging
import math
import os
from typing import IO, Any

from ..dataframe import Dataframe

logger = logging.getLogger(__name__)

ORIENTS = ("records", "columns")


def _json_value(value: Any) -> Any:
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


def write_json(
    frame: Dataframe, path: str | os.PathLike | IO[str], orient: str = "records"
) -> None:
    """Save a Dataframe as JSON.

    :param frame: The Dataframe to save.
    :param path: The path of the file, or an open text file.
    :param orient: ``records`` to write a list of rows,
                   ``columns`` to write a mapping of column names to values.
    """
    if orient == "records":
        data = [
            {name: _json_value(value) for name, value in row.items()}
            for row in frame.to_pylist()
        ]
    elif orient == "columns":
        data = {
            name: [_json_value(value) for value in values]
            for name, values in frame.to_pydict().items()
        }
    else:
        raise ValueError(f"Unsupported orient {orient!r}, expected one of {ORIENTS}")

    if hasattr(path, "write"):
        json.dump(data, path, ensure_ascii=False, allow_nan=False)
    else:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, allow_nan=False)
    logger.debug("Wrote %d rows as JSON %s", frame.height, orient)
