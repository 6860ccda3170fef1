"""Read and write Dataframes.

The adapters convert Dataframes from and to external formats:

* :mod:`colframe.io.csv` reads and writes CSV files through :mod:`pyarrow.csv`.
* :mod:`colframe.io.json` writes JSON documents.
* :mod:`colframe.io.yaml` writes YAML documents.

The core engine never performs any I/O, all the
interactions with files happen in this package.
"""

from .csv import ReadCsvOptions, WriteCsvOptions, read_csv, write_csv
from .json import write_json
from .yaml import write_yaml

__all__ = (
    "ReadCsvOptions",
    "WriteCsvOptions",
    "read_csv",
    "write_csv",
    "write_json",
    "write_yaml",
)
