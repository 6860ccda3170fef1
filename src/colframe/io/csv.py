"""Load and save Dataframes as CSV files.

Parsing is delegated to :mod:`pyarrow.csv`, which infers
the type of each column from its content. Types can also
be provided explicitly through :class:`ReadCsvOptions`.

Nulls are written as empty fields and empty unquoted
fields are read back as nulls, so a Dataframe can
be saved and loaded again without losing its nulls.

Lines starting with a comment character can be skipped
when reading, through :attr:`ReadCsvOptions.comment_char`.
"""

import dataclasses
import io
import logging
import os

import pyarrow as pa
import pyarrow.csv

from .. import dtypes
from ..dataframe import Dataframe
from ..errors import ParseError, TypeMismatch

logger = logging.getLogger(__name__)


@dataclasses.dataclass
class ReadCsvOptions:
    """Options controlling how a CSV file is parsed."""

    #: If the first row contains the column names,
    #: otherwise columns are named ``column_0``, ``column_1``, ...
    header: bool = True
    #: Number of rows to skip at the start of the file, before the header.
    skip_rows: int = 0
    #: Only load these columns, in this order.
    use_columns: list[str] | None = None
    delimiter: str = ","
    #: Values that should be read as null, besides empty fields.
    null_values: list[str] | None = None
    #: Data type for some or all of the columns, by column name.
    column_types: dict[str, pa.DataType | str] | None = None
    #: Lines starting with this character are ignored.
    comment_char: str | None = None


@dataclasses.dataclass
class WriteCsvOptions:
    """Options controlling how a CSV file is written."""

    header: bool = True
    delimiter: str = ","
    #: Text written in place of null values.
    na_representation: str = ""


def read_csv(path: str | os.PathLike, options: ReadCsvOptions | None = None) -> Dataframe:
    """Load a CSV file in a new Dataframe.

    :param path: The path of the local CSV file.
    :param options: How to parse the file, see :class:`ReadCsvOptions`.
    """
    options = options or ReadCsvOptions()
    convert_options = {
        "strings_can_be_null": True,
        "quoted_strings_can_be_null": False,
    }
    if options.null_values is not None:
        convert_options["null_values"] = ["", *options.null_values]
    if options.column_types:
        try:
            convert_options["column_types"] = {
                name: dtypes.resolve(dtype) for name, dtype in options.column_types.items()
            }
        except TypeMismatch as e:
            raise ParseError(f"Invalid column types: {e}") from e
        if not options.header:
            # Arrow applies types by name, but without a header
            # it only knows the generated names.
            convert_options["column_types"] = {
                _arrow_column_name(name): dtype
                for name, dtype in convert_options["column_types"].items()
            }

    source = path
    if options.comment_char is not None:
        source = _strip_comments(path, options.comment_char)

    try:
        table = pa.csv.read_csv(
            source,
            read_options=pa.csv.ReadOptions(
                skip_rows=options.skip_rows,
                autogenerate_column_names=not options.header,
            ),
            parse_options=pa.csv.ParseOptions(delimiter=options.delimiter),
            convert_options=pa.csv.ConvertOptions(**convert_options),
        )
    except pa.ArrowInvalid as e:
        if "Empty CSV file" in str(e):
            logger.debug("CSV file %s is empty", path)
            return Dataframe()
        raise ParseError(f"Unable to parse {path}: {e}") from e

    if not options.header:
        table = table.rename_columns([f"column_{idx}" for idx in range(table.num_columns)])

    if options.use_columns is not None:
        missing = [name for name in options.use_columns if name not in table.column_names]
        if missing:
            raise ParseError(f"Columns not found in {path}: {missing}")
        table = table.select(options.use_columns)

    for field in table.schema:
        try:
            dtypes.resolve(field.type)
        except TypeMismatch as e:
            raise ParseError(
                f"Column '{field.name}' of {path} was read as {field.type}, "
                "provide its type through column_types"
            ) from e

    logger.debug("Read %d rows and %d columns from %s", table.num_rows, table.num_columns, path)
    return Dataframe.from_arrow(table)


def _strip_comments(path: str | os.PathLike, comment_char: str) -> io.BytesIO:
    """Load the file without the lines that start with ``comment_char``."""
    if len(comment_char) != 1:
        raise ValueError(f"Comment character must be a single character, got {comment_char!r}")
    prefix = comment_char.encode("utf-8")
    with open(path, "rb") as f:
        lines = [line for line in f if not line.startswith(prefix)]
    return io.BytesIO(b"".join(lines))


def _arrow_column_name(name: str) -> str:
    """Map a ``column_N`` name to the name Arrow generates for it."""
    prefix, _, idx = name.rpartition("_")
    if prefix != "column" or not idx.isdigit():
        raise ParseError(f"Files without a header only have column_N columns, got '{name}'")
    return f"f{idx}"


def write_csv(
    frame: Dataframe, path: str | os.PathLike, options: WriteCsvOptions | None = None
) -> None:
    """Save a Dataframe to a CSV file.

    :param frame: The Dataframe to save.
    :param path: The path of the local CSV file, replaced if it exists.
    :param options: How to write the file, see :class:`WriteCsvOptions`.
    """
    options = options or WriteCsvOptions()
    pa.csv.write_csv(
        frame.to_arrow(),
        path,
        write_options=pa.csv.WriteOptions(
            include_header=options.header,
            delimiter=options.delimiter,
            null_string=options.na_representation,
        ),
    )
    logger.debug("Wrote %d rows to %s", frame.height, path)
