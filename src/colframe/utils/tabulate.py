"""Format tabular data into a text table for print.

the `tabulate` function takes a `pyarrow.Table` or `pyarrow.RecordBatch`
and formats it into a text table.
It will truncate long strings, format floats to 2 decimal places,
show nulls as ``null`` and limit the number of rows to display.
The function is used to print Dataframes and Series.

Example:

    >>> import pyarrow as pa
    >>> data = {
    ...     "Product": ["Videogame", "Laptop", None],
    ...     "Quantity": [8, 8, 7],
    ...     "Price": [66.5, 38.72, 77.46],
    ... }
    >>> table = pa.RecordBatch.from_pydict(data)
    >>> print(tabulate(table))
    Product   | Quantity | Price
    --------- | -------- | -----
    Videogame | 8        | 66.50
    Laptop    | 8        | 38.72
    null      | 7        | 77.46
"""

from typing import Any

import pyarrow as pa


def tabulate(data: pa.RecordBatch | pa.Table, max_rows: int = 20) -> str:
    """Format a RecordBatch or Table into a text table.

    Will produce a string like::

        Product   | Quantity | Price | Total
        --------- | -------- | ----- | ------
        Videogame | 8        | 66.50 | 532.00
        Laptop    | 8        | 38.72 | 309.76
        Laptop    | 7        | 77.46 | 542.22
    """
    cols = data.column_names
    rows = [
        [format_value(value) for value in row.values()]
        for row in data.slice(length=max_rows).to_pylist()
    ]

    colsizes = compute_max_colsize(cols, rows)
    header = [maketablerow(cols, colsizes=colsizes)]
    separator = [maketablerow(["-"] * len(cols), colsizes=colsizes, fillvalue="-")]
    textrows = [maketablerow(row, colsizes=colsizes) for row in rows]

    table = "\n".join(header + separator + textrows)
    if data.num_rows > max_rows:
        table += f"\n... and {data.num_rows - max_rows} more rows"
    return table


def compute_max_colsize(cols: list[str], rows: list[list[str]]) -> list[int]:
    """Compute the maximum size of each column in a table."""
    return [
        max([len(row[colidx]) for row in rows] + [len(cols[colidx])])
        for colidx, _ in enumerate(cols)
    ]


def maketablerow(cols: list[str], colsizes: list[int], fillvalue: str = " ") -> str:
    """Make a table row with the given column sizes."""
    return " | ".join(
        [col.ljust(colsizes[idx], fillvalue) for idx, col in enumerate(cols)]
    ).rstrip()


def format_value(v: Any) -> str:
    """Format a value to be printed in the table.

    This function will format floats to 2 decimal places,
    and truncate long strings.
    """
    if v is None:
        return "null"
    elif isinstance(v, float):
        return f"{v:.2f}"
    elif isinstance(v, bool):
        return "true" if v else "false"

    v = str(v)
    if len(v) > 30:
        v = v[:27] + "..."
    return v
