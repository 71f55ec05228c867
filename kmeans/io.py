"""
Delimited-text input and output for point tables.

The default layout matches the exported tables this tool was written for:
a header line, then one row per point whose first column is a row
identifier and whose remaining columns are the coordinates.
"""

import csv
import math
from typing import Iterable, List, TextIO

import numpy as np

from .exceptions import MalformedInput
from .validation import check_int


def read_points(
    stream: TextIO,
    delimiter: str = ',',
    skip_header: bool = True,
    skip_columns: int = 1,
) -> np.ndarray:
    """
    Parse delimited rows into a point store.

    Args:
        stream: Text stream to read from
        delimiter: Field separator
        skip_header: Whether the first line is a header
        skip_columns: Number of leading columns to ignore in every row

    Returns:
        Array of shape (n_rows, n_columns - skip_columns)

    Raises:
        InvalidParameter: ``skip_columns`` is negative
        MalformedInput: ragged rows, non-numeric or non-finite values,
            or no data rows at all
    """
    skip_columns = check_int('skip_columns', skip_columns, minimum=0)
    reader = csv.reader(stream, delimiter=delimiter)
    rows: List[List[float]] = []
    n_features = None

    for record in reader:
        if skip_header and reader.line_num == 1:
            continue
        if not record or all(not field.strip() for field in record):
            continue

        fields = record[skip_columns:]
        if not fields:
            raise MalformedInput(
                f"expected at least {skip_columns + 1} columns, got {len(record)}",
                line=reader.line_num,
            )
        if n_features is None:
            n_features = len(fields)
        elif len(fields) != n_features:
            raise MalformedInput(
                f"expected {n_features + skip_columns} columns, got {len(record)}",
                line=reader.line_num,
            )

        row = []
        for field in fields:
            try:
                value = float(field)
            except ValueError:
                raise MalformedInput(f"non-numeric value {field!r}", line=reader.line_num) from None
            if not math.isfinite(value):
                raise MalformedInput(f"non-finite value {field!r}", line=reader.line_num)
            row.append(value)
        rows.append(row)

    if not rows:
        raise MalformedInput("no data rows")

    return np.array(rows, dtype=np.float64)


def write_centers(centers: Iterable[Iterable[float]], stream: TextIO, delimiter: str = ',') -> None:
    """Write one delimited row per center, at full float precision."""
    writer = csv.writer(stream, delimiter=delimiter, lineterminator='\n')
    for center in centers:
        writer.writerow([repr(float(x)) for x in center])
