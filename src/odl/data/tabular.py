"""
Tabular data normalization.

CSV text becomes a pandas DataFrame of string cells; projected columns are
then scaled into fixed-point integers for on-chain storage.

Scaling is exact: each cell is read as a Decimal, multiplied by 10000 and
rounded half away from zero (Decimal ROUND_HALF_UP). So 1.23 -> 12300,
0.00005 -> 1, -0.00005 -> -1, 0.00004 -> 0. Results are Python ints and
are not bounded to 64 bits.
"""

from __future__ import annotations

import csv
import io
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, Overflow, localcontext
from typing import Iterable, Sequence

import pandas as pd

from ..errors import ProjectionError, TabularParseError, TabularValueError
from ..utils import strip_bom

SCALE_FACTOR = 10_000


def parse_table(raw_text: str | bytes) -> pd.DataFrame:
    """
    Parse CSV text with a header row into a DataFrame of strings.

    Fully blank lines are skipped. Every other row must have exactly as
    many fields as the header.

    Raises:
        TabularParseError: On empty input, unterminated quotes, ragged
            rows or duplicate column names
    """
    text = strip_bom(raw_text)
    reader = csv.reader(io.StringIO(text), strict=True)
    try:
        rows = [row for row in reader if row]
    except csv.Error as exc:
        raise TabularParseError(f"Malformed CSV at line {reader.line_num}: {exc}") from exc

    if not rows:
        raise TabularParseError("CSV input has no header row")

    header, body = rows[0], rows[1:]
    duplicates = sorted({name for name in header if header.count(name) > 1})
    if duplicates:
        raise TabularParseError(f"Duplicate column names: {', '.join(duplicates)}")

    for number, row in enumerate(body, start=2):
        if len(row) != len(header):
            raise TabularParseError(
                f"Row {number} has {len(row)} fields, header has {len(header)}"
            )

    return pd.DataFrame(body, columns=header, dtype=str)


def project(table: pd.DataFrame, columns: Sequence[str]) -> pd.DataFrame:
    """Select ``columns`` in the given order.

    Raises:
        ProjectionError: If any column is not in the table
    """
    missing = [name for name in columns if name not in table.columns]
    if missing:
        raise ProjectionError(
            f"Column(s) not found: {', '.join(missing)} "
            f"(available: {', '.join(map(str, table.columns))})"
        )
    return table[list(columns)]


def scale(value: object) -> int:
    """Scale one cell by 10000, rounding half away from zero."""
    text = str(value).strip()
    # Decimal also takes Python digit separators ("1_000")
    if "_" in text:
        raise TabularValueError(f"Not a number: {value!r}")
    try:
        number = Decimal(text)
    except InvalidOperation as exc:
        raise TabularValueError(f"Not a number: {value!r}") from exc
    if not number.is_finite():
        raise TabularValueError(f"Not a finite number: {value!r}")

    # Enough precision that neither the multiply nor the quantize rounds
    try:
        with localcontext() as ctx:
            sign, digits, exponent = number.as_tuple()
            ctx.prec = len(digits) + max(exponent, 0) + 12
            scaled = (number * SCALE_FACTOR).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    except (Overflow, InvalidOperation) as exc:
        raise TabularValueError(f"Number out of range: {value!r}") from exc
    return int(scaled)


def scale_rows(rows: Iterable[Iterable[object]]) -> list[list[int]]:
    return [[scale(cell) for cell in row] for row in rows]


def normalize(
    raw_text: str | bytes,
    input_columns: Sequence[str],
    label_column: str,
) -> tuple[list[list[int]], list[int]]:
    """
    Turn CSV text into a fixed-point input matrix and label vector.

    Returns:
        (matrix, labels): one matrix row and one label per CSV row
    """
    table = parse_table(raw_text)
    inputs = project(table, input_columns)
    labels = project(table, [label_column])

    matrix = scale_rows(inputs.itertuples(index=False, name=None))
    label_rows = scale_rows(labels.itertuples(index=False, name=None))
    flat_labels = [value for row in label_rows for value in row]
    return matrix, flat_labels


def extract_upload_payload(raw_text: str | bytes) -> list[list[int]]:
    """Scale every column of the table, keeping the row/column shape."""
    table = parse_table(raw_text)
    return scale_rows(table.itertuples(index=False, name=None))
