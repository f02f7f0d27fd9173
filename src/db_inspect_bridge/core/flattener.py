"""Flattening of tabular results into a single list of protocol values."""

from typing import Any

from db_inspect_bridge.models.outcome import SelectResult
from db_inspect_bridge.models.protocol import FlattenedRows

TRUNCATED_MARKER = "{truncated}"

_END = object()


def convert_cell(value: Any) -> Any:
    """
    Map one cell to a protocol primitive.

    Args:
        value: Cell value as produced by the driver

    Returns:
        None, int, float, bytes or str
    """
    if value is None:
        return None
    if isinstance(value, int):
        return int(value)
    if isinstance(value, float):
        return float(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    return str(value)


def flatten_rows(result: SelectResult, limit: int) -> FlattenedRows:
    """
    Flatten all columns of up to ``limit`` rows into one list.

    The list cannot be read meaningfully without the column count. When more
    rows exist beyond ``limit`` one extra row of ``TRUNCATED_MARKER`` cells is
    appended. Rows are consumed forward-only and never cached.

    Args:
        result: Select outcome whose rows are consumed
        limit: Maximum number of rows to process

    Returns:
        Column names, flattened cells and the truncation flag

    Raises:
        ValueError: If limit is negative
    """
    if limit < 0:
        raise ValueError(f"limit must be >= 0, got {limit}")

    column_names = list(result.columns)
    num_columns = len(column_names)
    rows = iter(result.rows)
    values: list[Any] = []

    for _ in range(limit):
        row = next(rows, _END)
        if row is _END:
            break
        for column in range(num_columns):
            values.append(convert_cell(row[column]))

    truncated = next(rows, _END) is not _END
    if truncated:
        values.extend([TRUNCATED_MARKER] * num_columns)

    return FlattenedRows(column_names=column_names, values=values, truncated=truncated)
