"""Plain-text serialization of iteration-count grids.

The format is line oriented::

    <rows>
    <cols>
    <row 0 values separated by single spaces>
    ...
    <row rows-1 values>

Files written by the old desktop viewer put a space after every value;
those still load.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

import numpy as np

from .errors import DimensionMismatch, MalformedGrid

_INT32_MAX = np.iinfo(np.int32).max


def serialize(grid: np.ndarray, shape: Optional[tuple[int, int]] = None) -> str:
    grid = np.asarray(grid)
    if grid.ndim != 2:
        raise DimensionMismatch(f"expected a 2-D grid, got {grid.ndim} dimension(s)")
    if shape is not None and tuple(grid.shape) != tuple(shape):
        raise DimensionMismatch(f"grid has shape {grid.shape}, expected {tuple(shape)}")
    if not np.issubdtype(grid.dtype, np.integer):
        raise MalformedGrid(f"grid must hold integer counts, got dtype {grid.dtype}", field="values")
    if grid.size and (grid.min() < 0 or grid.max() > _INT32_MAX):
        raise MalformedGrid(f"grid counts must lie in [0, {_INT32_MAX}]", field="values")

    rows, cols = grid.shape
    lines = [str(rows), str(cols)]
    lines.extend(" ".join(str(int(value)) for value in row) for row in grid)
    return "\n".join(lines) + "\n"


def _parse_count(token: str, *, line: int, field: str) -> int:
    if not (token.isascii() and token.isdigit()):
        raise MalformedGrid(f"{field} is not a non-negative integer: {token!r}", line=line, field=field)
    value = int(token)
    if value > _INT32_MAX:
        raise MalformedGrid(f"{field} does not fit in 32 bits: {token}", line=line, field=field)
    return value


def _parse_header(lines: list[str], index: int, field: str) -> int:
    if index >= len(lines):
        raise MalformedGrid(f"missing {field} header", line=index + 1, field=field)
    value = _parse_count(lines[index].strip(), line=index + 1, field=field)
    if value < 1:
        raise MalformedGrid(f"{field} must be positive, got {value}", line=index + 1, field=field)
    return value


def deserialize(text: str) -> np.ndarray:
    """Parse a grid written by :func:`serialize`."""

    lines = text.splitlines()
    rows = _parse_header(lines, 0, "rows")
    cols = _parse_header(lines, 1, "cols")

    if len(lines) - 2 < rows:
        found = len(lines) - 2
        raise MalformedGrid(f"expected {rows} data lines, found {found}", line=len(lines) + 1, field="values")

    values = []
    for row in range(rows):
        index = row + 2
        tokens = lines[index].split()
        if len(tokens) != cols:
            raise MalformedGrid(
                f"expected {cols} values, found {len(tokens)}",
                line=index + 1,
                field=f"row {row}",
            )
        values.append([_parse_count(token, line=index + 1, field=f"row {row}, column {col}")
                       for col, token in enumerate(tokens)])

    for index in range(rows + 2, len(lines)):
        if lines[index].strip():
            raise MalformedGrid("unexpected data after the last row", line=index + 1, field="values")
    return np.array(values, dtype=np.int32).reshape(rows, cols)


def save_grid(grid: np.ndarray, path: Union[str, Path]) -> Path:
    text = serialize(grid)
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding="ascii", newline="\n") as handle:
        handle.write(text)
    return output_path


def load_grid(path: Union[str, Path]) -> np.ndarray:
    with Path(path).open("r", encoding="ascii") as handle:
        try:
            text = handle.read()
        except UnicodeDecodeError as exc:
            raise MalformedGrid(f"{path} is not an ASCII text file") from exc
    return deserialize(text)
