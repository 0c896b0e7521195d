"""
Text codec for grid snapshots.

The server sends one line per row:
    ?      hidden
    @      marked mine
    X      visited mine (game over)
    0-8    revealed cell with adjacent mine count
"""
from typing import Iterable, List

import numpy as np

from .cell import HIDDEN_VALUE, MARKED_VALUE, EXPLODED_VALUE


HIDDEN_CHAR = "?"
MARKED_CHAR = "@"
EXPLODED_CHAR = "X"


class SnapshotError(ValueError):
    """A snapshot that cannot be ingested at all (shape or alphabet)."""


def parse_snapshot(lines: Iterable[str], rows: int, columns: int) -> np.ndarray:
    """
    Parse a character grid into an observation array.

    Args:
        lines: One string per row.
        rows: Expected number of rows.
        columns: Expected number of columns.

    Returns:
        int8 array of shape (rows, columns).

    Raises:
        SnapshotError: On wrong dimensions or an invalid character.
    """
    grid_lines = [line.strip() for line in lines]
    if len(grid_lines) != rows:
        raise SnapshotError(f"Expected {rows} rows, got {len(grid_lines)}")

    obs = np.full((rows, columns), HIDDEN_VALUE, dtype=np.int8)
    for row, line in enumerate(grid_lines):
        if len(line) != columns:
            raise SnapshotError(
                f"Row {row}: expected {columns} columns, got {len(line)}"
            )
        for col, char in enumerate(line):
            obs[row, col] = _char_to_value(char, row, col)
    return obs


def _char_to_value(char: str, row: int, col: int) -> int:
    if char == HIDDEN_CHAR:
        return HIDDEN_VALUE
    if char == MARKED_CHAR:
        return MARKED_VALUE
    if char == EXPLODED_CHAR:
        return EXPLODED_VALUE
    if "0" <= char <= "8":
        return ord(char) - ord("0")
    raise SnapshotError(f"Invalid character {char!r} at ({row}, {col})")


def format_snapshot(observation: np.ndarray) -> List[str]:
    """Render an observation array as protocol lines."""
    lines = []
    for row in observation:
        chars = []
        for value in row:
            if value == HIDDEN_VALUE:
                chars.append(HIDDEN_CHAR)
            elif value == MARKED_VALUE:
                chars.append(MARKED_CHAR)
            elif value == EXPLODED_VALUE:
                chars.append(EXPLODED_CHAR)
            else:
                chars.append(str(int(value)))
        lines.append("".join(chars))
    return lines
