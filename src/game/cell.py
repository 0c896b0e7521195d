"""
Cell module for the Minesweeper client.

Represents grid coordinates and the per-cell knowledge the client holds:
hidden, revealed with an adjacency count, marked as a mine, or exploded.
"""
from enum import Enum, auto
from dataclasses import dataclass
from typing import NamedTuple


# ============================================================================
# Constants
# ============================================================================

HIDDEN_VALUE = -1
MARKED_VALUE = -2
EXPLODED_VALUE = 9


class CellStatus(Enum):
    """Possible knowledge states of a cell."""

    HIDDEN = auto()
    REVEALED = auto()
    EXPLODED = auto()
    MARKED = auto()


class Coord(NamedTuple):
    """Grid coordinate. Tuple ordering is row-major."""

    row: int
    col: int

    def __str__(self) -> str:
        return f"({self.row}, {self.col})"


# ============================================================================
# Cell Data Class
# ============================================================================

@dataclass
class Cell:
    """
    What the client knows about a single cell.

    Attributes:
        status: Current knowledge state.
        count: Adjacent mine count (0-8), meaningful only when revealed.
    """

    status: CellStatus = CellStatus.HIDDEN
    count: int = 0

    @property
    def is_hidden(self) -> bool:
        """Check if cell is hidden and unmarked."""
        return self.status == CellStatus.HIDDEN

    @property
    def is_revealed(self) -> bool:
        """Check if cell is revealed."""
        return self.status == CellStatus.REVEALED

    @property
    def is_marked(self) -> bool:
        """Check if cell is marked as a mine."""
        return self.status == CellStatus.MARKED

    @property
    def is_exploded(self) -> bool:
        """Check if cell is a visited mine."""
        return self.status == CellStatus.EXPLODED

    @property
    def is_known_mine(self) -> bool:
        """Marked or exploded cells count toward a neighbour's mines."""
        return self.status in (CellStatus.MARKED, CellStatus.EXPLODED)

    def to_observation(self) -> int:
        """
        Convert cell to its observation value.

        Returns:
            -1: Hidden cell
            -2: Marked cell
            0-8: Revealed cell with adjacent mine count
            9: Exploded mine
        """
        if self.status == CellStatus.HIDDEN:
            return HIDDEN_VALUE
        if self.status == CellStatus.MARKED:
            return MARKED_VALUE
        if self.status == CellStatus.EXPLODED:
            return EXPLODED_VALUE
        return self.count

    @classmethod
    def from_observation(cls, value: int) -> "Cell":
        """Build a cell from an observation value."""
        if value == HIDDEN_VALUE:
            return cls()
        if value == MARKED_VALUE:
            return cls(CellStatus.MARKED)
        if value == EXPLODED_VALUE:
            return cls(CellStatus.EXPLODED)
        if 0 <= value <= 8:
            return cls(CellStatus.REVEALED, int(value))
        raise ValueError(f"Invalid observation value: {value}")
