"""
Grid state module.

Holds the client's view of the grid and updates it only by re-ingesting
snapshots from the server. Cells move monotonically from hidden to a more
informed state; regressions are rejected and reported.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Tuple

import numpy as np

from .cell import Cell, CellStatus, Coord, HIDDEN_VALUE, MARKED_VALUE, EXPLODED_VALUE
from .snapshot import SnapshotError


logger = logging.getLogger(__name__)


# ============================================================================
# Ingest Results
# ============================================================================

@dataclass(frozen=True)
class SnapshotViolation:
    """A cell whose incoming value contradicts what is already known."""

    coord: Coord
    previous: int
    incoming: int

    def __str__(self) -> str:
        return f"{self.coord}: {self.previous} -> {self.incoming}"


@dataclass
class IngestReport:
    """Outcome of ingesting one snapshot."""

    updated: List[Coord] = field(default_factory=list)
    violations: List[SnapshotViolation] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True when the snapshot was accepted without conflicts."""
        return not self.violations


# ============================================================================
# Grid State
# ============================================================================

class GridState:
    """
    The client's knowledge of an R x C grid.

    Dimensions are fixed at construction. Mutation happens exclusively
    through ``ingest``.
    """

    def __init__(self, rows: int, columns: int) -> None:
        """
        Initialize an all-hidden grid.

        Args:
            rows: Number of rows.
            columns: Number of columns.
        """
        if rows < 1 or columns < 1:
            raise ValueError("Grid dimensions must be positive")
        self.rows = rows
        self.columns = columns
        self._grid: List[List[Cell]] = [
            [Cell() for _ in range(columns)] for _ in range(rows)
        ]
        self._neighbors: Dict[Coord, Tuple[Coord, ...]] = {
            coord: self._compute_neighbors(coord) for coord in self.coords()
        }

    # ========================================================================
    # Neighbor Utilities (Low-level)
    # ========================================================================

    def _compute_neighbors(self, coord: Coord) -> Tuple[Coord, ...]:
        neighbors = []
        for delta_row in (-1, 0, 1):
            for delta_col in (-1, 0, 1):
                if delta_row == 0 and delta_col == 0:
                    continue
                neighbor = Coord(coord.row + delta_row, coord.col + delta_col)
                if self.in_bounds(neighbor):
                    neighbors.append(neighbor)
        return tuple(neighbors)

    def in_bounds(self, coord: Coord) -> bool:
        """Check if coordinate is within grid bounds."""
        return 0 <= coord.row < self.rows and 0 <= coord.col < self.columns

    def neighbors(self, coord: Coord) -> Tuple[Coord, ...]:
        """Bounded 8-neighbourhood of a cell, in row-major order."""
        return self._neighbors[coord]

    # ========================================================================
    # Accessors
    # ========================================================================

    def coords(self) -> Iterator[Coord]:
        """All coordinates in row-major order."""
        for row in range(self.rows):
            for col in range(self.columns):
                yield Coord(row, col)

    def cell(self, coord: Coord) -> Cell:
        """Get the cell at a coordinate."""
        return self._grid[coord.row][coord.col]

    def status(self, coord: Coord) -> CellStatus:
        return self.cell(coord).status

    def count(self, coord: Coord) -> int:
        """Adjacent mine count of a revealed cell."""
        cell = self.cell(coord)
        if not cell.is_revealed:
            raise ValueError(f"Cell {coord} is not revealed")
        return cell.count

    def hidden_cells(self) -> List[Coord]:
        """Hidden unmarked cells in row-major order."""
        return [coord for coord in self.coords() if self.cell(coord).is_hidden]

    def revealed_cells(self) -> List[Coord]:
        """Revealed cells in row-major order."""
        return [coord for coord in self.coords() if self.cell(coord).is_revealed]

    def hidden_neighbors(self, coord: Coord) -> List[Coord]:
        return [n for n in self.neighbors(coord) if self.cell(n).is_hidden]

    def marked_neighbor_count(self, coord: Coord) -> int:
        return sum(1 for n in self.neighbors(coord) if self.cell(n).is_marked)

    def known_mine_neighbor_count(self, coord: Coord) -> int:
        """Marked plus exploded neighbours."""
        return sum(
            1 for n in self.neighbors(coord) if self.cell(n).is_known_mine
        )

    @property
    def is_resolved(self) -> bool:
        """True when no hidden unmarked cell remains."""
        return not any(self.cell(coord).is_hidden for coord in self.coords())

    @property
    def has_exploded(self) -> bool:
        return any(self.cell(coord).is_exploded for coord in self.coords())

    def to_observation(self) -> np.ndarray:
        """
        Get grid state as numpy array.

        Returns:
            2D int8 array where:
                -1 = hidden
                -2 = marked
                0-8 = revealed with adjacent count
                9 = exploded mine
        """
        obs = np.zeros((self.rows, self.columns), dtype=np.int8)
        for coord in self.coords():
            obs[coord.row, coord.col] = self.cell(coord).to_observation()
        return obs

    # ========================================================================
    # Snapshot Ingestion
    # ========================================================================

    def ingest(self, observation: np.ndarray) -> IngestReport:
        """
        Update the grid from an authoritative snapshot.

        Hidden cells take whatever the snapshot says. A known cell whose
        incoming value differs keeps its previous state and is reported as
        a violation.

        Args:
            observation: Array of shape (rows, columns) in observation encoding.

        Returns:
            Report listing updated cells and rejected conflicts.

        Raises:
            SnapshotError: If the shape or any value is invalid. Nothing is
                mutated in that case.
        """
        obs = np.asarray(observation)
        if obs.shape != (self.rows, self.columns):
            raise SnapshotError(
                f"Expected shape {(self.rows, self.columns)}, got {obs.shape}"
            )
        if not np.issubdtype(obs.dtype, np.integer):
            raise SnapshotError(f"Expected integer observation, got {obs.dtype}")
        invalid = ~(
            ((obs >= 0) & (obs <= 8))
            | (obs == HIDDEN_VALUE)
            | (obs == MARKED_VALUE)
            | (obs == EXPLODED_VALUE)
        )
        if invalid.any():
            row, col = np.argwhere(invalid)[0]
            raise SnapshotError(
                f"Invalid value {obs[row, col]} at ({row}, {col})"
            )

        report = IngestReport()
        for coord in self.coords():
            incoming = int(obs[coord.row, coord.col])
            cell = self.cell(coord)
            previous = cell.to_observation()
            if incoming == previous:
                continue
            if cell.is_hidden:
                self._grid[coord.row][coord.col] = Cell.from_observation(incoming)
                report.updated.append(coord)
                continue
            violation = SnapshotViolation(coord, previous, incoming)
            logger.warning("Rejected snapshot regression at %s", violation)
            report.violations.append(violation)
        return report
