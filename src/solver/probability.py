"""
Probability surface: per-cell mine likelihood for the current turn.

Rebuilt from scratch every turn. Deductions pin cells to 0.0 or 1.0;
everything else sits at a neutral prior.
"""
import logging
from typing import List, Optional

import numpy as np

from game import Coord, GridState


logger = logging.getLogger(__name__)

SAFE = 0.0
MINE = 1.0
NEUTRAL_PRIOR = 0.5


class ProbabilitySurface:
    """
    Mapping from hidden-unmarked cell to estimated mine probability.

    Values are NaN for cells that are not hidden-unmarked.
    """

    def __init__(
        self, rows: int, columns: int, prior: float = NEUTRAL_PRIOR
    ) -> None:
        if not 0.0 <= prior <= 1.0:
            raise ValueError("Prior must be in [0, 1]")
        self.rows = rows
        self.columns = columns
        self.prior = prior
        self._values = np.full((rows, columns), np.nan, dtype=np.float64)

    def reset(self, grid: GridState) -> None:
        """Put every hidden-unmarked cell back to the prior."""
        self._values.fill(np.nan)
        for coord in grid.hidden_cells():
            self._values[coord.row, coord.col] = self.prior

    # ========================================================================
    # Forced Deductions
    # ========================================================================

    def force_safe(self, coord: Coord) -> bool:
        """Pin a cell to 0.0. Returns True if the value changed."""
        return self._force(coord, SAFE)

    def force_mine(self, coord: Coord) -> bool:
        """Pin a cell to 1.0. Returns True if the value changed."""
        return self._force(coord, MINE)

    def _force(self, coord: Coord, value: float) -> bool:
        current = self._values[coord.row, coord.col]
        if np.isnan(current):
            raise ValueError(f"Cell {coord} is not hidden")
        if current == value:
            return False
        if self._is_pinned(current):
            # Pinned cells never move within a turn.
            logger.warning(
                "Conflicting deduction at %s: pinned %.1f, got %.1f",
                coord, current, value,
            )
            return False
        self._values[coord.row, coord.col] = value
        return True

    @staticmethod
    def _is_pinned(value: float) -> bool:
        return value == SAFE or value == MINE

    # ========================================================================
    # Queries
    # ========================================================================

    def probability(self, coord: Coord) -> float:
        return float(self._values[coord.row, coord.col])

    def is_safe(self, coord: Coord) -> bool:
        return self._values[coord.row, coord.col] == SAFE

    def is_mine(self, coord: Coord) -> bool:
        return self._values[coord.row, coord.col] == MINE

    def is_pinned(self, coord: Coord) -> bool:
        return self._is_pinned(self._values[coord.row, coord.col])

    def certain_mines(self, grid: GridState) -> List[Coord]:
        """Hidden-unmarked cells pinned to 1.0, row-major."""
        return [coord for coord in grid.hidden_cells() if self.is_mine(coord)]

    def certain_safes(self, grid: GridState) -> List[Coord]:
        """Hidden-unmarked cells pinned to 0.0, row-major."""
        return [coord for coord in grid.hidden_cells() if self.is_safe(coord)]

    def safest_cell(self, grid: GridState) -> Optional[Coord]:
        """
        Hidden-unmarked cell of minimum probability.

        Ties go to the first cell in row-major order. Cells pinned to 1.0
        are never returned.

        Returns:
            The coordinate, or None when no candidate exists.
        """
        best: Optional[Coord] = None
        best_prob = MINE
        for coord in grid.hidden_cells():
            prob = self._values[coord.row, coord.col]
            if prob < best_prob:
                best_prob = prob
                best = coord
        return best

    def as_array(self) -> np.ndarray:
        """Copy of the surface."""
        return self._values.copy()
