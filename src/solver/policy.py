"""
Decision policy: a fixed-priority cascade that picks one action per turn.

Priority order (first match wins, row-major scan within each rule):
    1. Auto-explore a numbered cell whose mines are all marked
    2. Mark a cell pinned to 1.0
    3. Visit a cell pinned to 0.0
    4. Visit the least risky hidden cell
    5. Visit a random hidden cell
"""
import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

import numpy as np

from game import Coord, GridState

from .probability import ProbabilitySurface


logger = logging.getLogger(__name__)


# ============================================================================
# Actions
# ============================================================================

class ActionType(IntEnum):
    """Action kinds, valued by their protocol codes."""

    VISIT = 0
    MARK = 1
    AUTO_EXPLORE = 2


@dataclass(frozen=True)
class Action:
    """One move sent to the server."""

    coord: Coord
    kind: ActionType

    @property
    def row(self) -> int:
        return self.coord.row

    @property
    def col(self) -> int:
        return self.coord.col

    def to_protocol(self) -> str:
        """Format as the ``r c type`` line the server expects."""
        return f"{self.coord.row} {self.coord.col} {int(self.kind)}"

    def __str__(self) -> str:
        return f"{self.kind.name} {self.coord}"


class NoMoveAvailable(Exception):
    """No hidden unmarked cell is left to act on."""


# ============================================================================
# Decision Policy
# ============================================================================

class DecisionPolicy:
    """
    State-free priority cascade.

    The only randomness is the last-resort fallback, drawn from an injected
    generator so tests can seed it.
    """

    def __init__(self, rng: Optional[np.random.Generator] = None) -> None:
        """
        Initialize the policy.

        Args:
            rng: Source for the random fallback. Defaults to an unseeded
                generator.
        """
        self.rng = rng if rng is not None else np.random.default_rng()

    def decide(self, grid: GridState, surface: ProbabilitySurface) -> Action:
        """
        Select exactly one action.

        Raises:
            NoMoveAvailable: If no hidden unmarked cell remains.
        """
        hidden = grid.hidden_cells()
        if not hidden:
            raise NoMoveAvailable("Grid is fully resolved")

        coord = self.find_auto_explore(grid)
        if coord is not None:
            return Action(coord, ActionType.AUTO_EXPLORE)

        mines = surface.certain_mines(grid)
        if mines:
            return Action(mines[0], ActionType.MARK)

        safes = surface.certain_safes(grid)
        if safes:
            return Action(safes[0], ActionType.VISIT)

        coord = surface.safest_cell(grid)
        if coord is not None:
            return Action(coord, ActionType.VISIT)

        logger.warning("No ranked candidate, choosing among %d cells at random",
                       len(hidden))
        chosen = hidden[int(self.rng.integers(len(hidden)))]
        return Action(chosen, ActionType.VISIT)

    @staticmethod
    def find_auto_explore(grid: GridState) -> Optional[Coord]:
        """First numbered cell with all mines marked and a hidden neighbour."""
        for coord in grid.revealed_cells():
            count = grid.count(coord)
            if count < 1:
                continue
            if grid.marked_neighbor_count(coord) != count:
                continue
            if grid.hidden_neighbors(coord):
                return coord
        return None
