"""
Neighbor constraints derived from revealed cells.

A revealed "n" with k known-mine neighbours says: exactly n - k of its
unresolved hidden neighbours are mines.
"""
from dataclasses import dataclass
from typing import FrozenSet, List, Optional

from game import Coord, GridState

from .probability import ProbabilitySurface


# ============================================================================
# Constraint Types
# ============================================================================

@dataclass(frozen=True)
class NeighborConstraint:
    """
    Constraint: exactly ``remaining`` of ``cells`` are mines.

    For example, if a revealed "2" has 3 unresolved neighbours and 1
    marked, the constraint is: cells={A, B, C}, remaining=1.

    Attributes:
        origin: The revealed cell the constraint comes from.
        cells: Unresolved hidden neighbours.
        raw_remaining: Count minus known mines, before clipping.
    """

    origin: Coord
    cells: FrozenSet[Coord]
    raw_remaining: int

    @property
    def remaining(self) -> int:
        """Mines still to be found among ``cells``, clipped at 0."""
        return max(self.raw_remaining, 0)

    @property
    def is_overcounted(self) -> bool:
        """More known mines around the cell than its count allows."""
        return self.raw_remaining < 0

    @property
    def is_unsatisfiable(self) -> bool:
        """More mines needed than cells available."""
        return self.raw_remaining > len(self.cells)

    @property
    def is_consistent(self) -> bool:
        return not (self.is_overcounted or self.is_unsatisfiable)

    @property
    def all_safe(self) -> bool:
        return bool(self.cells) and self.remaining == 0

    @property
    def all_mines(self) -> bool:
        return bool(self.cells) and self.remaining == len(self.cells)


def build_constraint(
    grid: GridState,
    coord: Coord,
    surface: Optional[ProbabilitySurface] = None,
) -> NeighborConstraint:
    """
    Build the constraint of a revealed cell.

    Args:
        grid: Current grid state.
        coord: A revealed cell.
        surface: When given, cells already pinned this turn are resolved:
            pinned mines count as known mines and pinned cells leave the set.
    """
    # Exploded neighbours count as mines alongside marked ones.
    known_mines = grid.known_mine_neighbor_count(coord)
    cells = []
    for neighbor in grid.hidden_neighbors(coord):
        if surface is not None and surface.is_pinned(neighbor):
            if surface.is_mine(neighbor):
                known_mines += 1
            continue
        cells.append(neighbor)

    return NeighborConstraint(
        origin=coord,
        cells=frozenset(cells),
        raw_remaining=grid.count(coord) - known_mines,
    )


def build_constraints(
    grid: GridState,
    surface: Optional[ProbabilitySurface] = None,
    min_count: int = 0,
) -> List[NeighborConstraint]:
    """Constraints of every revealed cell with count >= min_count, row-major."""
    return [
        build_constraint(grid, coord, surface)
        for coord in grid.revealed_cells()
        if grid.count(coord) >= min_count
    ]
