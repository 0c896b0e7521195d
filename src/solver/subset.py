"""
Pairwise subset analyzer.

If constraint A's cells are a subset of constraint B's cells:
    m_A == m_B                      -> B - A is all safe
    m_B == m_A + |B - A|            -> B - A is all mines

Example:
    A: {X, Y} has 1 mine
    B: {X, Y, Z} has 1 mine
    -> Z must be safe
"""
import logging
from dataclasses import dataclass, field
from itertools import combinations
from typing import List, Optional, Tuple

from game import Coord, GridState

from .constraints import NeighborConstraint, build_constraints
from .probability import ProbabilitySurface


logger = logging.getLogger(__name__)


@dataclass
class SubsetResult:
    """Cells pinned by one subset pass."""

    pairs_checked: int = 0
    forced_safe: List[Coord] = field(default_factory=list)
    forced_mines: List[Coord] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.forced_safe or self.forced_mines)


class SubsetAnalyzer:
    """
    Single refinement pass over the propagator's fixpoint.

    Works on a snapshot of the open constraints taken at the start of the
    pass; cells pinned during the pass do not feed back into it.
    """

    def __init__(self, grid: GridState, surface: ProbabilitySurface) -> None:
        self.grid = grid
        self.surface = surface

    def open_constraints(self) -> List[NeighborConstraint]:
        """Numbered cells with mines left to place among unresolved cells."""
        return [
            constraint
            for constraint in build_constraints(self.grid, self.surface, min_count=1)
            if constraint.remaining > 0
            and constraint.cells
            and constraint.is_consistent
        ]

    def run(self) -> SubsetResult:
        """Compare every unordered pair of open constraints once."""
        result = SubsetResult()
        constraints = self.open_constraints()

        for first, second in combinations(constraints, 2):
            result.pairs_checked += 1
            pair = self._order(first, second)
            if pair is None:
                continue
            self._apply(*pair, result)

        if result.changed:
            logger.debug(
                "Subset pass pinned %d safe, %d mines over %d pairs",
                len(result.forced_safe),
                len(result.forced_mines),
                result.pairs_checked,
            )
        return result

    @staticmethod
    def _order(
        first: NeighborConstraint, second: NeighborConstraint
    ) -> Optional[Tuple[NeighborConstraint, NeighborConstraint]]:
        """Return (smaller, larger) when one is a proper subset of the other."""
        if first.cells < second.cells:
            return first, second
        if second.cells < first.cells:
            return second, first
        return None

    def _apply(
        self,
        inner: NeighborConstraint,
        outer: NeighborConstraint,
        result: SubsetResult,
    ) -> None:
        diff_cells = sorted(outer.cells - inner.cells)
        extra = len(diff_cells)

        if inner.remaining == outer.remaining:
            for coord in diff_cells:
                if self.surface.force_safe(coord):
                    result.forced_safe.append(coord)
        elif outer.remaining == inner.remaining + extra:
            for coord in diff_cells:
                if self.surface.force_mine(coord):
                    result.forced_mines.append(coord)
