"""
Local constraint propagator.

Applies the two elementary deductions over every revealed cell until a
full pass changes nothing:
    remaining == 0          -> all unresolved neighbours are safe
    remaining == |cells|    -> all unresolved neighbours are mines
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, List

from game import Coord, GridState

from .constraints import NeighborConstraint, build_constraint
from .probability import ProbabilitySurface


logger = logging.getLogger(__name__)


@dataclass
class PropagationResult:
    """Cells pinned by one propagator run."""

    passes: int = 0
    forced_safe: List[Coord] = field(default_factory=list)
    forced_mines: List[Coord] = field(default_factory=list)
    violations: List[NeighborConstraint] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.forced_safe or self.forced_mines)


class ConstraintPropagator:
    """
    Fixpoint iteration of the elementary deductions.

    Cells pinned earlier are resolved when later constraints are built,
    so a deduction can immediately unlock a neighbouring constraint. Every
    changing pass pins at least one new cell and pinned cells never move,
    so the loop ends after at most R*C passes.
    """

    def __init__(self, grid: GridState, surface: ProbabilitySurface) -> None:
        self.grid = grid
        self.surface = surface

    def run(self) -> PropagationResult:
        """
        Propagate to a fixed point.

        Returns:
            Pass count, pinned cells and constraints that broke an invariant.
        """
        result = PropagationResult()
        violations: Dict[Coord, NeighborConstraint] = {}
        max_passes = self.grid.rows * self.grid.columns

        changed = True
        while changed:
            if result.passes >= max_passes:
                raise RuntimeError(
                    f"Propagation did not converge in {max_passes} passes"
                )
            result.passes += 1
            changed = self._scan(result, violations)

        result.violations = list(violations.values())
        for constraint in result.violations:
            logger.warning(
                "Impossible constraint at %s: remaining=%d, unresolved=%d",
                constraint.origin,
                constraint.raw_remaining,
                len(constraint.cells),
            )
        return result

    def _scan(
        self,
        result: PropagationResult,
        violations: Dict[Coord, NeighborConstraint],
    ) -> bool:
        """One row-major pass over the grid. Returns True if anything changed."""
        changed = False
        for coord in self.grid.revealed_cells():
            # Built lazily so cells pinned earlier in this pass are resolved.
            constraint = build_constraint(self.grid, coord, self.surface)
            if not constraint.is_consistent:
                violations.setdefault(constraint.origin, constraint)
            if constraint.all_safe:
                for cell in sorted(constraint.cells):
                    if self.surface.force_safe(cell):
                        result.forced_safe.append(cell)
                        changed = True
            elif constraint.all_mines:
                for cell in sorted(constraint.cells):
                    if self.surface.force_mine(cell):
                        result.forced_mines.append(cell)
                        changed = True
        return changed

