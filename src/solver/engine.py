"""
Decision engine: one re-ingest, one inference run and one decision per turn.

Owns the grid state, the probability surface and the bookkeeping counters
for a single game. Nothing is shared between engine instances.
"""
import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Union

import numpy as np

from game import Coord, GameConfig, GridState, IngestReport, parse_snapshot

from .policy import Action, ActionType, DecisionPolicy
from .probability import NEUTRAL_PRIOR, ProbabilitySurface
from .propagator import ConstraintPropagator, PropagationResult
from .subset import SubsetAnalyzer, SubsetResult


logger = logging.getLogger(__name__)

Snapshot = Union[np.ndarray, Sequence[str]]


# ============================================================================
# Engine Configuration
# ============================================================================

@dataclass
class EngineConfig:
    """
    Inference settings.

    Attributes:
        neutral_prior: Probability given to cells no deduction touches.
        joint_fixpoint: Alternate propagator and subset pass until neither
            pins a new cell, instead of a single subset pass.
        max_rounds: Upper bound on propagator/subset rounds in joint mode.
    """

    neutral_prior: float = NEUTRAL_PRIOR
    joint_fixpoint: bool = False
    max_rounds: int = 64

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not 0.0 < self.neutral_prior < 1.0:
            raise ValueError("Neutral prior must be strictly between 0 and 1")
        if self.max_rounds < 1:
            raise ValueError("max_rounds must be positive")


@dataclass
class InferenceReport:
    """What one turn of inference found."""

    ingest: IngestReport
    propagation: PropagationResult
    subset: SubsetResult
    rounds: int = 1


# ============================================================================
# Decision Engine
# ============================================================================

class DecisionEngine:
    """
    Turn-synchronous Minesweeper decision engine.

    Usage:
        engine = DecisionEngine(GameConfig(9, 9, 10))
        send(engine.start(Coord(4, 4)))
        while playing:
            send(engine.step(read_snapshot()))
    """

    def __init__(
        self,
        config: GameConfig,
        engine_config: Optional[EngineConfig] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        """
        Initialize the engine for one game.

        Args:
            config: Grid dimensions and mine count.
            engine_config: Inference settings.
            rng: Source for the policy's random fallback.
        """
        self.config = config
        self.engine_config = engine_config or EngineConfig()
        self.grid = GridState(config.rows, config.columns)
        self.surface = ProbabilitySurface(
            config.rows, config.columns, self.engine_config.neutral_prior
        )
        self.surface.reset(self.grid)
        self.policy = DecisionPolicy(rng)

        # Bookkeeping only; never read by the policy
        self.turns = 0
        self.cells_visited = 0
        self.mines_marked = 0
        self.last_report: Optional[InferenceReport] = None

    # ========================================================================
    # Turn Operations
    # ========================================================================

    def start(self, first: Coord) -> Action:
        """
        Opening move chosen by the caller, not by the policy.

        Raises:
            ValueError: If the coordinate is outside the grid.
        """
        first = Coord(*first)
        if not self.grid.in_bounds(first):
            raise ValueError(f"First move {first} is outside the grid")
        action = Action(first, ActionType.VISIT)
        self._record(action)
        return action

    def observe(self, snapshot: Snapshot) -> InferenceReport:
        """
        Ingest a snapshot and rerun inference from scratch.

        Args:
            snapshot: Observation array, or one protocol line per row.

        Raises:
            SnapshotError: If the snapshot is malformed; state is untouched.
        """
        if isinstance(snapshot, np.ndarray):
            observation = snapshot
        else:
            observation = parse_snapshot(
                snapshot, self.config.rows, self.config.columns
            )
        ingest = self.grid.ingest(observation)
        report = self._infer(ingest)
        self.last_report = report
        return report

    def decide(self) -> Action:
        """
        Choose this turn's action.

        Raises:
            NoMoveAvailable: If the grid is fully resolved.
        """
        action = self.policy.decide(self.grid, self.surface)
        self._record(action)
        logger.debug("Turn %d: %s", self.turns, action)
        return action

    def step(self, snapshot: Snapshot) -> Action:
        """Observe then decide."""
        self.observe(snapshot)
        return self.decide()

    # ========================================================================
    # Inference
    # ========================================================================

    def _infer(self, ingest: IngestReport) -> InferenceReport:
        self.surface.reset(self.grid)
        propagation = ConstraintPropagator(self.grid, self.surface).run()
        subset = SubsetAnalyzer(self.grid, self.surface).run()
        report = InferenceReport(ingest, propagation, subset)

        if not self.engine_config.joint_fixpoint:
            return report

        while subset.changed and report.rounds < self.engine_config.max_rounds:
            report.rounds += 1
            more = ConstraintPropagator(self.grid, self.surface).run()
            subset = SubsetAnalyzer(self.grid, self.surface).run()
            report.propagation.passes += more.passes
            report.propagation.forced_safe.extend(more.forced_safe)
            report.propagation.forced_mines.extend(more.forced_mines)
            report.subset.pairs_checked += subset.pairs_checked
            report.subset.forced_safe.extend(subset.forced_safe)
            report.subset.forced_mines.extend(subset.forced_mines)
        return report

    def _record(self, action: Action) -> None:
        self.turns += 1
        if action.kind == ActionType.VISIT:
            self.cells_visited += 1
        elif action.kind == ActionType.MARK:
            self.mines_marked += 1

    # ========================================================================
    # State Accessors
    # ========================================================================

    @property
    def probabilities(self) -> np.ndarray:
        """Copy of the current probability surface."""
        return self.surface.as_array()

    @property
    def is_resolved(self) -> bool:
        return self.grid.is_resolved
