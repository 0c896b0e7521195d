"""
Minesweeper constraint inference and decision module.

Provides the inference stages and the engine that ties them together:
- ConstraintPropagator: elementary deductions run to a fixed point
- SubsetAnalyzer: pairwise subset deductions
- ProbabilitySurface: per-cell mine likelihood
- DecisionPolicy: fixed-priority action cascade
- DecisionEngine: one snapshot in, one action out
"""
from .constraints import NeighborConstraint, build_constraint, build_constraints
from .probability import ProbabilitySurface, NEUTRAL_PRIOR
from .propagator import ConstraintPropagator, PropagationResult
from .subset import SubsetAnalyzer, SubsetResult
from .policy import Action, ActionType, DecisionPolicy, NoMoveAvailable
from .engine import DecisionEngine, EngineConfig, InferenceReport

__all__ = [
    "NeighborConstraint",
    "build_constraint",
    "build_constraints",
    "ProbabilitySurface",
    "NEUTRAL_PRIOR",
    "ConstraintPropagator",
    "PropagationResult",
    "SubsetAnalyzer",
    "SubsetResult",
    "Action",
    "ActionType",
    "DecisionPolicy",
    "NoMoveAvailable",
    "DecisionEngine",
    "EngineConfig",
    "InferenceReport",
]
