"""
Unit tests for the decision policy cascade.

Tests rule priority, row-major tie-breaking and the random fallback.
"""
import logging

import pytest
import numpy as np
from game import Coord
from solver import (
    Action,
    ActionType,
    DecisionPolicy,
    NoMoveAvailable,
    ProbabilitySurface,
)

from conftest import grid_from_lines, reset_surface


# ============================================================================
# Action Tests
# ============================================================================

class TestAction:
    """Test action formatting."""

    def test_protocol_line(self) -> None:
        assert Action(Coord(0, 2), ActionType.MARK).to_protocol() == "0 2 1"
        assert Action(Coord(3, 4), ActionType.AUTO_EXPLORE).to_protocol() == "3 4 2"

    def test_action_codes(self) -> None:
        assert int(ActionType.VISIT) == 0
        assert int(ActionType.MARK) == 1
        assert int(ActionType.AUTO_EXPLORE) == 2

    def test_str(self) -> None:
        assert str(Action(Coord(1, 1), ActionType.VISIT)) == "VISIT (1, 1)"


# ============================================================================
# Cascade Tests
# ============================================================================

class TestCascade:
    """First matching rule wins."""

    def test_auto_explore_beats_certain_safe(self) -> None:
        grid = grid_from_lines(["01@", "02?", "01?"])
        surface = reset_surface(grid)
        surface.force_safe(Coord(1, 2))
        action = DecisionPolicy().decide(grid, surface)
        assert action == Action(Coord(0, 1), ActionType.AUTO_EXPLORE)

    def test_auto_explore_needs_hidden_neighbor(self) -> None:
        grid = grid_from_lines(["1@", "??"])
        assert DecisionPolicy.find_auto_explore(grid) == Coord(0, 0)
        done = grid_from_lines(["1@", "11"])
        assert DecisionPolicy.find_auto_explore(done) is None

    def test_zero_cells_never_auto_explore(self) -> None:
        grid = grid_from_lines(["0?"])
        assert DecisionPolicy.find_auto_explore(grid) is None

    def test_mark_beats_visit(self) -> None:
        grid = grid_from_lines(["???"])
        surface = reset_surface(grid)
        surface.force_safe(Coord(0, 0))
        surface.force_mine(Coord(0, 2))
        action = DecisionPolicy().decide(grid, surface)
        assert action == Action(Coord(0, 2), ActionType.MARK)

    def test_first_certain_safe_is_visited(self) -> None:
        grid = grid_from_lines(["???", "???"])
        surface = reset_surface(grid)
        surface.force_safe(Coord(1, 0))
        surface.force_safe(Coord(0, 2))
        action = DecisionPolicy().decide(grid, surface)
        assert action == Action(Coord(0, 2), ActionType.VISIT)

    def test_least_risky_cell_is_visited(self) -> None:
        grid = grid_from_lines(["???", "???", "???"])
        action = DecisionPolicy().decide(grid, reset_surface(grid))
        assert action == Action(Coord(0, 0), ActionType.VISIT)

    def test_least_risky_skips_marked_cells(self) -> None:
        grid = grid_from_lines(["@??"])
        surface = reset_surface(grid)
        action = DecisionPolicy().decide(grid, surface)
        assert action == Action(Coord(0, 1), ActionType.VISIT)

    def test_no_hidden_cell_raises(self) -> None:
        grid = grid_from_lines(["1@", "11"])
        with pytest.raises(NoMoveAvailable):
            DecisionPolicy().decide(grid, reset_surface(grid))


# ============================================================================
# Fallback Tests
# ============================================================================

class TestRandomFallback:
    """Without any ranked candidate the policy picks at random."""

    def test_fallback_visits_hidden_cell(self, caplog) -> None:
        grid = grid_from_lines(["1??", "???"])
        # Never reset, so every value is NaN and nothing ranks
        surface = ProbabilitySurface(2, 3)
        policy = DecisionPolicy(np.random.default_rng(3))
        with caplog.at_level(logging.WARNING):
            action = policy.decide(grid, surface)

        assert action.kind == ActionType.VISIT
        assert action.coord in grid.hidden_cells()
        assert "at random" in caplog.text

    def test_fallback_is_reproducible(self) -> None:
        grid = grid_from_lines(["????", "????"])
        surface = ProbabilitySurface(2, 4)
        first = [
            DecisionPolicy(np.random.default_rng(11)).decide(grid, surface)
            for _ in range(3)
        ]
        second = [
            DecisionPolicy(np.random.default_rng(11)).decide(grid, surface)
            for _ in range(3)
        ]
        assert first == second
