"""
Pytest configuration and shared fixtures.
"""
import itertools
import pytest
import sys
from pathlib import Path
from typing import Iterator, List, Set

import numpy as np

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from game import Board, GameConfig, GridState, Coord, parse_snapshot
from solver import DecisionEngine, ProbabilitySurface


# ============================================================================
# Helpers
# ============================================================================

def grid_from_lines(lines: List[str]) -> GridState:
    """Build a grid state from protocol lines."""
    grid = GridState(len(lines), len(lines[0]))
    grid.ingest(parse_snapshot(lines, len(lines), len(lines[0])))
    return grid


def reset_surface(grid: GridState) -> ProbabilitySurface:
    surface = ProbabilitySurface(grid.rows, grid.columns)
    surface.reset(grid)
    return surface


def frontier(grid: GridState) -> List[Coord]:
    """Hidden cells adjacent to at least one revealed cell."""
    return [
        coord for coord in grid.hidden_cells()
        if any(grid.cell(n).is_revealed for n in grid.neighbors(coord))
    ]


def consistent_placements(grid: GridState) -> Iterator[Set[Coord]]:
    """
    Every mine placement over the frontier that satisfies all revealed
    counts, with marked cells taken as mines.
    """
    cells = frontier(grid)
    revealed = grid.revealed_cells()
    for bits in itertools.product((False, True), repeat=len(cells)):
        mines = {cell for cell, bit in zip(cells, bits) if bit}
        if all(
            grid.known_mine_neighbor_count(coord)
            + sum(1 for n in grid.neighbors(coord) if n in mines)
            == grid.count(coord)
            for coord in revealed
        ):
            yield mines


# ============================================================================
# Grid Fixtures
# ============================================================================

@pytest.fixture
def two_mine_layout() -> List[str]:
    """3x3 layout with mines in the right column corners."""
    return ["..*", "...", "..*"]


@pytest.fixture
def two_mine_board(two_mine_layout: List[str]) -> Board:
    """3x3 board with 2 fixed mines."""
    return Board.from_layout(two_mine_layout)


@pytest.fixture
def small_config() -> GameConfig:
    """3x3 game with 2 mines, as in the reference scenarios."""
    return GameConfig(3, 3, 2)


@pytest.fixture
def engine(small_config: GameConfig) -> DecisionEngine:
    """Engine with a seeded fallback generator."""
    return DecisionEngine(small_config, rng=np.random.default_rng(0))


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def valid_config() -> GameConfig:
    """Create a valid game configuration."""
    return GameConfig(9, 9, 10)


@pytest.fixture
def default_board() -> Board:
    """Create a default 9x9 board with 10 mines."""
    return Board(seed=1234)


@pytest.fixture
def empty_board() -> Board:
    """Create a board with no mines for cascade testing."""
    return Board(GameConfig(5, 5, 0))
