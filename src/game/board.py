"""
Board module: the authoritative game the client plays against offline.

Implements mine placement, visiting, marking, auto-explore and game state
management, and renders what the server would disclose to the client.
"""
import random
from collections import deque
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .cell import Cell, CellStatus, Coord
from .snapshot import format_snapshot


# ============================================================================
# Constants
# ============================================================================

VISIT = 0
MARK = 1
AUTO_EXPLORE = 2


class GameState(Enum):
    """Possible states of the game."""

    PLAYING = auto()
    WON = auto()
    LOST = auto()


@dataclass
class GameConfig:
    """
    Startup parameters of a game, immutable for its duration.

    Attributes:
        rows: Number of rows.
        columns: Number of columns.
        total_mines: Total mines on the grid.
    """

    rows: int = 9
    columns: int = 9
    total_mines: int = 10

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Ensure configuration values are valid."""
        if self.rows < 1 or self.columns < 1:
            raise ValueError("Grid dimensions must be positive")
        if self.total_mines < 0:
            raise ValueError("Number of mines cannot be negative")
        max_mines = self.rows * self.columns - 1
        if self.total_mines > max_mines:
            raise ValueError(f"Too many mines (max {max_mines})")

    @property
    def total_cells(self) -> int:
        return self.rows * self.columns


# Preset difficulty levels
BEGINNER = GameConfig(9, 9, 10)
INTERMEDIATE = GameConfig(16, 16, 40)
EXPERT = GameConfig(16, 30, 99)


# ============================================================================
# Board Class
# ============================================================================

@dataclass
class Board:
    """
    Authoritative Minesweeper game.

    Mines are placed on the first visit, avoiding the visited cell, unless
    a fixed layout was supplied.
    """

    config: GameConfig = field(default_factory=GameConfig)
    seed: Optional[int] = None
    _mines: np.ndarray = field(init=False, repr=False)
    _counts: np.ndarray = field(init=False, repr=False)
    _grid: List[List[Cell]] = field(default_factory=list, repr=False)
    _game_state: GameState = GameState.PLAYING
    _mines_placed: bool = False
    _cells_revealed: int = 0

    def __post_init__(self) -> None:
        """Initialize the grid after dataclass creation."""
        self._rng = random.Random(self.seed)
        self._init_grid()

    @classmethod
    def from_layout(cls, layout: Sequence[str]) -> "Board":
        """
        Build a board with a fixed mine layout.

        Args:
            layout: One string per row, ``*`` for a mine, anything else safe.
        """
        rows = len(layout)
        columns = len(layout[0])
        mines = [
            Coord(row, col)
            for row, line in enumerate(layout)
            for col, char in enumerate(line)
            if char == "*"
        ]
        board = cls(GameConfig(rows, columns, len(mines)))
        board._set_mines(mines)
        return board

    # ========================================================================
    # Grid Initialization (Low-level)
    # ========================================================================

    def _init_grid(self) -> None:
        """Create an all-hidden grid with no mines."""
        shape = (self.config.rows, self.config.columns)
        self._mines = np.zeros(shape, dtype=bool)
        self._counts = np.zeros(shape, dtype=np.int8)
        self._grid = [
            [Cell() for _ in range(self.config.columns)]
            for _ in range(self.config.rows)
        ]

    def _place_mines(self, exclude: Coord) -> None:
        """Place mines randomly, keeping one cell mine-free."""
        positions = [
            Coord(row, col)
            for row in range(self.config.rows)
            for col in range(self.config.columns)
            if (row, col) != exclude
        ]
        self._set_mines(self._rng.sample(positions, self.config.total_mines))

    def _set_mines(self, mines: Sequence[Coord]) -> None:
        for row, col in mines:
            self._mines[row, col] = True
        self._mines_placed = True
        self._calculate_adjacent_mines()

    def _calculate_adjacent_mines(self) -> None:
        """Calculate adjacent mine counts for all cells."""
        for row in range(self.config.rows):
            for col in range(self.config.columns):
                self._counts[row, col] = sum(
                    1 for r, c in self._get_neighbors(row, col)
                    if self._mines[r, c]
                )

    # ========================================================================
    # Neighbor Utilities (Low-level)
    # ========================================================================

    def _get_neighbors(self, row: int, col: int) -> List[Tuple[int, int]]:
        """Get valid neighboring cell positions."""
        neighbors = []
        for delta_row in (-1, 0, 1):
            for delta_col in (-1, 0, 1):
                if delta_row == 0 and delta_col == 0:
                    continue
                new_row = row + delta_row
                new_col = col + delta_col
                if self._is_valid_position(new_row, new_col):
                    neighbors.append((new_row, new_col))
        return neighbors

    def _is_valid_position(self, row: int, col: int) -> bool:
        """Check if position is within board bounds."""
        return 0 <= row < self.config.rows and 0 <= col < self.config.columns

    # ========================================================================
    # Game Actions (Mid-level)
    # ========================================================================

    def visit(self, row: int, col: int) -> bool:
        """
        Visit a cell.

        On the first visit of a random board, places mines avoiding this
        cell. Zero cells reveal their neighbours recursively. Visiting a
        mine loses the game.

        Returns:
            True if the visit changed the board, False otherwise.
        """
        if not self._can_act(row, col):
            return False
        if not self._grid[row][col].is_hidden:
            return False
        if not self._mines_placed:
            self._place_mines(Coord(row, col))
        return self._reveal_cell(row, col)

    def _can_act(self, row: int, col: int) -> bool:
        return self._game_state == GameState.PLAYING and self._is_valid_position(
            row, col
        )

    def _reveal_cell(self, row: int, col: int) -> bool:
        """Reveal a single cell and handle consequences."""
        if self._mines[row, col]:
            self._grid[row][col] = Cell(CellStatus.EXPLODED)
            self._game_state = GameState.LOST
            return True

        # Flood fill over zero cells; a zero has no mine neighbours.
        pending = deque([(row, col)])
        while pending:
            current_row, current_col = pending.popleft()
            if not self._grid[current_row][current_col].is_hidden:
                continue
            count = int(self._counts[current_row, current_col])
            self._grid[current_row][current_col] = Cell(CellStatus.REVEALED, count)
            self._cells_revealed += 1
            if count == 0:
                pending.extend(self._get_neighbors(current_row, current_col))

        self._check_win_condition()
        return True

    def _check_win_condition(self) -> None:
        """Check if all non-mine cells are revealed."""
        safe_cells = self.config.total_cells - self.config.total_mines
        if self._cells_revealed >= safe_cells:
            self._game_state = GameState.WON

    def mark(self, row: int, col: int) -> bool:
        """
        Toggle a mine mark on a cell.

        Returns:
            True if the mark was toggled, False otherwise.
        """
        if not self._can_act(row, col):
            return False
        cell = self._grid[row][col]
        if cell.is_hidden:
            self._grid[row][col] = Cell(CellStatus.MARKED)
            return True
        if cell.is_marked:
            self._grid[row][col] = Cell()
            return True
        return False

    def auto_explore(self, row: int, col: int) -> bool:
        """
        Reveal all unmarked neighbours of a revealed cell whose mines are
        all marked.

        Returns:
            True if anything was revealed, False otherwise.
        """
        if not self._can_auto_explore(row, col):
            return False

        revealed_any = False
        for neighbor_row, neighbor_col in self._get_neighbors(row, col):
            if self._game_state != GameState.PLAYING:
                break
            if self._grid[neighbor_row][neighbor_col].is_hidden:
                self._reveal_cell(neighbor_row, neighbor_col)
                revealed_any = True

        return revealed_any

    def _can_auto_explore(self, row: int, col: int) -> bool:
        """Check if auto-explore is valid."""
        if not self._can_act(row, col):
            return False
        cell = self._grid[row][col]
        if not cell.is_revealed:
            return False
        marked = sum(
            1 for r, c in self._get_neighbors(row, col)
            if self._grid[r][c].is_marked
        )
        return marked == cell.count

    def apply(self, action_type: int, row: int, col: int) -> bool:
        """
        Apply a protocol action.

        Args:
            action_type: 0 visit, 1 mark, 2 auto-explore.
            row: Row index.
            col: Column index.
        """
        if action_type == VISIT:
            return self.visit(row, col)
        if action_type == MARK:
            return self.mark(row, col)
        if action_type == AUTO_EXPLORE:
            return self.auto_explore(row, col)
        raise ValueError(f"Unknown action type: {action_type}")

    # ========================================================================
    # State Accessors (High-level)
    # ========================================================================

    @property
    def game_state(self) -> GameState:
        """Get current game state."""
        return self._game_state

    @property
    def is_playing(self) -> bool:
        """Check if game is still in progress."""
        return self._game_state == GameState.PLAYING

    @property
    def is_won(self) -> bool:
        """Check if game was won."""
        return self._game_state == GameState.WON

    @property
    def is_lost(self) -> bool:
        """Check if game was lost."""
        return self._game_state == GameState.LOST

    @property
    def cells_revealed(self) -> int:
        return self._cells_revealed

    def is_mine(self, row: int, col: int) -> bool:
        return bool(self._mines[row, col])

    def get_cell(self, row: int, col: int) -> Optional[Cell]:
        """Get the disclosed cell at position, or None if invalid."""
        if not self._is_valid_position(row, col):
            return None
        return self._grid[row][col]

    def get_observation(self) -> np.ndarray:
        """
        Get the disclosed board state as numpy array.

        Returns:
            2D numpy array where:
                -1 = hidden
                -2 = marked
                0-8 = revealed with adjacent count
                9 = exploded mine
        """
        obs = np.zeros((self.config.rows, self.config.columns), dtype=np.int8)
        for row in range(self.config.rows):
            for col in range(self.config.columns):
                obs[row, col] = self._grid[row][col].to_observation()
        return obs

    def snapshot(self) -> List[str]:
        """Disclosed state in the server's text alphabet."""
        return format_snapshot(self.get_observation())

    def reset(self) -> None:
        """Reset board to initial state for new game."""
        self._init_grid()
        self._game_state = GameState.PLAYING
        self._mines_placed = False
        self._cells_revealed = 0
