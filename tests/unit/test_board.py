"""
Unit tests for the authoritative Board.

Tests configuration validation, mine placement, visiting, marking,
auto-explore, win/lose conditions and snapshot rendering.
"""
import pytest
import numpy as np
from game import Board, GameConfig, GameState, CellStatus


# ============================================================================
# Game Configuration Tests
# ============================================================================

class TestGameConfig:
    """Test game configuration validation."""

    def test_valid_config_creation(self, valid_config: GameConfig) -> None:
        """Valid configuration should be created successfully."""
        assert valid_config.rows == 9
        assert valid_config.columns == 9
        assert valid_config.total_mines == 10

    def test_zero_rows_raises_error(self) -> None:
        with pytest.raises(ValueError, match="dimensions must be positive"):
            GameConfig(0, 9, 10)

    def test_zero_columns_raises_error(self) -> None:
        with pytest.raises(ValueError, match="dimensions must be positive"):
            GameConfig(9, 0, 10)

    def test_negative_mines_raises_error(self) -> None:
        with pytest.raises(ValueError, match="cannot be negative"):
            GameConfig(9, 9, -1)

    def test_too_many_mines_raises_error(self) -> None:
        with pytest.raises(ValueError, match="Too many mines"):
            GameConfig(3, 3, 10)  # Max is 8 (9 cells - 1)

    def test_max_mines_is_valid(self) -> None:
        config = GameConfig(3, 3, 8)
        assert config.total_mines == 8


# ============================================================================
# First Visit Tests
# ============================================================================

class TestFirstVisit:
    """Test mine placement on the first visit."""

    def test_mines_not_placed_before_first_visit(
        self, default_board: Board
    ) -> None:
        mines = sum(
            default_board.is_mine(r, c) for r in range(9) for c in range(9)
        )
        assert mines == 0

    def test_first_visit_places_mines(self, default_board: Board) -> None:
        default_board.visit(0, 0)
        mines = sum(
            default_board.is_mine(r, c) for r in range(9) for c in range(9)
        )
        assert mines == default_board.config.total_mines

    def test_first_visit_never_hits_mine(self) -> None:
        for seed in range(50):
            board = Board(seed=seed)
            board.visit(4, 4)
            assert board.is_lost is False

    def test_seed_makes_layout_reproducible(self) -> None:
        first = Board(seed=7)
        second = Board(seed=7)
        first.visit(0, 0)
        second.visit(0, 0)
        np.testing.assert_array_equal(
            first.get_observation(), second.get_observation()
        )


# ============================================================================
# Visit Tests
# ============================================================================

class TestVisit:
    """Test cell visiting behavior."""

    def test_visit_zero_cascades(self, two_mine_board: Board) -> None:
        assert two_mine_board.visit(0, 0) is True
        assert two_mine_board.snapshot() == ["01?", "02?", "01?"]

    def test_visit_same_cell_twice_returns_false(
        self, two_mine_board: Board
    ) -> None:
        two_mine_board.visit(0, 0)
        assert two_mine_board.visit(0, 0) is False

    def test_visit_invalid_position_returns_false(
        self, two_mine_board: Board
    ) -> None:
        assert two_mine_board.visit(-1, 0) is False
        assert two_mine_board.visit(0, 3) is False

    def test_visit_mine_loses(self, two_mine_board: Board) -> None:
        two_mine_board.visit(0, 2)
        assert two_mine_board.game_state == GameState.LOST
        assert two_mine_board.get_cell(0, 2).status == CellStatus.EXPLODED
        assert two_mine_board.snapshot()[0] == "??X"

    def test_no_visit_after_loss(self, two_mine_board: Board) -> None:
        two_mine_board.visit(0, 2)
        assert two_mine_board.visit(0, 0) is False

    def test_empty_board_reveals_everything(self, empty_board: Board) -> None:
        empty_board.visit(2, 2)
        assert empty_board.is_won is True
        assert empty_board.cells_revealed == 25

    def test_large_sparse_board_floods_without_recursion(self) -> None:
        board = Board(GameConfig(40, 40, 1), seed=0)
        assert board.visit(0, 0) is True
        assert board.is_lost is False
        assert board.cells_revealed >= 40 * 40 - 9

    def test_flood_stops_at_numbered_cells(self) -> None:
        board = Board.from_layout(["....", "....", "...*"])
        board.visit(0, 0)
        assert board.snapshot() == ["0000", "0011", "001?"]
        assert board.is_won is True


# ============================================================================
# Mark and Auto-explore Tests
# ============================================================================

class TestMarkAndAutoExplore:
    """Test marking and chording."""

    def test_mark_hidden_cell(self, two_mine_board: Board) -> None:
        assert two_mine_board.mark(0, 2) is True
        assert two_mine_board.get_cell(0, 2).is_marked is True

    def test_mark_toggles(self, two_mine_board: Board) -> None:
        two_mine_board.mark(0, 2)
        two_mine_board.mark(0, 2)
        assert two_mine_board.get_cell(0, 2).is_hidden is True

    def test_mark_revealed_cell_returns_false(
        self, two_mine_board: Board
    ) -> None:
        two_mine_board.visit(0, 0)
        assert two_mine_board.mark(0, 0) is False

    def test_auto_explore_requires_all_marks(
        self, two_mine_board: Board
    ) -> None:
        two_mine_board.visit(0, 0)
        assert two_mine_board.auto_explore(0, 1) is False

    def test_auto_explore_reveals_neighbors(self, two_mine_board: Board) -> None:
        two_mine_board.visit(0, 0)
        two_mine_board.mark(0, 2)
        assert two_mine_board.auto_explore(0, 1) is True
        assert two_mine_board.get_cell(1, 2).is_revealed is True
        assert two_mine_board.is_won is True

    def test_auto_explore_with_wrong_mark_loses(self) -> None:
        board = Board.from_layout(["*.*", "...", "..."])
        board.visit(2, 2)
        assert board.snapshot()[0] == "???"
        board.mark(0, 1)
        # (1, 0) shows 1 and now has one mark, so chording reveals (0, 0)
        board.auto_explore(1, 0)
        assert board.is_lost is True

    def test_apply_dispatches_protocol_codes(
        self, two_mine_board: Board
    ) -> None:
        assert two_mine_board.apply(0, 0, 0) is True
        assert two_mine_board.apply(1, 0, 2) is True
        assert two_mine_board.apply(2, 0, 1) is True
        assert two_mine_board.is_won is True

    def test_apply_unknown_type_raises(self, two_mine_board: Board) -> None:
        with pytest.raises(ValueError, match="Unknown action type"):
            two_mine_board.apply(3, 0, 0)


# ============================================================================
# Observation Tests
# ============================================================================

class TestObservation:
    """Test disclosed-state rendering."""

    def test_new_board_all_hidden(self, default_board: Board) -> None:
        obs = default_board.get_observation()
        assert obs.shape == (9, 9)
        assert (obs == -1).all()

    def test_marked_cell_shows_as_at(self, two_mine_board: Board) -> None:
        two_mine_board.mark(2, 2)
        assert two_mine_board.snapshot()[2] == "??@"

    def test_reset_clears_board(self, two_mine_board: Board) -> None:
        two_mine_board.visit(0, 0)
        two_mine_board.reset()
        assert two_mine_board.is_playing is True
        assert (two_mine_board.get_observation() == -1).all()
