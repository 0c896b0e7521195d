"""
Unit tests for the gymnasium environment wrapper.
"""
import numpy as np
from game import Board, GameConfig, MinesweeperEnv


class TestSpaces:
    """Test environment spaces."""

    def test_observation_space(self) -> None:
        env = MinesweeperEnv(GameConfig(4, 5, 3))
        assert env.observation_space.shape == (4, 5)
        assert env.observation_space.dtype == np.int8

    def test_action_space(self) -> None:
        env = MinesweeperEnv(GameConfig(4, 5, 3))
        assert list(env.action_space.nvec) == [3, 4, 5]

    def test_reset_observation_in_space(self) -> None:
        env = MinesweeperEnv(GameConfig(4, 5, 3))
        obs, info = env.reset(seed=0)
        assert env.observation_space.contains(obs)
        assert info["game_state"] == "PLAYING"
        assert info["total_safe"] == 17


class TestStep:
    """Test rewards and termination."""

    def test_winning_sequence(self, two_mine_board: Board) -> None:
        env = MinesweeperEnv(board=two_mine_board)
        env.reset(options={"keep_layout": True})

        _, reward, terminated, _, info = env.step((0, 0, 0))
        assert reward == 1.0
        assert terminated is False
        assert info["revealed"] == 6

        _, reward, _, _, _ = env.step((1, 0, 2))
        assert reward == 1.0

        _, reward, terminated, _, info = env.step((2, 0, 1))
        assert reward == 10.0
        assert terminated is True
        assert info["game_state"] == "WON"

    def test_mine_hit(self, two_mine_board: Board) -> None:
        env = MinesweeperEnv(board=two_mine_board)
        env.reset(options={"keep_layout": True})
        obs, reward, terminated, _, _ = env.step((0, 2, 2))
        assert reward == -10.0
        assert terminated is True
        assert obs[2, 2] == 9

    def test_noop_penalty(self, two_mine_board: Board) -> None:
        env = MinesweeperEnv(board=two_mine_board)
        env.reset(options={"keep_layout": True})
        env.step((0, 0, 0))
        _, reward, _, _, info = env.step((0, 0, 0))
        assert reward == -0.1
        assert info["steps"] == 2

    def test_seeded_reset_is_reproducible(self) -> None:
        env = MinesweeperEnv(GameConfig(6, 6, 5))
        env.reset(seed=9)
        first, *_ = env.step((0, 3, 3))
        env.reset(seed=9)
        second, *_ = env.step((0, 3, 3))
        np.testing.assert_array_equal(first, second)


class TestRender:
    """Test text rendering."""

    def test_ansi_render(self, two_mine_board: Board) -> None:
        env = MinesweeperEnv(render_mode="ansi", board=two_mine_board)
        env.reset(options={"keep_layout": True})
        env.step((0, 0, 0))
        env.step((1, 0, 2))
        rows = env.render().split("\n")
        assert rows[0] == "  1 F "
        assert rows[1] == "  2 . "
