"""
Gymnasium environment wrapper around the authoritative board.

Lets the client play offline through a standard environment interface.
"""
from typing import Any, Dict, Optional, Tuple, SupportsFloat

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from .board import Board, GameConfig


# ============================================================================
# Minesweeper Environment
# ============================================================================

class MinesweeperEnv(gym.Env):
    """
    Gymnasium environment for Minesweeper with the server's action set.

    Observation:
        2D array where:
        - -1 = hidden cell
        - -2 = marked cell
        - 0-8 = revealed cell with adjacent mine count
        - 9 = exploded mine

    Actions:
        MultiDiscrete (type, row, col) where type is
        0 = visit, 1 = mark, 2 = auto-explore.

    Rewards:
        - +1 for an action that changed the board
        - +10 for winning the game
        - -10 for hitting a mine
        - -0.1 for a no-op action
    """

    metadata = {"render_modes": ["human", "ansi"], "render_fps": 4}

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        render_mode: Optional[str] = None,
        board: Optional[Board] = None,
    ) -> None:
        """
        Initialize the Minesweeper environment.

        Args:
            config: Game configuration (default: 9x9 with 10 mines).
            render_mode: How to render the environment.
            board: Optional pre-built board, e.g. with a fixed layout.
        """
        super().__init__()

        self.board = board or Board(config or GameConfig())
        self.config = self.board.config
        self.render_mode = render_mode

        self.observation_space = spaces.Box(
            low=-2,
            high=9,
            shape=(self.config.rows, self.config.columns),
            dtype=np.int8,
        )
        self.action_space = spaces.MultiDiscrete(
            [3, self.config.rows, self.config.columns]
        )

        self._steps = 0

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Tuple[np.ndarray, Dict[str, Any]]:
        """
        Reset the environment for a new game.

        Args:
            seed: Random seed for mine placement.
            options: ``{"keep_layout": True}`` keeps a fixed board as is.

        Returns:
            Tuple of (observation, info dict).
        """
        super().reset(seed=seed)
        if not (options or {}).get("keep_layout"):
            if seed is not None:
                self.board = Board(self.config, seed=seed)
            else:
                self.board.reset()
        self._steps = 0

        return self.board.get_observation(), self._get_info()

    def step(
        self, action: Any
    ) -> Tuple[np.ndarray, SupportsFloat, bool, bool, Dict[str, Any]]:
        """
        Execute one action in the environment.

        Args:
            action: Sequence (type, row, col).

        Returns:
            Tuple of (observation, reward, terminated, truncated, info).
        """
        action_type, row, col = (int(value) for value in action)
        self._steps += 1

        changed = self.board.apply(action_type, row, col)
        reward = self._calculate_reward(changed)

        observation = self.board.get_observation()
        terminated = not self.board.is_playing

        return observation, reward, terminated, False, self._get_info()

    def _calculate_reward(self, changed: bool) -> float:
        if self.board.is_won:
            return 10.0
        if self.board.is_lost:
            return -10.0
        if not changed:
            return -0.1
        return 1.0

    def _get_info(self) -> Dict[str, Any]:
        """Get info dictionary for current state."""
        return {
            "steps": self._steps,
            "revealed": self.board.cells_revealed,
            "total_safe": self.config.total_cells - self.config.total_mines,
            "game_state": self.board.game_state.name,
        }

    def render(self) -> Optional[str]:
        """Render the current board state."""
        if self.render_mode == "ansi":
            return self._render_ansi()
        if self.render_mode == "human":
            print(self._render_ansi())
        return None

    def _render_ansi(self) -> str:
        """Render board as ASCII string."""
        lines = []
        obs = self.board.get_observation()

        for row in range(self.config.rows):
            row_str = ""
            for col in range(self.config.columns):
                val = obs[row, col]
                if val == -1:
                    row_str += "."
                elif val == -2:
                    row_str += "F"
                elif val == 9:
                    row_str += "*"
                elif val == 0:
                    row_str += " "
                else:
                    row_str += str(val)
                row_str += " "
            lines.append(row_str)

        return "\n".join(lines)

