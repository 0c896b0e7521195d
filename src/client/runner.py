"""
Offline play: run the decision engine against the local environment.

Provides a single-game runner and an evaluator that aggregates results
over many games.
"""
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

import numpy as np

from game import Board, Coord, GameConfig, MinesweeperEnv

from solver import Action, DecisionEngine, EngineConfig, NoMoveAvailable


logger = logging.getLogger(__name__)


# ============================================================================
# Game Results
# ============================================================================

@dataclass
class GameResult:
    """Outcome of a single game."""

    won: bool = False
    turns: int = 0
    cells_visited: int = 0
    mines_marked: int = 0
    revealed_cells: int = 0
    snapshot_violations: int = 0
    game_state: str = "PLAYING"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "won": self.won,
            "turns": self.turns,
            "cells_visited": self.cells_visited,
            "mines_marked": self.mines_marked,
            "revealed_cells": self.revealed_cells,
            "snapshot_violations": self.snapshot_violations,
            "game_state": self.game_state,
        }


# ============================================================================
# Game Runner
# ============================================================================

class GameRunner:
    """
    Plays the engine against a MinesweeperEnv.

    The opening move is not the engine's choice: it is drawn from the
    runner's own generator unless given explicitly.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        engine_config: Optional[EngineConfig] = None,
        seed: Optional[int] = None,
        max_turns: Optional[int] = None,
        on_turn: Optional[Callable[[MinesweeperEnv, Action], None]] = None,
    ) -> None:
        """
        Initialize the runner.

        Args:
            config: Game configuration.
            engine_config: Inference settings passed to each engine.
            seed: Seed for mine placement, opening moves and the fallback.
            max_turns: Safety cap on turns per game (default: 2 * cells).
            on_turn: Optional callback after each applied action.
        """
        self.config = config or GameConfig()
        self.engine_config = engine_config
        self.rng = np.random.default_rng(seed)
        self.max_turns = max_turns or 2 * self.config.total_cells
        self.on_turn = on_turn

    def play(
        self,
        board: Optional[Board] = None,
        first: Optional[Coord] = None,
        render_mode: Optional[str] = None,
    ) -> GameResult:
        """
        Play one game to completion.

        Args:
            board: Optional fixed board; a fresh random one otherwise.
            first: Opening coordinate; random otherwise.
            render_mode: Passed to the environment.
        """
        env = MinesweeperEnv(self.config, render_mode=render_mode, board=board)
        if board is None:
            env.reset(seed=int(self.rng.integers(2**31)))
        else:
            env.reset(options={"keep_layout": True})

        engine_rng = np.random.default_rng(int(self.rng.integers(2**31)))
        engine = DecisionEngine(env.config, self.engine_config, engine_rng)
        if first is None:
            first = Coord(
                int(self.rng.integers(env.config.rows)),
                int(self.rng.integers(env.config.columns)),
            )

        result = GameResult()
        action = engine.start(first)
        observation, info = self._apply(env, action)

        while info["game_state"] == "PLAYING" and engine.turns < self.max_turns:
            report = engine.observe(observation)
            result.snapshot_violations += len(report.ingest.violations)
            try:
                action = engine.decide()
            except NoMoveAvailable:
                break
            observation, info = self._apply(env, action)

        if engine.turns >= self.max_turns and info["game_state"] == "PLAYING":
            logger.warning("Game stopped after %d turns", engine.turns)

        result.won = info["game_state"] == "WON"
        result.game_state = info["game_state"]
        result.turns = engine.turns
        result.cells_visited = engine.cells_visited
        result.mines_marked = engine.mines_marked
        result.revealed_cells = info["revealed"]
        return result

    def _apply(self, env: MinesweeperEnv, action: Action):
        observation, _, _, _, info = env.step(
            (int(action.kind), action.row, action.col)
        )
        if self.on_turn:
            self.on_turn(env, action)
        return observation, info


# ============================================================================
# Engine Evaluator
# ============================================================================

class Evaluator:
    """
    Evaluate and compare engine configurations.

    Every configuration sees the same sequence of boards for a given seed.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        num_games: int = 100,
        seed: Optional[int] = None,
    ) -> None:
        """
        Initialize the evaluator.

        Args:
            config: Game configuration for evaluation.
            num_games: Number of games per configuration.
            seed: Base seed for reproducible runs.
        """
        if num_games < 1:
            raise ValueError("num_games must be positive")
        self.config = config or GameConfig()
        self.num_games = num_games
        self.seed = seed

    def evaluate(
        self, engine_config: Optional[EngineConfig] = None
    ) -> Dict[str, float]:
        """
        Evaluate a single configuration.

        Returns:
            Dictionary with evaluation metrics.
        """
        runner = GameRunner(self.config, engine_config, seed=self.seed)
        results: List[GameResult] = []
        start_time = time.time()

        for _ in range(self.num_games):
            results.append(runner.play())

        elapsed = time.time() - start_time
        logger.info(
            "Evaluated %d games in %.1fs", self.num_games, elapsed
        )
        return {
            "win_rate": sum(r.won for r in results) / self.num_games,
            "avg_turns": sum(r.turns for r in results) / self.num_games,
            "avg_revealed": sum(r.revealed_cells for r in results) / self.num_games,
            "avg_marked": sum(r.mines_marked for r in results) / self.num_games,
        }

    def compare(
        self, configs: Dict[str, EngineConfig]
    ) -> Dict[str, Dict[str, float]]:
        """
        Compare multiple configurations.

        Args:
            configs: Dictionary of name -> engine configuration.

        Returns:
            Dictionary of name -> evaluation metrics.
        """
        results = {}
        for name, engine_config in configs.items():
            print(f"Evaluating {name}...")
            results[name] = self.evaluate(engine_config)
        return results
