"""
Minesweeper game module.

Provides the client's grid state, the snapshot text codec, and the
authoritative board used to play offline.
"""
from .cell import Cell, CellStatus, Coord
from .snapshot import SnapshotError, parse_snapshot, format_snapshot
from .grid_state import GridState, IngestReport, SnapshotViolation
from .board import Board, GameConfig, GameState, BEGINNER, INTERMEDIATE, EXPERT
from .environment import MinesweeperEnv

__all__ = [
    "Cell",
    "CellStatus",
    "Coord",
    "SnapshotError",
    "parse_snapshot",
    "format_snapshot",
    "GridState",
    "IngestReport",
    "SnapshotViolation",
    "Board",
    "GameConfig",
    "GameState",
    "BEGINNER",
    "INTERMEDIATE",
    "EXPERT",
    "MinesweeperEnv",
]
