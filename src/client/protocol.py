"""
Text protocol client.

Session on stdin/stdout:
    server: "rows columns total_mines"
    server: "first_row first_column"
    client: "r c type"                  (opening visit)
    server: rows lines of ? @ X 0-8
    client: "r c type"
    ...
until the server closes the stream.
"""
import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional, TextIO

import numpy as np

from game import Coord, GameConfig, SnapshotError

from solver import Action, DecisionEngine, EngineConfig, NoMoveAvailable


logger = logging.getLogger(__name__)


class ProtocolError(Exception):
    """The server sent something the session cannot continue from."""


@dataclass
class SessionSummary:
    """Counters of one protocol session."""

    turns: int = 0
    cells_visited: int = 0
    mines_marked: int = 0
    rejected_snapshots: int = 0
    snapshot_violations: int = 0
    exploded: bool = False
    resolved: bool = False


class StdioClient:
    """Plays one game over a pair of text streams."""

    def __init__(
        self,
        stdin: TextIO,
        stdout: TextIO,
        engine_config: Optional[EngineConfig] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        self.stdin = stdin
        self.stdout = stdout
        self.engine_config = engine_config
        self.rng = rng
        self._tokens = self._token_stream()
        self.engine: Optional[DecisionEngine] = None

    def _token_stream(self) -> Iterator[str]:
        for line in self.stdin:
            yield from line.split()

    def _read_tokens(self, count: int) -> Optional[List[str]]:
        """Read ``count`` tokens, or None on a clean end of stream."""
        tokens = []
        for token in self._tokens:
            tokens.append(token)
            if len(tokens) == count:
                return tokens
        if tokens:
            raise ProtocolError(
                f"Stream ended after {len(tokens)} of {count} tokens"
            )
        return None

    def _read_ints(self, count: int) -> List[int]:
        tokens = self._read_tokens(count)
        if tokens is None:
            raise ProtocolError("Stream ended before the game started")
        try:
            return [int(token) for token in tokens]
        except ValueError as exc:
            raise ProtocolError(f"Expected {count} integers: {tokens}") from exc

    def _send(self, action: Action) -> None:
        self.stdout.write(action.to_protocol() + "\n")
        self.stdout.flush()

    def run(self) -> SessionSummary:
        """
        Play until the server closes the stream or no move is left.

        Raises:
            ProtocolError: If the header or opening move is unreadable.
        """
        rows, columns, total_mines = self._read_ints(3)
        try:
            config = GameConfig(rows, columns, total_mines)
        except ValueError as exc:
            raise ProtocolError(str(exc)) from exc
        engine = DecisionEngine(config, self.engine_config, self.rng)
        self.engine = engine
        summary = SessionSummary()

        first_row, first_col = self._read_ints(2)
        try:
            opening = engine.start(Coord(first_row, first_col))
        except ValueError as exc:
            raise ProtocolError(str(exc)) from exc
        self._send(opening)

        while True:
            lines = self._read_tokens(rows)
            if lines is None:
                break
            try:
                report = engine.observe(lines)
                summary.snapshot_violations += len(report.ingest.violations)
            except SnapshotError as exc:
                # Keep playing from the last good state.
                logger.error("Rejected snapshot: %s", exc)
                summary.rejected_snapshots += 1

            if engine.grid.has_exploded:
                summary.exploded = True
                break
            try:
                action = engine.decide()
            except NoMoveAvailable:
                summary.resolved = True
                logger.info("No move available, ending session")
                break
            self._send(action)

        summary.turns = engine.turns
        summary.cells_visited = engine.cells_visited
        summary.mines_marked = engine.mines_marked
        return summary
