"""
Client module: how the decision engine meets a game.

Provides the stdin/stdout protocol client for a remote server and the
offline runner and evaluator for the local environment.
"""
from .protocol import StdioClient, SessionSummary, ProtocolError
from .runner import GameRunner, GameResult, Evaluator

__all__ = [
    "StdioClient",
    "SessionSummary",
    "ProtocolError",
    "GameRunner",
    "GameResult",
    "Evaluator",
]
