#!/usr/bin/env python3
"""
Minesweeper client - Main entry point.

Usage:
    python main.py [--seed N] [--joint] play
    python main.py [--seed N] simulate [--rows R --columns C --mines M]
    python main.py [--joint] evaluate [--games N]
    python main.py compare [--games N]
"""
import argparse
import logging
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent / "src"))

import numpy as np

from game import GameConfig
from solver import EngineConfig
from client import StdioClient, GameRunner, Evaluator, ProtocolError


def build_engine_config(args: argparse.Namespace) -> EngineConfig:
    """Engine settings from command-line flags."""
    return EngineConfig(
        neutral_prior=args.prior,
        joint_fixpoint=args.joint,
    )


def build_game_config(args: argparse.Namespace) -> GameConfig:
    return GameConfig(args.rows, args.columns, args.mines)


def play(args: argparse.Namespace) -> int:
    """Play one game over stdin/stdout against a server."""
    rng = np.random.default_rng(args.seed)
    client = StdioClient(sys.stdin, sys.stdout, build_engine_config(args), rng)
    try:
        summary = client.run()
    except ProtocolError as exc:
        logging.getLogger(__name__).error("Protocol error: %s", exc)
        return 1
    logging.getLogger(__name__).info(
        "Session over: %d turns, %d visits, %d marks",
        summary.turns, summary.cells_visited, summary.mines_marked,
    )
    return 0


def simulate(args: argparse.Namespace) -> int:
    """Play one local game and print the result."""
    runner = GameRunner(
        build_game_config(args), build_engine_config(args), seed=args.seed
    )
    result = runner.play()

    print(f"Result: {result.game_state}")
    print(f"  Turns: {result.turns}")
    print(f"  Visits: {result.cells_visited}")
    print(f"  Marks: {result.mines_marked}")
    print(f"  Revealed: {result.revealed_cells} cells")
    return 0


def evaluate(args: argparse.Namespace) -> int:
    """Evaluate the engine over many local games."""
    evaluator = Evaluator(build_game_config(args), args.games, seed=args.seed)
    name = "joint fixpoint" if args.joint else "single pass"

    print(f"Evaluating {name} over {args.games} games...")
    results = evaluator.evaluate(build_engine_config(args))

    print(f"Results for {name}:")
    print(f"  Win rate: {results['win_rate']:.1%}")
    print(f"  Avg turns: {results['avg_turns']:.1f}")
    print(f"  Avg revealed: {results['avg_revealed']:.1f} cells")
    print(f"  Avg marked: {results['avg_marked']:.1f}")
    return 0


def compare(args: argparse.Namespace) -> int:
    """Compare single-pass and joint-fixpoint inference on the same boards."""
    evaluator = Evaluator(build_game_config(args), args.games, seed=args.seed)
    results = evaluator.compare({
        "Single pass": EngineConfig(neutral_prior=args.prior),
        "Joint fixpoint": EngineConfig(
            neutral_prior=args.prior, joint_fixpoint=True
        ),
    })

    print("\n" + "=" * 50)
    print("Engine Comparison Results")
    print("=" * 50)
    print(f"{'Engine':<20} {'Win Rate':<12} {'Avg Turns':<12} {'Revealed':<10}")
    print("-" * 50)

    for name, metrics in results.items():
        print(
            f"{name:<20} {metrics['win_rate']:>10.1%} "
            f"{metrics['avg_turns']:>10.1f} "
            f"{metrics['avg_revealed']:>10.1f}"
        )
    return 0


def main() -> int:
    """Parse arguments and run the appropriate command."""
    parser = argparse.ArgumentParser(
        description="Minesweeper client - constraint inference decision engine"
    )
    parser.add_argument(
        "--log-level", default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (logs go to stderr)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument(
        "--prior", type=float, default=0.5, help="Neutral mine probability"
    )
    parser.add_argument(
        "--joint", action="store_true",
        help="Alternate propagation and subset analysis to a joint fixpoint",
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    subparsers.add_parser("play", help="Play over stdin/stdout")

    for name, help_text in (
        ("simulate", "Play one local game"),
        ("evaluate", "Evaluate over many local games"),
        ("compare", "Compare inference modes"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("--rows", type=int, default=9, help="Grid rows")
        sub.add_argument("--columns", type=int, default=9, help="Grid columns")
        sub.add_argument("--mines", type=int, default=10, help="Total mines")
        if name != "simulate":
            sub.add_argument(
                "--games", type=int, default=100, help="Number of games"
            )

    args = parser.parse_args()
    logging.basicConfig(
        level=args.log_level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "play":
        return play(args)
    if args.command == "simulate":
        return simulate(args)
    if args.command == "evaluate":
        return evaluate(args)
    if args.command == "compare":
        return compare(args)
    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
