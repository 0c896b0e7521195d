#!/usr/bin/env python3
"""Watch the decision engine play Minesweeper."""
import os
import sys
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent / "src"))

from game import GameConfig
from client import GameRunner


def clear_screen():
    os.system('cls' if os.name == 'nt' else 'clear')


def demo(delay: float = 0.3, games: int = 5, size: int = 9, mines: int = 10,
         seed: int = None):
    """Run demo games with visualization."""
    config = GameConfig(rows=size, columns=size, total_mines=mines)
    state = {"game": 0, "step": 0, "wins": 0}

    def show(env, action):
        state["step"] += 1
        clear_screen()
        print(f"=== Game {state['game']}/{games} | Step {state['step']} ===")
        print(f"Wins so far: {state['wins']}")
        print(f"Last move: {action}\n")
        print(env.render())
        time.sleep(delay)

    runner = GameRunner(config, seed=seed, on_turn=show)

    print(f"Board: {size}x{size} with {mines} mines ({100*mines/(size*size):.1f}% density)")
    print("Starting in 2 seconds...")
    time.sleep(2)

    for game in range(games):
        state["game"] = game + 1
        state["step"] = 0
        result = runner.play(render_mode="ansi")

        if result.won:
            state["wins"] += 1
            print(f"\n*** WIN! ***")
        else:
            print(f"\n*** LOST (hit mine) ***")

        time.sleep(1.0)  # Pause between games

    wins = state["wins"]
    print(f"\n=== Final: {wins}/{games} wins ({100*wins/games:.0f}%) ===")


if __name__ == "__main__":
    import argparse
    parser = argparse.ArgumentParser()
    parser.add_argument("--delay", type=float, default=0.3, help="Delay between moves")
    parser.add_argument("--games", type=int, default=5, help="Number of games")
    parser.add_argument("--size", type=int, default=9, help="Board size (NxN)")
    parser.add_argument("--mines", type=int, default=None, help="Number of mines (default: ~12%% of cells)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    args = parser.parse_args()

    mines = args.mines if args.mines else int(args.size * args.size * 0.12)

    demo(delay=args.delay, games=args.games, size=args.size, mines=mines, seed=args.seed)
