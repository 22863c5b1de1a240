#!/usr/bin/env python3
"""Watch hint-driven autoplay clear a Minefield board."""
import time
import os
from typing import Optional

from src.minefield import PRESETS, Difficulty, GameClock, GameEngine, GameStatus


def clear_screen():
    os.system('cls' if os.name == 'nt' else 'clear')


def demo(delay: float = 0.3, games: int = 3, difficulty: str = "easy", seed: Optional[int] = None):
    """Play games by revealing one hinted cell per step."""
    config = PRESETS[Difficulty(difficulty)]
    engine = GameEngine(
        config.rows, config.columns, config.mines,
        clock=GameClock(threaded=False),
        seed=seed,
    )

    print(f"Board: {config.rows}x{config.columns} with {config.mines} mines")
    print("Starting in 2 seconds...")
    time.sleep(2)

    for game in range(games):
        engine.reset()
        step = 0

        while not engine.is_over:
            hint = engine.provide_hint()
            if hint is None:
                break
            engine.reveal(*hint)
            step += 1

            clear_screen()
            print(f"=== Game {game + 1}/{games} | Step {step} ===")
            print(f"Last move: {hint}\n")
            print(engine.get_state().render())
            time.sleep(delay)

        if engine.status == GameStatus.WON:
            print(f"\n*** Cleared in {step} hinted moves ***")
        time.sleep(1.0)  # Pause between games


if __name__ == "__main__":
    import argparse
    parser = argparse.ArgumentParser()
    parser.add_argument("--delay", type=float, default=0.3, help="Delay between moves")
    parser.add_argument("--games", type=int, default=3, help="Number of games")
    parser.add_argument("--difficulty", choices=["easy", "medium", "hard"], default="easy")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    args = parser.parse_args()

    demo(delay=args.delay, games=args.games, difficulty=args.difficulty, seed=args.seed)
