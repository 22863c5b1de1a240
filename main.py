#!/usr/bin/env python3
"""
Minefield - Main entry point.

Usage:
    python main.py play [--difficulty {easy,medium,hard}] [--rows R --columns C --mines M]
    python main.py scores [--difficulty {easy,medium,hard,custom}]
"""
import argparse
import logging
import sys
from pathlib import Path

from src.minefield import (
    PRESETS,
    Difficulty,
    GameEngine,
    GameStatus,
    JsonHighScoreStore,
    JsonPreferenceStore,
    LoggingEventSink,
    validate_settings,
)
from src.minefield.scores import format_time

DEFAULT_SCORES_FILE = Path("data") / "high_scores.json"
DEFAULT_PREFERENCES_FILE = Path("data") / "preferences.json"

HELP_TEXT = """Commands:
  r ROW COL   reveal a cell
  f ROW COL   cycle flag / question mark / hidden
  h           show a safe cell and reveal it
  n           new game
  q           quit"""


def setup_logging(verbose: bool) -> None:
    """Configure application logging."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def pick_difficulty(args: argparse.Namespace, preferences: JsonPreferenceStore) -> Difficulty:
    """Use the requested preset, else the last one played, and remember the choice."""
    if args.difficulty:
        preferences.set("last_difficulty", args.difficulty)
        return Difficulty(args.difficulty)
    try:
        difficulty = Difficulty(preferences.get("last_difficulty"))
    except (TypeError, ValueError):
        difficulty = Difficulty.MEDIUM
    return difficulty if difficulty in PRESETS else Difficulty.MEDIUM


def resolve_settings(args: argparse.Namespace, difficulty: Difficulty) -> tuple:
    """Pick (rows, columns, mines) from a preset or clamped custom values."""
    preset = PRESETS[difficulty]
    if not (args.rows or args.columns or args.mines):
        return preset.rows, preset.columns, preset.mines
    width, height, mines = validate_settings(
        args.columns or preset.columns,
        args.rows or preset.rows,
        args.mines or preset.mines,
    )
    return height, width, mines


def print_status(engine: GameEngine) -> None:
    """Print the board and counters."""
    state = engine.get_state()
    print()
    print(state.render())
    print(
        f"Mines left: {state.mines_remaining:>3} | "
        f"Time: {format_time(state.elapsed_seconds)} | "
        f"{state.status.name}"
    )


def handle_command(engine: GameEngine, line: str) -> bool:
    """
    Apply one command line to the game.

    Returns:
        False when the player wants to quit.
    """
    parts = line.split()
    if not parts:
        return True
    command = parts[0].lower()

    if command == "q":
        return False
    if command == "n":
        engine.reset()
    elif command == "h":
        hint = engine.provide_hint()
        if hint is None:
            print("No hint available.")
        else:
            print(f"Hint: ({hint[0]}, {hint[1]})")
            engine.reveal(*hint)
    elif command in ("r", "f") and len(parts) == 3:
        try:
            row, col = int(parts[1]), int(parts[2])
        except ValueError:
            print("Row and column must be numbers.")
            return True
        action = engine.reveal if command == "r" else engine.toggle_flag
        if not action(row, col):
            print("Nothing to do there.")
    else:
        print(HELP_TEXT)
    return True


def play(args: argparse.Namespace) -> None:
    """Play an interactive game in the terminal."""
    difficulty = pick_difficulty(args, JsonPreferenceStore(args.preferences_file))
    rows, columns, mines = resolve_settings(args, difficulty)
    store = JsonHighScoreStore(args.scores_file)
    engine = GameEngine(
        rows,
        columns,
        mines,
        events=LoggingEventSink(),
        high_scores=store,
        seed=args.seed,
    )

    print(f"Board: {rows}x{columns} with {mines} mines ({engine.difficulty.value})")
    print(HELP_TEXT)

    try:
        while True:
            print_status(engine)
            if engine.status == GameStatus.WON:
                print(f"\n*** WIN in {format_time(engine.elapsed_seconds)}! *** (n: new game, q: quit)")
            elif engine.status == GameStatus.LOST:
                print("\n*** LOST (hit mine) *** (n: new game, q: quit)")

            line = input("> ")
            if not handle_command(engine, line):
                break
    except (EOFError, KeyboardInterrupt):
        print()
    finally:
        engine.clock.stop()


def scores(args: argparse.Namespace) -> None:
    """Print the high-score tables."""
    store = JsonHighScoreStore(args.scores_file)
    difficulties = [Difficulty(args.difficulty)] if args.difficulty else list(Difficulty)

    for difficulty in difficulties:
        entries = store.get_high_scores(difficulty)
        print("\n" + "=" * 30)
        print(f"{difficulty.value.capitalize()} high scores")
        print("=" * 30)
        if not entries:
            print("  (none)")
        for rank, entry in enumerate(entries, start=1):
            print(f"{rank:>3}. {entry.formatted:<8} {entry.date[:10]}")


def main() -> None:
    """Parse arguments and run the appropriate command."""
    parser = argparse.ArgumentParser(description="Minefield - terminal mine-detection puzzle")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Play command
    play_parser = subparsers.add_parser("play", help="Play a game")
    play_parser.add_argument(
        "--difficulty",
        choices=[d.value for d in PRESETS],
        default=None,
        help="Preset board (also the base for custom values); defaults to the last one played",
    )
    play_parser.add_argument("--rows", type=int, help="Custom number of rows (5-40)")
    play_parser.add_argument("--columns", type=int, help="Custom number of columns (5-40)")
    play_parser.add_argument("--mines", type=int, help="Custom number of mines")
    play_parser.add_argument(
        "--scores-file", type=Path, default=DEFAULT_SCORES_FILE, help="High-score file"
    )
    play_parser.add_argument(
        "--preferences-file", type=Path, default=DEFAULT_PREFERENCES_FILE, help="Preferences file"
    )
    play_parser.add_argument("--seed", type=int, default=None, help="Random seed")

    # Scores command
    scores_parser = subparsers.add_parser("scores", help="Show high scores")
    scores_parser.add_argument(
        "--difficulty",
        choices=[d.value for d in Difficulty],
        default=None,
        help="Only show one table",
    )
    scores_parser.add_argument(
        "--scores-file", type=Path, default=DEFAULT_SCORES_FILE, help="High-score file"
    )

    args = parser.parse_args()
    setup_logging(args.verbose)

    if args.command == "play":
        play(args)
    elif args.command == "scores":
        scores(args)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
