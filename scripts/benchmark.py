"""
Benchmark console for the Boggle solver.

Usage:
    python -m scripts.benchmark [board] [--dictionary PATH]
    python -m scripts.benchmark --boards N [--source dice|random|file] [--side S]

Examples:
    python -m scripts.benchmark catdlinemaropets
    python -m scripts.benchmark --boards 10000 --source dice
    python -m scripts.benchmark --boards 500 --source random --side 5 --seed 7

With a single board this prints every word found. With --boards it solves many
boards against the same loaded dictionary and reports throughput.
"""
import argparse
import sys
from pathlib import Path

import numpy as np

# Ensure project root is on path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from boggle_engine.settings import settings
from boggle_engine.board import boards_from_file, dice_boards, random_boards
from boggle_engine.dictionary import policy_from_settings
from boggle_engine.errors import BoggleError, InvalidBoardError
from boggle_engine.metrics import StageTimer
from boggle_engine.solver import Solver, rank_words

DEFAULT_BOARD = "catdlinemaropets"


def solve_single(solver: Solver, board: str):
    timer = StageTimer()
    with timer.stage("solve"):
        solution = solver.solve(board)
    words = rank_words(solver.last_word_list())
    print(f'Solved "{board}" in {timer.timings["solve"]:.2f}ms, found {solution.word_count} words:')
    print(" ".join(words))


def solve_many(solver: Solver, count: int, source: str, side: int, seed: int | None):
    rng = np.random.default_rng(seed)
    if source == "random":
        boards = random_boards(count, side, rng)
        mode_text = "from random letters"
    elif source == "file":
        boards = boards_from_file(settings.BOARDS_PATH, count)
        mode_text = f"from {settings.BOARDS_PATH}"
    else:
        boards = dice_boards(count, rng)
        mode_text = "from boggle dice"
    print(f"{count} boards generated {mode_text}")

    words = 0
    score = 0
    timer = StageTimer()
    with timer.stage("solve"):
        for board in boards:
            solution = solver.solve(board)
            words += solution.word_count
            score += solution.score
    elapsed = timer.timings["solve"]

    rate = count / (elapsed / 1000.0) if elapsed > 0 else float("inf")
    print(
        f"Solved at {rate:.0f} boards/s (total: {elapsed:.2f}ms, average: {elapsed / count:.3f}ms, "
        f"{words / count:.0f} words, {score / count:.0f} score)"
    )


def main():
    parser = argparse.ArgumentParser(description="Boggle Solver Benchmark")
    parser.add_argument("board", nargs="?", default=DEFAULT_BOARD,
                        help=f"Board string to solve (default: {DEFAULT_BOARD})")
    parser.add_argument("--dictionary", type=str, default=str(settings.DICTIONARY_PATH),
                        help=f"Dictionary file (default: {settings.DICTIONARY_PATH})")
    parser.add_argument("--boards", type=int, default=0,
                        help="Solve this many generated boards instead of a single board")
    parser.add_argument("--source", choices=["dice", "random", "file"], default="dice",
                        help="Where generated boards come from (default: dice)")
    parser.add_argument("--side", type=int, default=settings.BOARD_SIZE,
                        help=f"Side length of random boards (default: {settings.BOARD_SIZE})")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for generated boards")
    args = parser.parse_args()

    solver = Solver()
    transform, accept = policy_from_settings(settings)
    print("Loading dictionary... ", end="", flush=True)
    try:
        solver.load_dictionary(args.dictionary, transform, accept)
    except BoggleError as e:
        print(f"\nError: {e}")
        sys.exit(1)
    print(f"loaded {len(solver.index)} words.")

    try:
        if args.boards > 0:
            solve_many(solver, args.boards, args.source, args.side, args.seed)
        else:
            solve_single(solver, args.board)
    except (InvalidBoardError, OSError) as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
