from __future__ import annotations

import math
from pathlib import Path

import numpy as np

from boggle_engine.errors import InvalidBoardError
from boggle_engine.trie import FIRST_CHAR, NUM_LETTERS

# Standard 16 Boggle dice, one string of faces per die
DICE = (
    "aaeegn",
    "elrtty",
    "aoottw",
    "abbjoo",
    "ehrtvw",
    "cimotu",
    "distty",
    "eiosst",
    "delrvy",
    "achops",
    "himnqu",
    "eeinsu",
    "eeghnw",
    "affkps",
    "hlnnrz",
    "deilrx",
)
DICE_SIDE = 4


def board_from_string(text: str) -> np.ndarray:
    """Convert a row-major string of S*S letters into an SxS board of letter offsets."""
    if not text:
        raise InvalidBoardError("Board string was empty. Expected a square number of letters.")

    side = math.isqrt(len(text))
    if side * side != len(text):
        raise InvalidBoardError(f"Board string was {len(text)} characters long. Expected a square number.")

    for ch in text:
        if not (ch.isascii() and ch.isalpha()):
            raise InvalidBoardError(f"Unexpected character on board: {ch!r}")
    text = text.lower()

    flat = np.frombuffer(text.encode("ascii"), dtype=np.uint8) - FIRST_CHAR
    return flat.reshape(side, side).copy()


def board_to_string(board) -> str:
    arr = np.asarray(board, dtype=np.uint8)
    return (arr.ravel() + FIRST_CHAR).tobytes().decode("ascii")


def format_board(board) -> list[str]:
    """One string per board row, for logs and responses."""
    arr = np.asarray(board, dtype=np.uint8)
    return [board_to_string(row) for row in arr]


def _rng(rng: np.random.Generator | None) -> np.random.Generator:
    return rng if rng is not None else np.random.default_rng()


def dice_board(rng: np.random.Generator | None = None) -> np.ndarray:
    """Roll the 16 Boggle dice into a 4x4 board, die i landing on cell i."""
    rng = _rng(rng)
    faces = rng.integers(0, 6, size=len(DICE))
    letters = "".join(die[face] for die, face in zip(DICE, faces))
    return board_from_string(letters)


def random_board(side: int, rng: np.random.Generator | None = None) -> np.ndarray:
    if side < 1:
        raise InvalidBoardError(f"Board side must be at least 1, got {side}")
    return _rng(rng).integers(0, NUM_LETTERS, size=(side, side), dtype=np.uint8)


def dice_boards(count: int, rng: np.random.Generator | None = None) -> list[np.ndarray]:
    rng = _rng(rng)
    return [dice_board(rng) for _ in range(count)]


def random_boards(count: int, side: int, rng: np.random.Generator | None = None) -> list[np.ndarray]:
    rng = _rng(rng)
    return [random_board(side, rng) for _ in range(count)]


def boards_from_file(path: str | Path, count: int) -> list[np.ndarray]:
    """Read ``count`` boards from a file of one board string per line.

    Wraps around to the first line when the file runs out.
    """
    with open(path, "r", encoding="utf-8") as f:
        lines = [line.strip() for line in f if line.strip()]
    if not lines:
        raise InvalidBoardError(f"No boards found in {path}")

    parsed = [board_from_string(line) for line in lines]
    return [parsed[i % len(parsed)].copy() for i in range(count)]
