from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Callable, Iterable

import numpy as np

from boggle_engine.board import board_from_string
from boggle_engine.dictionary import Predicate, Transform, accept_default, clean_words, normalize_qu, read_dictionary
from boggle_engine.errors import DictionaryNotLoadedError, InvalidBoardError, SolveCancelledError
from boggle_engine.trie import NUM_LETTERS, DictionaryIndex, TrieNode

logger = logging.getLogger("boggle")

CancelCheck = Callable[[], bool]


@dataclass(frozen=True)
class Solution:
    word_count: int
    score: int


def count_score(word: str) -> int:
    return 1


def rank_words(words: Iterable[str], max_results: int = 0) -> list[str]:
    """Sort longest first, then alphabetically; cap at ``max_results`` when positive."""
    result = sorted(words, key=lambda w: (-len(w), w))
    return result[:max_results] if max_results > 0 else result


def _coerce_board(board) -> tuple[list[int], int]:
    """Validate a board and flatten it row-major. Returns (cells, side)."""
    if board is None:
        raise InvalidBoardError("Board was None")
    if isinstance(board, str):
        arr = board_from_string(board)
    else:
        try:
            arr = np.asarray(board)
        except ValueError as e:
            raise InvalidBoardError("Board rows have differing lengths") from e

    if arr.size == 0:
        raise InvalidBoardError("Board was empty")
    if arr.ndim != 2 or arr.shape[0] != arr.shape[1]:
        raise InvalidBoardError(f"Board was not a square matrix (shape {arr.shape})")
    if not np.issubdtype(arr.dtype, np.integer):
        raise InvalidBoardError(f"Board cells must be letter offsets, got dtype {arr.dtype}")
    if arr.min() < 0 or arr.max() >= NUM_LETTERS:
        raise InvalidBoardError(f"Board cells must be letter offsets in [0, {NUM_LETTERS})")

    return arr.ravel().tolist(), arr.shape[0]


@lru_cache(maxsize=None)
def _neighbors(side: int) -> tuple[tuple[int, ...], ...]:
    """Adjacency lists for a side x side grid, diagonals included."""
    neighbors = []
    for idx in range(side * side):
        r, c = divmod(idx, side)
        adj = []
        for dr in (-1, 0, 1):
            for dc in (-1, 0, 1):
                if dr == 0 and dc == 0:
                    continue
                nr, nc = r + dr, c + dc
                if 0 <= nr < side and 0 <= nc < side:
                    adj.append(nr * side + nc)
        neighbors.append(tuple(adj))
    return tuple(neighbors)


def _search(
    root: TrieNode,
    cells: list[int],
    side: int,
    on_word: Callable[[TrieNode], None],
    cancel: CancelCheck | None = None,
):
    """Walk the grid and the trie in lockstep from every cell.

    ``on_word`` is called for every word node reached, once per distinct path;
    deduplication is the caller's job.
    """
    neighbors = _neighbors(side)
    visited = [False] * len(cells)

    def dfs(idx: int, node: TrieNode):
        if cancel is not None and cancel():
            raise SolveCancelledError("Solve cancelled")

        if node.is_word:
            on_word(node)

        if not node.has_children:  # no word extends this prefix
            return

        visited[idx] = True
        children = node.children
        for nidx in neighbors[idx]:
            if not visited[nidx]:
                child = children[cells[nidx]]
                if child is not None:
                    dfs(nidx, child)
        visited[idx] = False

    for start, letter in enumerate(cells):
        child = root.children[letter]
        if child is not None:
            dfs(start, child)


def find_words(index: DictionaryIndex | None, board, cancel: CancelCheck | None = None) -> set[str]:
    """Find every word on ``board`` without writing to the index.

    Found words are tracked in a set local to this call, so any number of
    threads may search one index at the same time.
    """
    cells, side = _coerce_board(board)
    if index is None:
        raise DictionaryNotLoadedError()

    seen: set[TrieNode] = set()
    _search(index.root, cells, side, seen.add, cancel)
    return {index.word_at(node) for node in seen}


class Solver:
    """Boggle solver reusing one dictionary index across many boards.

    Usage: ``solver.load_dictionary(path); solver.solve("abcdefghijklmnop")``.

    Each solve takes a fresh generation number from the index and stamps it on
    the trie nodes of the words it finds, so a word reachable by several paths
    is counted once without clearing flags between solves. A solver owns its
    index: handing it an index another solver owns raises ``IndexInUseError``.
    The stamps also make a solver unsafe to share between threads; use
    ``find_words`` to search one index from many callers.
    """

    def __init__(self, index: DictionaryIndex | None = None, score_word: Callable[[str], int] = count_score):
        self.index: DictionaryIndex | None = None
        self.score_word = score_word
        self.generation = 0
        if index is not None:
            self._install(index)

    @property
    def loaded(self) -> bool:
        return self.index is not None

    def load_words(
        self,
        words: Iterable[str],
        transform: Transform = normalize_qu,
        accept: Predicate = accept_default,
    ) -> DictionaryIndex:
        return self._install(DictionaryIndex.build(clean_words(words, transform, accept)))

    def load_dictionary(
        self,
        path: str | Path,
        transform: Transform = normalize_qu,
        accept: Predicate = accept_default,
    ) -> DictionaryIndex:
        index = DictionaryIndex.build(read_dictionary(path, transform, accept))
        logger.info("Loaded %d words (%d trie nodes) from %s", len(index), index.node_count, path)
        return self._install(index)

    def _install(self, index: DictionaryIndex) -> DictionaryIndex:
        index.claim(self)
        if self.index is not None and self.index is not index:
            self.index.release(self)
        self.index = index
        self.generation = 0
        return index

    def solve(self, board, cancel: CancelCheck | None = None) -> Solution:
        cells, side = _coerce_board(board)
        if self.index is None:
            raise DictionaryNotLoadedError("Called solve when dictionary not successfully loaded")

        generation = self.index.next_generation()
        self.generation = generation
        found = 0
        score = 0

        def record(node: TrieNode):
            nonlocal found, score
            if node.last_found != generation:
                node.last_found = generation
                found += 1
                score += self.score_word(self.index.word_at(node))

        _search(self.index.root, cells, side, record, cancel)
        return Solution(found, score)

    def last_word_list(self) -> set[str]:
        """Words found by the most recent solve."""
        if self.index is None:
            raise DictionaryNotLoadedError()
        if self.generation == 0:
            return set()

        generation = self.generation
        words: set[str] = set()
        self.index.iterate(
            lambda n: n.is_word and n.last_found == generation,
            lambda n: words.add(self.index.word_at(n)),
        )
        return words
