from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Iterable, Iterator

from boggle_engine.errors import DictionaryNotLoadedError, InvalidWordError

logger = logging.getLogger("boggle")

Transform = Callable[[str], str]
Predicate = Callable[[str], bool]

DEFAULT_MIN_LENGTH = 3
DEFAULT_MAX_LENGTH = 16


def normalize_qu(word: str) -> str:
    """Collapse the "qu" digraph onto the single board letter "q"."""
    return word.replace("qu", "q")


def identity(word: str) -> str:
    return word


def length_between(min_length: int, max_length: int) -> Predicate:
    def accept(word: str) -> bool:
        return min_length <= len(word) <= max_length

    return accept


accept_default = length_between(DEFAULT_MIN_LENGTH, DEFAULT_MAX_LENGTH)


def validate_word(word: str):
    if not word:
        raise InvalidWordError("Empty dictionary entry")
    if not (word.isascii() and word.isalpha() and word.islower()):
        raise InvalidWordError(f"Unsupported characters in dictionary entry {word!r}")


def clean_words(
    lines: Iterable[str],
    transform: Transform = normalize_qu,
    accept: Predicate = accept_default,
) -> Iterator[str]:
    """Yield the dictionary entries of ``lines`` that pass the word policy.

    Each line is stripped, lowercased and transformed before validation and
    acceptance. Malformed lines are skipped, never fatal.
    """
    skipped = 0
    for line in lines:
        word = transform(line.strip().lower())
        if not word:
            continue
        try:
            validate_word(word)
        except InvalidWordError as e:
            skipped += 1
            logger.debug("Skipping dictionary line: %s", e)
            continue
        if accept(word):
            yield word
    if skipped:
        logger.info("Skipped %d malformed dictionary lines", skipped)


def read_dictionary(
    path: str | Path,
    transform: Transform = normalize_qu,
    accept: Predicate = accept_default,
) -> list[str]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return list(clean_words(f, transform, accept))
    except (OSError, UnicodeDecodeError) as e:
        raise DictionaryNotLoadedError(f"Failed to load dictionary file {path}") from e


def policy_from_settings(cfg) -> tuple[Transform, Predicate]:
    transform = normalize_qu if cfg.NORMALIZE_QU else identity
    return transform, length_between(cfg.MIN_WORD_LENGTH, cfg.MAX_WORD_LENGTH)
