from __future__ import annotations

import weakref
from typing import Callable, Iterable, Iterator

from boggle_engine.errors import IndexInUseError, InvalidWordError

FIRST_CHAR = ord("a")
NUM_LETTERS = 26
ROOT_VALUE = 255

_OFFSETS = {chr(FIRST_CHAR + i): i for i in range(NUM_LETTERS)}


class TrieNode:
    __slots__ = ("value", "_parent", "children", "is_word", "has_children", "last_found", "__weakref__")

    def __init__(self, value: int, parent: TrieNode | None = None):
        self.value: int = value
        self._parent = weakref.ref(parent) if parent is not None else None
        self.children: list[TrieNode | None] = [None] * NUM_LETTERS
        self.is_word: bool = False
        self.has_children: bool = False
        self.last_found: int = 0

    @property
    def parent(self) -> TrieNode | None:
        return self._parent() if self._parent is not None else None

    def put(self, offset: int) -> TrieNode:
        """Return the child for ``offset``, creating it if needed."""
        child = self.children[offset]
        if child is None:
            child = TrieNode(offset, self)
            self.children[offset] = child
            self.has_children = True
        return child

    def __repr__(self) -> str:
        if self.value == ROOT_VALUE:
            return "TrieNode(<root>)"
        return f"TrieNode({chr(FIRST_CHAR + self.value)!r}, is_word={self.is_word})"


class DictionaryIndex:
    """Prefix tree over the 26 lowercase letters.

    Built once per dictionary load. The only field touched after construction
    is ``TrieNode.last_found``, which the owning solver stamps with generations
    handed out by ``next_generation``. At most one solver owns an index at a
    time; ``find_words`` may search any index without owning it.
    """

    def __init__(self):
        self.root = TrieNode(ROOT_VALUE)
        self.node_count = 1
        self._word_count = 0
        self._generation = 0
        self._owner = None

    @classmethod
    def build(cls, words: Iterable[str]) -> DictionaryIndex:
        index = cls()
        for word in words:
            index.insert(word)
        return index

    def insert(self, word: str) -> TrieNode:
        node = self.root
        for ch in word:
            offset = _OFFSETS.get(ch)
            if offset is None:
                raise InvalidWordError(f"Unsupported character {ch!r} in {word!r}")
            if node.children[offset] is None:
                self.node_count += 1
            node = node.put(offset)
        if node is self.root:
            raise InvalidWordError("Cannot insert an empty word")
        if not node.is_word:
            node.is_word = True
            self._word_count += 1
        return node

    @staticmethod
    def child(node: TrieNode, offset: int) -> TrieNode | None:
        return node.children[offset]

    @staticmethod
    def is_word(node: TrieNode) -> bool:
        return node.is_word

    @staticmethod
    def has_children(node: TrieNode) -> bool:
        return node.has_children

    @staticmethod
    def word_at(node: TrieNode) -> str:
        """Rebuild the word ending at ``node`` by walking up to the root."""
        letters: list[str] = []
        current = node
        while current is not None and current.value != ROOT_VALUE:
            letters.append(chr(FIRST_CHAR + current.value))
            current = current.parent
        return "".join(reversed(letters))

    def find(self, word: str) -> TrieNode | None:
        node = self.root
        for ch in word:
            offset = _OFFSETS.get(ch)
            if offset is None:
                return None
            node = node.children[offset]
            if node is None:
                return None
        return node

    def iterate(
        self,
        predicate: Callable[[TrieNode], bool],
        action: Callable[[TrieNode], None],
        node: TrieNode | None = None,
    ):
        # Explicit stack: dictionaries may hold words longer than the recursion limit allows
        stack = [node if node is not None else self.root]
        while stack:
            current = stack.pop()
            if predicate(current):
                action(current)
            if current.has_children:
                stack.extend(c for c in current.children if c is not None)

    def words(self) -> Iterator[str]:
        found: list[str] = []
        self.iterate(lambda n: n.is_word, lambda n: found.append(self.word_at(n)))
        return iter(found)

    def next_generation(self) -> int:
        self._generation += 1
        return self._generation

    @property
    def owner(self):
        return self._owner() if self._owner is not None else None

    def claim(self, owner):
        current = self.owner
        if current is not None and current is not owner:
            raise IndexInUseError("Dictionary index is already owned by another solver")
        self._owner = weakref.ref(owner)

    def release(self, owner):
        if self.owner is owner:
            self._owner = None

    def __contains__(self, word: object) -> bool:
        if not isinstance(word, str):
            return False
        node = self.find(word)
        return node is not None and node.is_word

    def __len__(self) -> int:
        return self._word_count
