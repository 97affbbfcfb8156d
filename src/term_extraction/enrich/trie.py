"""
Word-level prefix tree for matching known multi-word terms in token streams.
"""

from typing import Dict, Iterator, Optional, Sequence, Tuple


class WordTrie:
    """
    Prefix tree keyed by words.

    Each node that ends a stored term remembers that term's string.

    Examples:
        >>> trie = WordTrie()
        >>> trie.add(["neural", "network"], "neural network")
        >>> trie.add(["neural"], "neural")
        >>> list(trie.matches(["a", "neural", "network"]))
        [(1, 2, 'neural'), (1, 3, 'neural network')]
    """

    __slots__ = ("children", "term", "_size")

    def __init__(self):
        self.children: Dict[str, "WordTrie"] = {}
        self.term: Optional[str] = None
        self._size = 0

    def add(self, words: Sequence[str], term: str) -> None:
        """
        Store a term under its word sequence.

        Args:
            words: Normalized words of the term (must not be empty)
            term: String reported when the words are matched
        """
        if not words:
            raise ValueError(f"Cannot add empty word sequence for term {term!r}")
        node = self
        for word in words:
            node = node.children.setdefault(word, WordTrie())
        if node.term is None:
            self._size += 1
        node.term = term

    def get(self, words: Sequence[str]) -> Optional[str]:
        """Term stored exactly under ``words``, if any."""
        node = self
        for word in words:
            node = node.children.get(word)
            if node is None:
                return None
        return node.term

    def matches(self, words: Sequence[str]) -> Iterator[Tuple[int, int, str]]:
        """
        Find every occurrence of every stored term.

        Overlapping and nested occurrences are all reported.

        Args:
            words: Normalized words of a document

        Yields:
            (start, end, term) with ``end`` exclusive, ordered by start then end
        """
        n = len(words)
        for start in range(n):
            node = self
            for end in range(start, n):
                node = node.children.get(words[end])
                if node is None:
                    break
                if node.term is not None:
                    yield start, end + 1, node.term

    def __len__(self) -> int:
        return self._size
