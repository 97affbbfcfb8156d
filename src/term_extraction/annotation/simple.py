"""
Lightweight annotators that need no linguistic model.

Used for term enrichment (only tokens are needed to match known terms) and
for pre-tagged text.
"""

import re
from typing import List, Optional

# Decimal numbers, OR word chars with inner hyphens/apostrophes
TOKEN_PATTERN = re.compile(r"\d+(?:[.,]\d+)+|\w+(?:[-']\w+)*", flags=re.UNICODE)

UNKNOWN_TAG = "X"


class WhitespaceAnnotator:
    """
    Splits on whitespace and tags every token with a single fixed tag.

    Examples:
        >>> annotator = WhitespaceAnnotator()
        >>> annotator.tokenize("knowledge graph  construction")
        ['knowledge', 'graph', 'construction']
        >>> annotator.tag(["knowledge", "graph"])
        ['X', 'X']
    """

    def __init__(self, tag: str = UNKNOWN_TAG):
        self.fixed_tag = tag

    def tokenize(self, text: str) -> List[str]:
        return text.split()

    def tag(self, tokens: List[str]) -> List[str]:
        return [self.fixed_tag] * len(tokens)

    def lemmatize(self, tokens: List[str], tags: List[str]) -> Optional[List[str]]:
        return None


class RegexAnnotator(WhitespaceAnnotator):
    """
    Tokenizes with a word pattern, dropping punctuation.

    Examples:
        >>> RegexAnnotator().tokenize("Knowledge-graph construction, revisited.")
        ['Knowledge-graph', 'construction', 'revisited']
    """

    def tokenize(self, text: str) -> List[str]:
        return TOKEN_PATTERN.findall(text)


class PreTaggedAnnotator:
    """
    Reads text already annotated as ``word/TAG`` or ``word/TAG/lemma`` tokens.

    Examples:
        >>> annotator = PreTaggedAnnotator()
        >>> tokens = annotator.tokenize("neural/JJ networks/NNS/network")
        >>> tokens, annotator.tag(tokens), annotator.lemmatize(tokens, [])
        (['neural', 'networks'], ['JJ', 'NNS'], ['neural', 'network'])
    """

    def __init__(self, separator: str = "/"):
        self.separator = separator
        self._tags: List[str] = []
        self._lemmas: List[Optional[str]] = []

    def tokenize(self, text: str) -> List[str]:
        tokens, self._tags, self._lemmas = [], [], []
        for item in text.split():
            parts = item.split(self.separator)
            if len(parts) < 2:
                raise ValueError(f"Token without tag: {item!r}")
            tokens.append(parts[0])
            self._tags.append(parts[1])
            self._lemmas.append(parts[2] if len(parts) > 2 else None)
        return tokens

    def tag(self, tokens: List[str]) -> List[str]:
        return list(self._tags)

    def lemmatize(self, tokens: List[str], tags: List[str]) -> Optional[List[str]]:
        if not any(lemma is not None for lemma in self._lemmas):
            return None
        return [
            lemma if lemma is not None else token
            for token, lemma in zip(tokens, self._lemmas)
        ]
