"""
Sub-term and super-term relations among extracted terms.
"""

from collections import defaultdict
from typing import Dict, FrozenSet, Iterable, Set

_EMPTY: FrozenSet[str] = frozenset()


class InclusionStats:
    """
    Which extracted terms contain which others.

    A term s is a superterm of t when t's tokens appear as a contiguous proper
    sub-sequence of s's tokens, and both are in the term set.

    Examples:
        >>> inclusion = InclusionStats(["network", "neural network", "deep neural network"])
        >>> sorted(inclusion.superterms("network"))
        ['deep neural network', 'neural network']
        >>> sorted(inclusion.subterms("deep neural network"))
        ['network', 'neural network']
    """

    def __init__(self, terms: Iterable[str]):
        term_set = set(terms)
        self._superterms: Dict[str, Set[str]] = defaultdict(set)
        self._subterms: Dict[str, Set[str]] = defaultdict(set)

        for term in term_set:
            words = term.split()
            n = len(words)
            for length in range(1, n):
                for start in range(n - length + 1):
                    sub = " ".join(words[start : start + length])
                    if sub in term_set:
                        self._subterms[term].add(sub)
                        self._superterms[sub].add(term)

        self._terms = frozenset(term_set)

    def superterms(self, term: str) -> FrozenSet[str]:
        return frozenset(self._superterms.get(term, _EMPTY))

    def subterms(self, term: str) -> FrozenSet[str]:
        return frozenset(self._subterms.get(term, _EMPTY))

    def related(self, a: str, b: str) -> bool:
        """True if either term contains the other."""
        return b in self._superterms.get(a, _EMPTY) or b in self._subterms.get(a, _EMPTY)

    def __contains__(self, term: str) -> bool:
        return term in self._terms

    def __len__(self) -> int:
        return len(self._terms)
