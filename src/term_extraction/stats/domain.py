"""
Domain statistics: how strongly a term belongs to the corpus' core topic.

The domain is approximated by the top-ranked terms under a base feature. All
three domain scores compare a term against those domain terms, using document
co-occurrence as evidence:

- coherence (postRankDC): mean normalized PMI with the domain terms
- pertinence (domainPertinence): relative frequency inside the documents that
  mention any domain term, against the whole corpus
- novelty (novelTopicModel): how much more often domain terms appear next to
  the term than in the corpus at large
"""

import math
from collections import Counter, defaultdict
from typing import Dict, FrozenSet, Iterable, List, Mapping, Sequence

import structlog

from ..models.terms import DocumentTopic
from .frequency import FrequencyStats
from .inclusion import InclusionStats

logger = structlog.get_logger(__name__)


class DomainStats:
    """
    Co-occurrence statistics between every term and a fixed set of domain terms.

    Built once, read-only afterwards.

    Args:
        stats: Filtered corpus statistics
        inclusion: Inclusion relations among the filtered terms
        document_terms: document id -> term -> occurrences (filtered terms only)
        document_tokens: document id -> token count
        domain_terms: Terms representing the domain, best first
    """

    def __init__(
        self,
        stats: FrequencyStats,
        inclusion: InclusionStats,
        document_terms: Mapping[str, Mapping[str, int]],
        document_tokens: Mapping[str, int],
        domain_terms: Sequence[str],
    ):
        self.stats = stats
        self.inclusion = inclusion
        self.domain_terms: List[str] = [t for t in domain_terms if t in stats]
        domain: FrozenSet[str] = frozenset(self.domain_terms)

        self._cooccurrence: Dict[str, Counter] = defaultdict(Counter)
        self._window_frequency: Counter = Counter()
        self._window_tokens = 0
        self._window_documents = 0

        for document_id, terms in document_terms.items():
            present = domain.intersection(terms)
            if not present:
                continue
            self._window_documents += 1
            self._window_tokens += document_tokens.get(document_id, 0)
            for term, occurrences in terms.items():
                self._window_frequency[term] += occurrences
                self._cooccurrence[term].update(present)

        logger.debug(
            "domain_stats_built",
            domain_terms=len(self.domain_terms),
            window_documents=self._window_documents,
            window_tokens=self._window_tokens,
        )

    @classmethod
    def from_document_topics(
        cls,
        stats: FrequencyStats,
        inclusion: InclusionStats,
        document_topics: Iterable[DocumentTopic],
        document_tokens: Mapping[str, int],
        domain_terms: Sequence[str],
    ) -> "DomainStats":
        """
        Build from DocumentTopic links, ignoring terms removed by filtering.
        """
        document_terms: Dict[str, Dict[str, int]] = defaultdict(dict)
        for link in document_topics:
            if link.term in stats:
                terms = document_terms[link.document_id]
                terms[link.term] = terms.get(link.term, 0) + link.occurrences
        return cls(stats, inclusion, document_terms, document_tokens, domain_terms)

    def _eligible(self, term: str) -> List[str]:
        return [
            w for w in self.domain_terms if w != term and not self.inclusion.related(term, w)
        ]

    def cooccurrence(self, term: str, domain_term: str) -> int:
        """Documents containing both terms."""
        return self._cooccurrence.get(term, Counter())[domain_term]

    def _npmi(self, term: str, domain_term: str) -> float:
        n = self.stats.documents
        co = self.cooccurrence(term, domain_term)
        if co == 0:
            return -1.0
        if co == n:
            return 1.0
        p_joint = co / n
        pmi = math.log(p_joint / ((self.stats.df(term) / n) * (self.stats.df(domain_term) / n)))
        return pmi / -math.log(p_joint)

    def coherence(self, term: str) -> float:
        """Mean normalized PMI between the term and the eligible domain terms."""
        eligible = self._eligible(term)
        if not eligible:
            return 0.0
        return sum(self._npmi(term, w) for w in eligible) / len(eligible)

    def pertinence(self, term: str) -> float:
        """
        Relative frequency inside the domain window over relative frequency overall.
        """
        if self._window_tokens == 0 or self.stats.tokens == 0:
            return 0.0
        tf = self.stats.tf(term)
        if tf == 0:
            return 0.0
        inside = self._window_frequency[term] / self._window_tokens
        return inside / (tf / self.stats.tokens)

    def novelty(self, term: str) -> float:
        """
        Mean excess of P(domain term | term) over P(domain term).
        """
        eligible = self._eligible(term)
        df = self.stats.df(term)
        if not eligible or df == 0:
            return 0.0
        n = self.stats.documents
        total = sum(
            self.cooccurrence(term, w) / df - self.stats.df(w) / n for w in eligible
        )
        return total / len(eligible)

    @property
    def window_documents(self) -> int:
        return self._window_documents


def select_domain_terms(scores: Mapping[str, float], size: int) -> List[str]:
    """
    Pick the ``size`` best-scoring terms, ties kept in input order.
    """
    ordered = sorted(scores, key=lambda t: scores[t], reverse=True)
    return ordered[:size]

