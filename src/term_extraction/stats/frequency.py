"""
Corpus frequency statistics and their concurrent aggregation.

Worker threads never write statistics directly: every document goes through
``FrequencyAggregator.merge``, which applies all of that document's updates
under one lock. Sums are commutative, so the final counts do not depend on
the order in which documents finish.
"""

import threading
from collections import Counter, defaultdict
from typing import Dict, List, Optional, Set

import structlog
from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..candidates.extractor import DocumentCandidates
from ..models.terms import DocumentTopic
from .temporal import TemporalStats

logger = structlog.get_logger(__name__)


class FrequencyStats(BaseModel):
    """
    Term and document frequencies of a corpus.

    Serialized with camelCase keys (``termFrequency``, ``docFrequency``) so
    that reference corpus files can be shared with other tools.

    Invariants (checked on construction): for every term, document frequency
    is at most the number of documents and at most the term frequency.

    Examples:
        >>> stats = FrequencyStats(
        ...     term_frequency={"neural network": 5}, doc_frequency={"neural network": 2},
        ...     tokens=100, documents=3,
        ... )
        >>> stats.tf("neural network"), stats.df("missing")
        (5, 0)
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    term_frequency: Dict[str, int] = Field(default_factory=dict, alias="termFrequency")
    doc_frequency: Dict[str, int] = Field(default_factory=dict, alias="docFrequency")
    tokens: int = Field(0, ge=0, description="Total tokens in the corpus")
    documents: int = Field(0, ge=0, description="Total documents in the corpus")

    @model_validator(mode="after")
    def check_invariants(self) -> "FrequencyStats":
        for term, df in self.doc_frequency.items():
            if df > self.documents:
                raise ValueError(
                    f"Document frequency of {term!r} ({df}) exceeds document count ({self.documents})"
                )
            if self.term_frequency.get(term, 0) < df:
                raise ValueError(f"Term frequency of {term!r} is below its document frequency")
        return self

    def tf(self, term: str) -> int:
        """Term frequency (0 if unseen)."""
        return self.term_frequency.get(term, 0)

    def df(self, term: str) -> int:
        """Document frequency (0 if unseen)."""
        return self.doc_frequency.get(term, 0)

    @property
    def terms(self) -> List[str]:
        """Terms in insertion order."""
        return list(self.term_frequency)

    def __contains__(self, term: str) -> bool:
        return term in self.term_frequency


class FrequencyAggregator:
    """
    Thread-safe accumulator of per-document candidate counts.

    Lifecycle: created empty, fed concurrently through ``merge``, then
    ``filter`` runs once after all workers have joined and seals it.

    Besides corpus frequencies it records, per document, the DocumentTopic
    links, the token count, the surface variants of each term and (when
    ``interval_days`` > 0) the dated occurrence buckets.
    """

    def __init__(self, interval_days: int = 0):
        self.interval_days = interval_days
        self._lock = threading.Lock()
        self._term_frequency: Counter = Counter()
        self._doc_frequency: Counter = Counter()
        self._tokens = 0
        self._documents = 0
        self._document_tokens: Dict[str, int] = {}
        self._document_topics: List[DocumentTopic] = []
        self._variants: Dict[str, Set[str]] = defaultdict(set)
        self._buckets: Dict[str, Counter] = defaultdict(Counter)
        self._seen_buckets: Set[int] = set()
        self._kept: Optional[Set[str]] = None

    def merge(self, candidates: DocumentCandidates) -> None:
        """
        Add one document's candidate counts to the corpus statistics.

        All updates for the document are applied together under the lock, so
        no reader ever sees a half-merged document.

        Args:
            candidates: Output of CandidateExtractor for one document

        Raises:
            RuntimeError: If called after ``filter``
        """
        # Build everything that does not need the lock first
        present = {term: count for term, count in candidates.counts.items() if count > 0}
        links = [
            DocumentTopic(document_id=candidates.document_id, term=term, occurrences=count)
            for term, count in present.items()
        ]
        bucket = None
        if candidates.date is not None and self.interval_days > 0:
            bucket = candidates.date.toordinal() // self.interval_days

        with self._lock:
            if self._kept is not None:
                raise RuntimeError("Cannot merge into a filtered FrequencyAggregator")
            for term, count in present.items():
                self._term_frequency[term] += count
                self._doc_frequency[term] += 1
                if bucket is not None:
                    self._buckets[term][bucket] += count
            for term, surfaces in candidates.variants.items():
                self._variants[term].update(surfaces)
            self._tokens += candidates.token_count
            self._documents += 1
            self._document_tokens[candidates.document_id] = (
                self._document_tokens.get(candidates.document_id, 0) + candidates.token_count
            )
            self._document_topics.extend(links)
            if bucket is not None:
                self._seen_buckets.add(bucket)

    def filter(self, min_term_freq: int, min_doc_freq: float = 0.0) -> FrequencyStats:
        """
        Drop rare terms and freeze the statistics.

        Must run after every worker has finished.

        Args:
            min_term_freq: Terms with a lower term frequency are removed
            min_doc_freq: Terms found in a smaller fraction of documents are removed

        Returns:
            Immutable FrequencyStats of the surviving terms
        """
        with self._lock:
            documents = self._documents
            kept = {
                term
                for term, tf in self._term_frequency.items()
                if tf >= min_term_freq
                and (documents == 0 or self._doc_frequency[term] / documents >= min_doc_freq)
            }
            self._kept = kept
            stats = FrequencyStats(
                term_frequency={t: tf for t, tf in self._term_frequency.items() if t in kept},
                doc_frequency={t: df for t, df in self._doc_frequency.items() if t in kept},
                tokens=self._tokens,
                documents=documents,
            )

        logger.info(
            "frequency_stats_filtered",
            candidates=len(self._term_frequency),
            kept=len(kept),
            removed=len(self._term_frequency) - len(kept),
            min_term_freq=min_term_freq,
            min_doc_freq=min_doc_freq,
            documents=documents,
            tokens=stats.tokens,
        )
        return stats

    @property
    def documents(self) -> int:
        with self._lock:
            return self._documents

    def snapshot(self) -> FrequencyStats:
        """Current statistics, unfiltered (for inspection and tests)."""
        with self._lock:
            return FrequencyStats(
                term_frequency=dict(self._term_frequency),
                doc_frequency=dict(self._doc_frequency),
                tokens=self._tokens,
                documents=self._documents,
            )

    def document_topics(self) -> List[DocumentTopic]:
        """Every recorded (document, term) link, in no particular order."""
        with self._lock:
            return list(self._document_topics)

    def document_tokens(self) -> Dict[str, int]:
        """Token count of every processed document."""
        with self._lock:
            return dict(self._document_tokens)

    def variants(self, term: str) -> List[str]:
        """Sorted surface forms seen for a term."""
        with self._lock:
            return sorted(self._variants.get(term, ()))

    def temporal_stats(self) -> TemporalStats:
        """
        Dated occurrence buckets, restricted to the surviving terms once filtered.
        """
        with self._lock:
            counts = {
                term: dict(buckets)
                for term, buckets in self._buckets.items()
                if self._kept is None or term in self._kept
            }
            seen = sorted(self._seen_buckets)
        return TemporalStats(
            interval_days=self.interval_days,
            counts=counts,
            first_bucket=seen[0] if seen else None,
            last_bucket=seen[-1] if seen else None,
        )
