"""
Per-document candidate extraction.

Annotates one document with the calling thread's annotator, applies the
noun-phrase grammar and counts the candidate terms. Nothing here touches
shared state; merging into corpus statistics is the aggregator's job.
"""

import datetime
from collections import Counter, defaultdict
from dataclasses import dataclass, field
from typing import Dict, Optional, Set

from ..annotation.base import LinguisticAnnotator, annotate
from ..models.document import Document
from .grammar import NounPhraseGrammar


@dataclass
class DocumentCandidates:
    """
    Candidate terms found in one document.

    Attributes:
        document_id: Source document
        counts: Occurrences of each candidate term in the document
        token_count: Number of tokens in the document
        variants: Surface forms seen for each term, when they differ from it
        date: Document date, if known
    """

    document_id: str
    counts: Counter = field(default_factory=Counter)
    token_count: int = 0
    variants: Dict[str, Set[str]] = field(default_factory=dict)
    date: Optional[datetime.date] = None


class CandidateExtractor:
    """
    Turns annotated documents into candidate term counts.

    Examples:
        >>> extractor = CandidateExtractor(grammar)
        >>> result = extractor.extract(Document(id="d1", contents="..."), annotator)
        >>> result.counts.most_common(3)
    """

    def __init__(self, grammar: NounPhraseGrammar):
        self.grammar = grammar

    def extract(self, document: Document, annotator: LinguisticAnnotator) -> DocumentCandidates:
        """
        Extract candidate terms from a document.

        Args:
            document: Document to process
            annotator: Annotator owned by the calling thread

        Returns:
            DocumentCandidates with per-term counts for this document
        """
        tokens = annotate(annotator, document.contents or "")

        counts: Counter = Counter()
        variants: Dict[str, Set[str]] = defaultdict(set)
        for span in self.grammar.spans(tokens):
            counts[span.term] += 1
            if span.surface != span.term:
                variants[span.term].add(span.surface)

        return DocumentCandidates(
            document_id=document.id,
            counts=counts,
            token_count=len(tokens),
            variants=dict(variants),
            date=document.date,
        )
