"""
Term enrichment: corpus statistics for an existing list of terms.

Given terms from elsewhere (typically the nodes of a TExEval taxonomy), count
where they occur in a corpus and produce the same Topic and DocumentTopic
records that term extraction produces, with TF-IDF weights on the links.
"""

import math
import time
from collections import Counter
from typing import Iterable, List, Optional

import structlog

from ..annotation.base import (
    AnnotatorFactory,
    LinguisticAnnotator,
    ThreadLocalAnnotators,
    annotate,
)
from ..candidates.extractor import DocumentCandidates
from ..corpus import DocumentSource
from ..models.document import Document
from ..models.terms import DocumentTopic, ExtractionResult, Topic
from ..scheduling.scheduler import DocumentScheduler
from ..stats.frequency import FrequencyAggregator
from ..version import get_extractor_version
from .trie import WordTrie

logger = structlog.get_logger(__name__)


def _normalized_words(annotator: LinguisticAnnotator, text: str) -> List[str]:
    return [(tok.lemma or tok.text).lower() for tok in annotate(annotator, text)]


def build_term_trie(term_strings: Iterable[str], annotator: LinguisticAnnotator) -> WordTrie:
    """
    Index terms by their normalized words.

    Terms are annotated with the same annotator as the documents, so both sides
    are matched on lemmas when a lemmatizer is available.

    Args:
        term_strings: Terms to index (lower-cased before indexing)
        annotator: Annotator owned by the calling thread

    Returns:
        WordTrie reporting the lower-cased term strings
    """
    trie = WordTrie()
    for term in term_strings:
        term = term.lower()
        words = _normalized_words(annotator, term)
        if words:
            trie.add(words, term)
        else:
            logger.warning("enrich_term_skipped", term=term, reason="no tokens")
    return trie


def add_tfidf(document_topics: List[DocumentTopic]) -> List[DocumentTopic]:
    """
    Weight each link by occurrences * ln(n / df).

    n is the number of documents with at least one link and df the number of
    links of the term. Links are assumed unique per (document, term).

    Args:
        document_topics: Links to weight

    Returns:
        New links with ``tfidf`` set, in the same order
    """
    term_df: Counter = Counter(dt.term for dt in document_topics)
    n = len({dt.document_id for dt in document_topics})
    return [
        dt.model_copy(update={"tfidf": dt.occurrences * math.log(n / term_df[dt.term])})
        for dt in document_topics
    ]


def enrich_terms(
    term_strings: Iterable[str],
    corpus: DocumentSource,
    annotator_factory: AnnotatorFactory,
    scheduler: Optional[DocumentScheduler] = None,
    max_docs: Optional[int] = None,
) -> ExtractionResult:
    """
    Count known terms in every document of a corpus.

    Every occurrence is counted, including nested ones ("network" inside
    "neural network").

    Args:
        term_strings: Terms to look for
        corpus: Documents to scan
        annotator_factory: Builds one annotator per worker thread
        scheduler: Scheduler to use (default from settings)
        max_docs: Scan at most this many documents

    Returns:
        ExtractionResult with one Topic per term (sorted by term, score =
        document frequency / corpus size) and TF-IDF weighted DocumentTopics

    Raises:
        SchedulingTimeoutError: If processing exceeds the scheduler timeout

    Examples:
        >>> result = enrich_terms({"neural network"}, corpus, SpacyAnnotatorFactory())
        >>> result.topics[0].document_frequency
    """
    start_time = time.time()
    terms = sorted({t.lower() for t in term_strings})
    scheduler = scheduler or DocumentScheduler()
    annotators = ThreadLocalAnnotators(annotator_factory)
    trie = build_term_trie(terms, annotators.get())
    aggregator = FrequencyAggregator()

    logger.info("term_enrichment_start", terms=len(terms), indexed=len(trie))

    def process(document: Document) -> int:
        words = _normalized_words(annotators.get(), document.contents or "")
        counts: Counter = Counter(term for _, _, term in trie.matches(words))
        aggregator.merge(
            DocumentCandidates(document_id=document.id, counts=counts, token_count=len(words))
        )
        return len(counts)

    report = scheduler.run(corpus, process, max_docs=max_docs)
    stats = aggregator.snapshot()

    size = corpus.size()
    topics = [
        Topic(
            term=term,
            term_frequency=stats.tf(term),
            document_frequency=stats.df(term),
            score=stats.df(term) / size if size else 0.0,
        )
        for term in terms
    ]
    links = sorted(aggregator.document_topics(), key=lambda dt: (dt.document_id, dt.term))
    document_topics = add_tfidf(links)

    logger.info(
        "term_enrichment_complete",
        terms=len(topics),
        found=sum(1 for t in topics if t.document_frequency > 0),
        document_topics=len(document_topics),
        failed_documents=len(report.failed_ids),
        processing_time_ms=int((time.time() - start_time) * 1000),
    )
    return ExtractionResult(
        topics=topics,
        document_topics=document_topics,
        failed_documents=report.failed_ids,
        extractor_version=get_extractor_version(),
    )

