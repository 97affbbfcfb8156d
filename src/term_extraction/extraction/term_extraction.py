"""
Term extraction pipeline.

Orchestrates the stages of a run:

1. Candidate extraction, one task per document on the scheduler's pool
2. Aggregation of per-document counts into shared frequency statistics
3. Frequency filtering
4. Feature scoring (auxiliary statistics computed lazily on demand)
5. Ranking and truncation
6. Result assembly
"""

import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

import structlog

from ..annotation.base import AnnotatorFactory, ThreadLocalAnnotators
from ..candidates.extractor import CandidateExtractor
from ..candidates.grammar import build_grammar
from ..candidates.stopwords import load_stopwords, load_word_list
from ..config import settings
from ..corpus import DocumentSource
from ..exceptions import ConfigurationError
from ..features.engine import DOMAIN_FEATURES, FeatureContext, FeatureEngine
from ..models.configuration import TermExtractionConfig
from ..models.document import Document
from ..models.terms import ExtractionResult
from ..ranking.ranker import Ranker, ensure_document_coverage
from ..scheduling.scheduler import DocumentScheduler
from ..stats.domain import DomainStats, select_domain_terms
from ..stats.frequency import FrequencyAggregator, FrequencyStats
from ..stats.inclusion import InclusionStats
from ..stats.lazy import Lazy
from ..stats.reference import load_reference_stats
from .assembler import assemble_result

logger = structlog.get_logger(__name__)


@dataclass
class CorpusStatistics:
    """
    Output of the aggregation stage.

    Attributes:
        stats: Filtered frequency statistics
        aggregator: Sealed aggregator (links, token counts, variants, dates)
        failed_documents: Ids of documents that could not be processed
    """

    stats: FrequencyStats
    aggregator: FrequencyAggregator
    failed_documents: List[str] = field(default_factory=list)

    @property
    def terms(self) -> List[str]:
        """Surviving terms in a fixed (sorted) order."""
        return sorted(self.stats.term_frequency)


class TermExtraction:
    """
    Extracts ranked terms from a corpus.

    Stop words, the blacklist file and the reference corpus are resources of
    the instance: the first two are loaded at construction (failing fast with
    ResourceLoadError), the reference corpus lazily on first use and at most
    once, even across runs.

    Args:
        config: Run configuration
        annotator_factory: Builds one annotator per worker thread
        scheduler: Scheduler to use (default: built from config and settings)

    Raises:
        ConfigurationError: If the base feature is itself a domain feature
        ResourceLoadError: If a stop word or blacklist file cannot be read

    Examples:
        >>> extraction = TermExtraction(TermExtractionConfig(maxTerms=20), SpacyAnnotatorFactory())
        >>> result = extraction.extract_terms(load_corpus(Path("corpus.json")))
        >>> [topic.term for topic in result.topics[:5]]
    """

    def __init__(
        self,
        config: TermExtractionConfig,
        annotator_factory: AnnotatorFactory,
        scheduler: Optional[DocumentScheduler] = None,
    ):
        if config.base_feature in DOMAIN_FEATURES:
            raise ConfigurationError(
                f"Base feature {config.base_feature.value} cannot be a domain feature",
                details={"base_feature": config.base_feature.value},
            )

        self.config = config
        self.annotator_factory = annotator_factory
        self.scheduler = scheduler or DocumentScheduler(
            num_workers=config.num_threads or settings.default_num_threads
        )

        blacklist: Set[str] = {term.lower() for term in config.blacklist}
        if config.blacklist_file is not None:
            blacklist |= load_word_list(config.blacklist_file, resource="blacklist file")

        self.grammar = build_grammar(config, load_stopwords(config.stop_words), blacklist)
        self.extractor = CandidateExtractor(self.grammar)
        self.reference: Lazy[FrequencyStats] = Lazy(
            lambda: load_reference_stats(config.corpus), name="reference"
        )
        self.logger = logger.bind(component="term_extraction")

    def extract_stats(self, corpus: DocumentSource) -> CorpusStatistics:
        """
        Run candidate extraction over the corpus and aggregate the counts.

        Args:
            corpus: Documents to process

        Returns:
            CorpusStatistics after frequency filtering

        Raises:
            SchedulingTimeoutError: If processing exceeds the scheduler timeout
        """
        aggregator = FrequencyAggregator(interval_days=self.config.interval_days)
        annotators = ThreadLocalAnnotators(self.annotator_factory)

        def process(document: Document) -> int:
            candidates = self.extractor.extract(document, annotators.get())
            aggregator.merge(candidates)
            return len(candidates.counts)

        report = self.scheduler.run(corpus, process, max_docs=self.config.max_docs)
        stats = aggregator.filter(self.config.min_term_freq, self.config.min_doc_freq)

        self.logger.info(
            "corpus_statistics_complete",
            documents=stats.documents,
            failed=len(report.failed_ids),
            terms=len(stats.term_frequency),
            annotators=annotators.instances_created,
        )
        return CorpusStatistics(
            stats=stats, aggregator=aggregator, failed_documents=report.failed_ids
        )

    def build_context(self, corpus_stats: CorpusStatistics) -> FeatureContext:
        """
        Wire the lazily computed statistics the features may need.
        """
        stats = corpus_stats.stats
        aggregator = corpus_stats.aggregator
        terms = corpus_stats.terms

        inclusion = Lazy(lambda: InclusionStats(terms), name="inclusion")
        context = FeatureContext(
            stats=stats,
            reference=self.reference,
            inclusion=inclusion,
            temporal=Lazy(aggregator.temporal_stats, name="temporal"),
        )

        def build_domain() -> DomainStats:
            base_scores = FeatureEngine(context).score_all(self.config.base_feature, terms)
            size = self.config.domain_size or settings.default_domain_size
            return DomainStats.from_document_topics(
                stats,
                inclusion.get(),
                aggregator.document_topics(),
                aggregator.document_tokens(),
                select_domain_terms(base_scores, size),
            )

        context.domain = Lazy(build_domain, name="domain")
        return context

    def extract_terms(self, corpus: DocumentSource) -> ExtractionResult:
        """
        Run the whole pipeline.

        Args:
            corpus: Documents to process

        Returns:
            ExtractionResult with ranked Topics and all DocumentTopic links

        Raises:
            SchedulingTimeoutError: If processing exceeds the scheduler timeout
            FeatureUnavailableError: If the ranking cannot be computed
        """
        start_time = time.time()
        self.logger.info(
            "term_extraction_start",
            method=self.config.method.value,
            features=[f.value for f in self.config.features],
            max_terms=self.config.max_terms,
        )

        corpus_stats = self.extract_stats(corpus)
        terms = corpus_stats.terms
        engine = FeatureEngine(self.build_context(corpus_stats))
        ranker = Ranker(
            engine,
            method=self.config.method,
            features=self.config.features,
            max_terms=self.config.max_terms,
            threshold=self.config.threshold,
        )
        ranking = ranker.rank(terms)

        document_topics = corpus_stats.aggregator.document_topics()
        if self.config.one_term_per_doc:
            document_terms: Dict[str, List[str]] = {}
            for link in document_topics:
                document_terms.setdefault(link.document_id, []).append(link.term)
            ranking = ensure_document_coverage(ranking, document_terms, terms)

        result = assemble_result(
            ranking,
            corpus_stats.stats,
            document_topics,
            corpus_stats.aggregator.variants,
            failed_documents=corpus_stats.failed_documents,
        )

        self.logger.info(
            "term_extraction_complete",
            topics=len(result.topics),
            document_topics=len(result.document_topics),
            failed_documents=len(result.failed_documents),
            processing_time_ms=int((time.time() - start_time) * 1000),
        )
        return result
