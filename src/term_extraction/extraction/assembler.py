"""
Assembly of the final extraction result.
"""

from typing import Callable, Iterable, List, Optional

from ..models.terms import DocumentTopic, ExtractionResult, Topic
from ..ranking.ranker import Ranking
from ..stats.frequency import FrequencyStats
from ..version import get_extractor_version


def assemble_result(
    ranking: Ranking,
    stats: FrequencyStats,
    document_topics: Iterable[DocumentTopic],
    variants: Callable[[str], List[str]],
    failed_documents: Optional[List[str]] = None,
) -> ExtractionResult:
    """
    Build the ExtractionResult of a run.

    Topics follow the ranking order. Every recorded DocumentTopic is returned,
    including links to terms that were not kept, sorted by document then term.

    Args:
        ranking: Final ranking
        stats: Filtered corpus statistics
        document_topics: Links recorded during aggregation
        variants: Returns the surface variants of a term
        failed_documents: Ids of documents that could not be processed

    Returns:
        ExtractionResult stamped with the pipeline version
    """
    topics = [
        Topic(
            term=term,
            term_frequency=stats.tf(term),
            document_frequency=stats.df(term),
            score=ranking.scores[term],
            variants=variants(term),
        )
        for term in ranking.ordered
    ]

    return ExtractionResult(
        topics=topics,
        document_topics=sorted(document_topics, key=lambda dt: (dt.document_id, dt.term)),
        failed_documents=list(failed_documents or []),
        unavailable_features=dict(ranking.unavailable_features),
        extractor_version=get_extractor_version(),
    )
