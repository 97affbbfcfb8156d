"""
Ranking of scored terms.

Two weighting methods:

- ``one``: rank by the first configured feature
- ``voting``: each feature ranks every term; a term collects 1/rank from each
  feature, and the sums give the final order (reciprocal rank fusion without
  the smoothing constant)

Every sort is stable over the input term order, so equal scores keep the
order in which the terms were given and results are reproducible.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

import structlog

from ..exceptions import FeatureUnavailableError
from ..features.engine import FeatureEngine
from ..models.configuration import Feature, WeightingMethod

logger = structlog.get_logger(__name__)


@dataclass
class Ranking:
    """
    Result of ranking.

    Attributes:
        ordered: Kept terms, best first
        scores: Final score of every ranked term (kept or not)
        unavailable_features: Features skipped during voting, with the reason
    """

    ordered: List[str]
    scores: Dict[str, float]
    unavailable_features: Dict[str, str] = field(default_factory=dict)


def _sort_descending(terms: Sequence[str], scores: Mapping[str, float]) -> List[str]:
    # sorted() is stable, and reverse=True keeps equal items in input order
    return sorted(terms, key=lambda t: scores[t], reverse=True)


class Ranker:
    """
    Orders terms by feature scores and keeps the best ones.

    Args:
        engine: Feature engine over the finalized statistics
        method: Weighting method
        features: Features to use (``one`` only uses the first)
        max_terms: Maximum number of terms kept
        threshold: Minimum final score (None keeps every score)

    Examples:
        >>> ranker = Ranker(engine, WeightingMethod.VOTING,
        ...                 [Feature.C_VALUE, Feature.TOTAL_TF_IDF], max_terms=10)
        >>> ranking = ranker.rank(stats.terms)
        >>> ranking.ordered[:3]
    """

    def __init__(
        self,
        engine: FeatureEngine,
        method: WeightingMethod,
        features: Sequence[Feature],
        max_terms: int,
        threshold: Optional[float] = None,
    ):
        if not features:
            raise ValueError("At least one feature is required")
        self.engine = engine
        self.method = WeightingMethod(method)
        self.features = [Feature(f) for f in features]
        self.max_terms = max_terms
        self.threshold = threshold

    def rank(self, terms: Sequence[str]) -> Ranking:
        """
        Score, sort, threshold and truncate.

        Args:
            terms: Candidate terms in a fixed order (ties keep this order)

        Returns:
            Ranking with at most ``max_terms`` terms

        Raises:
            FeatureUnavailableError: If the ranking feature (``one``) or every
                feature (``voting``) is unavailable
        """
        terms = list(terms)
        unavailable: Dict[str, str] = {}

        if self.method is WeightingMethod.ONE:
            scores = self.engine.score_all(self.features[0], terms)
        else:
            scores = self._vote(terms, unavailable)

        ordered = _sort_descending(terms, scores)
        if self.threshold is not None:
            ordered = [t for t in ordered if scores[t] >= self.threshold]
        ordered = ordered[: self.max_terms]

        logger.info(
            "terms_ranked",
            method=self.method.value,
            candidates=len(terms),
            kept=len(ordered),
            unavailable_features=sorted(unavailable),
        )
        return Ranking(ordered=ordered, scores=scores, unavailable_features=unavailable)

    def _vote(self, terms: List[str], unavailable: Dict[str, str]) -> Dict[str, float]:
        votes = {term: 0.0 for term in terms}
        used = 0
        for feature in self.features:
            try:
                feature_scores = self.engine.score_all(feature, terms)
            except FeatureUnavailableError as e:
                logger.warning("feature_unavailable", feature=feature.value, reason=e.reason)
                unavailable[feature.value] = e.reason
                continue
            used += 1
            for rank, term in enumerate(_sort_descending(terms, feature_scores), start=1):
                votes[term] += 1.0 / rank

        if used == 0:
            raise FeatureUnavailableError(
                ", ".join(f.value for f in self.features), "no configured feature is available"
            )
        return votes


def ensure_document_coverage(
    ranking: Ranking,
    document_terms: Mapping[str, Iterable[str]],
    term_order: Sequence[str],
) -> Ranking:
    """
    Make sure every document is represented by at least one kept term.

    Documents are visited in ascending id order. For each document none of
    whose terms was kept, its highest-scoring ranked term is appended (ties
    go to the earlier term in ``term_order``). Appended terms follow the
    ranked list, so the size cap is only exceeded by these additions.

    Args:
        ranking: Ranking to extend
        document_terms: document id -> terms recorded for it
        term_order: Fixed term order used for tie-breaking

    Returns:
        A new Ranking with the extra terms appended
    """
    position = {term: i for i, term in enumerate(term_order)}
    ordered = list(ranking.ordered)
    kept = set(ordered)
    added = 0

    for document_id in sorted(document_terms):
        terms = [t for t in document_terms[document_id] if t in ranking.scores]
        if not terms or kept.intersection(terms):
            continue
        best = min(terms, key=lambda t: (-ranking.scores[t], position.get(t, len(position))))
        ordered.append(best)
        kept.add(best)
        added += 1

    if added:
        logger.info("document_coverage_terms_added", added=added, total=len(ordered))
    return Ranking(
        ordered=ordered,
        scores=ranking.scores,
        unavailable_features=dict(ranking.unavailable_features),
    )
