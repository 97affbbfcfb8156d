"""
Feature scoring over the finalized corpus statistics.

Each feature declares which auxiliary statistics it needs. Those statistics
live in Lazy cells on the FeatureContext, so they are only computed when a
feature that needs them is actually scored. When a requirement cannot be met
the feature raises FeatureUnavailableError; other features are unaffected.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Iterable, Optional

import structlog

from ..exceptions import FeatureUnavailableError, TermExtractionError
from ..models.configuration import Feature
from ..stats.domain import DomainStats
from ..stats.frequency import FrequencyStats
from ..stats.inclusion import InclusionStats
from ..stats.lazy import Lazy
from ..stats.temporal import TemporalStats
from . import formulas

logger = structlog.get_logger(__name__)


class Requirement(str, Enum):
    """Auxiliary statistics a feature may depend on."""

    REFERENCE = "reference"
    INCLUSION = "inclusion"
    DOMAIN = "domain"
    TEMPORAL = "temporal"


FEATURE_REQUIREMENTS: Dict[Feature, FrozenSet[Requirement]] = {
    Feature.TERM_FREQ: frozenset(),
    Feature.AVG_TERM_FREQ: frozenset(),
    Feature.RESIDUAL_IDF: frozenset(),
    Feature.TOTAL_TF_IDF: frozenset(),
    Feature.C_VALUE: frozenset({Requirement.INCLUSION}),
    Feature.BASIC: frozenset({Requirement.INCLUSION}),
    Feature.COMBO_BASIC: frozenset({Requirement.INCLUSION}),
    Feature.WEIRDNESS: frozenset({Requirement.REFERENCE}),
    Feature.RELEVANCE: frozenset({Requirement.REFERENCE}),
    Feature.POST_RANK_DC: frozenset({Requirement.DOMAIN}),
    Feature.DOMAIN_PERTINENCE: frozenset({Requirement.DOMAIN}),
    Feature.NOVEL_TOPIC_MODEL: frozenset({Requirement.DOMAIN}),
    Feature.FUTURE_BASIC: frozenset({Requirement.INCLUSION, Requirement.TEMPORAL}),
    Feature.FUTURE_COMBO_BASIC: frozenset({Requirement.INCLUSION, Requirement.TEMPORAL}),
}

DOMAIN_FEATURES = frozenset(
    f for f, reqs in FEATURE_REQUIREMENTS.items() if Requirement.DOMAIN in reqs
)


@dataclass
class FeatureContext:
    """
    Everything a feature may read.

    Attributes:
        stats: Filtered corpus statistics
        reference: Reference corpus statistics
        inclusion: Sub/superterm relations among the filtered terms
        domain: Domain co-occurrence statistics
        temporal: Dated occurrence buckets
    """

    stats: FrequencyStats
    reference: Optional[Lazy[FrequencyStats]] = None
    inclusion: Optional[Lazy[InclusionStats]] = None
    domain: Optional[Lazy[DomainStats]] = None
    temporal: Optional[Lazy[TemporalStats]] = None

    def require(self, feature: Feature, requirement: Requirement):
        """
        Resolve one requirement of a feature.

        Raises:
            FeatureUnavailableError: If the statistics are not configured or
                failed to load
        """
        cell = getattr(self, requirement.value)
        if cell is None:
            raise FeatureUnavailableError(feature.value, f"no {requirement.value} statistics")
        try:
            value = cell.get()
        except TermExtractionError as e:
            raise FeatureUnavailableError(feature.value, e.message) from e

        if requirement is Requirement.TEMPORAL and not value.enabled:
            raise FeatureUnavailableError(
                feature.value, "no dated documents or temporal bucketing disabled"
            )
        return value


def calculate_feature(feature: Feature, term: str, context: FeatureContext) -> float:
    """
    Score one term under one feature.

    Args:
        feature: Feature to compute
        term: A term present in ``context.stats``
        context: Statistics to read

    Returns:
        Feature value (higher means more term-like)

    Raises:
        FeatureUnavailableError: If a statistic the feature needs is missing
        ValueError: If the term is not in the corpus statistics
    """
    feature = Feature(feature)
    stats = context.stats
    tf = stats.tf(term)
    df = stats.df(term)
    if tf == 0 or df == 0:
        raise ValueError(f"Unknown term {term!r}")
    n = stats.documents
    length = len(term.split())

    if feature is Feature.TERM_FREQ:
        return float(tf)
    if feature is Feature.AVG_TERM_FREQ:
        return formulas.avg_term_freq(tf, df)
    if feature is Feature.RESIDUAL_IDF:
        return formulas.residual_idf(tf, df, n)
    if feature is Feature.TOTAL_TF_IDF:
        return formulas.total_tf_idf(tf, df, n)

    if feature in (Feature.WEIRDNESS, Feature.RELEVANCE):
        reference = context.require(feature, Requirement.REFERENCE)
        if feature is Feature.WEIRDNESS:
            return formulas.weirdness(tf, stats.tokens, reference.tf(term), reference.tokens)
        return formulas.relevance(tf, df, n, reference.tf(term))

    if feature in DOMAIN_FEATURES:
        domain = context.require(feature, Requirement.DOMAIN)
        if feature is Feature.POST_RANK_DC:
            return domain.coherence(term)
        if feature is Feature.DOMAIN_PERTINENCE:
            return domain.pertinence(term)
        return domain.novelty(term)

    inclusion = context.require(feature, Requirement.INCLUSION)
    superterms = inclusion.superterms(term)
    subterms = inclusion.subterms(term)

    if feature is Feature.C_VALUE:
        return formulas.c_value(length, tf, [stats.tf(s) for s in superterms])
    if feature is Feature.BASIC:
        return formulas.basic(length, tf, len(superterms))
    if feature is Feature.COMBO_BASIC:
        return formulas.combo_basic(length, tf, len(superterms), len(subterms))

    temporal = context.require(feature, Requirement.TEMPORAL)
    predicted = temporal.predict(term)
    if feature is Feature.FUTURE_BASIC:
        return formulas.basic(length, predicted, len(superterms))
    if feature is Feature.FUTURE_COMBO_BASIC:
        return formulas.combo_basic(length, predicted, len(superterms), len(subterms))

    raise ValueError(f"Unsupported feature: {feature}")


class FeatureEngine:
    """
    Scores terms under the configured features.

    Examples:
        >>> engine = FeatureEngine(FeatureContext(stats=stats, inclusion=Lazy.of(inclusion)))
        >>> scores = engine.score_all(Feature.COMBO_BASIC, stats.terms)
    """

    def __init__(self, context: FeatureContext):
        self.context = context

    def check_available(self, feature: Feature) -> None:
        """
        Resolve every requirement of a feature up front.

        Raises:
            FeatureUnavailableError: If any requirement is missing
        """
        feature = Feature(feature)
        for requirement in sorted(FEATURE_REQUIREMENTS[feature], key=lambda r: r.value):
            self.context.require(feature, requirement)

    def score(self, feature: Feature, term: str) -> float:
        return calculate_feature(feature, term, self.context)

    def score_all(self, feature: Feature, terms: Iterable[str]) -> Dict[str, float]:
        """
        Score many terms under one feature.

        Args:
            feature: Feature to compute
            terms: Terms present in the corpus statistics

        Returns:
            term -> score, in input order

        Raises:
            FeatureUnavailableError: If the feature cannot be computed
        """
        feature = Feature(feature)
        self.check_available(feature)
        scores = {term: calculate_feature(feature, term, self.context) for term in terms}
        logger.debug("feature_scored", feature=feature.value, terms=len(scores))
        return scores
