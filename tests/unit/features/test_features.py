"""
Unit tests for scoring formulas and the feature engine.

Tests coverage:
- formulas: each scoring formula on hand-computed inputs
- weirdness/relevance floor for terms missing from the reference corpus
- FeatureEngine: requirements, lazy loading, unavailable features
"""

import math

import pytest

from term_extraction.exceptions import FeatureUnavailableError, ReferenceUnavailableError
from term_extraction.features import formulas
from term_extraction.features.engine import (
    FEATURE_REQUIREMENTS,
    FeatureContext,
    FeatureEngine,
    Requirement,
    calculate_feature,
)
from term_extraction.models.configuration import Feature
from term_extraction.stats.frequency import FrequencyStats
from term_extraction.stats.inclusion import InclusionStats
from term_extraction.stats.lazy import Lazy
from term_extraction.stats.temporal import TemporalStats


# ============================================================================
# Test Class: Formulas
# ============================================================================


@pytest.mark.unit
class TestFormulas:
    """Tests for the scoring formulas."""

    def test_avg_term_freq(self):
        assert formulas.avg_term_freq(6, 3) == 2.0

    def test_total_tf_idf(self):
        """Test tf * ln(N/df)."""
        assert formulas.total_tf_idf(4, 2, 8) == pytest.approx(4 * math.log(4))
        assert formulas.total_tf_idf(4, 8, 8) == 0.0

    def test_residual_idf(self):
        """Test observed IDF minus Poisson-predicted IDF."""
        expected = math.log2(2 / 1) + math.log2(1 - math.exp(-2 / 2))
        assert formulas.residual_idf(2, 1, 2) == pytest.approx(expected)

    def test_c_value_without_superterms(self):
        assert formulas.c_value(2, 5, []) == pytest.approx(math.log2(3) * 5)

    def test_c_value_with_superterms(self):
        """Test superterm occurrences are subtracted on average."""
        assert formulas.c_value(1, 5, [2, 4]) == pytest.approx(2.0)

    def test_basic(self):
        assert formulas.basic(2, math.e, 1) == pytest.approx(5.5)

    def test_combo_basic(self):
        assert formulas.combo_basic(2, math.e, 1, 1) == pytest.approx(2.85)

    def test_weirdness(self):
        """Test relative corpus frequency over relative reference frequency."""
        assert formulas.weirdness(2, 100, 4, 1000) == pytest.approx(0.02 / 0.004)

    def test_weirdness_floor_for_unseen_terms(self):
        """Test a term absent from the reference gets a finite score."""
        score = formulas.weirdness(2, 100, 0, 1000)
        assert math.isfinite(score)
        assert score == pytest.approx(0.02 / (0.1 / 1000))

    def test_relevance_floor(self):
        """Test relevance stays finite for unseen reference terms."""
        assert formulas.relevance(1, 1, 1, 0) == pytest.approx(1 - 1 / math.log2(12))


# ============================================================================
# Test Class: FeatureEngine
# ============================================================================


@pytest.fixture
def stats() -> FrequencyStats:
    return FrequencyStats(
        term_frequency={"network": 6, "neural network": 4, "graph": 2},
        doc_frequency={"network": 4, "neural network": 3, "graph": 1},
        tokens=200,
        documents=5,
    )


@pytest.fixture
def inclusion(stats) -> Lazy:
    return Lazy.of(InclusionStats(stats.terms))


@pytest.mark.unit
class TestFeatureEngine:
    """Tests for FeatureEngine and calculate_feature."""

    def test_corpus_only_features_need_nothing(self, stats):
        """Test features without requirements work on bare statistics."""
        engine = FeatureEngine(FeatureContext(stats=stats))
        assert engine.score(Feature.TERM_FREQ, "network") == 6.0
        assert engine.score(Feature.AVG_TERM_FREQ, "network") == 1.5
        assert engine.score(Feature.TOTAL_TF_IDF, "graph") == pytest.approx(2 * math.log(5))

    def test_string_feature_names(self, stats):
        """Test camelCase feature names are accepted."""
        assert calculate_feature("termFreq", "graph", FeatureContext(stats=stats)) == 2.0

    def test_unknown_term(self, stats):
        """Test scoring a term missing from the statistics fails."""
        with pytest.raises(ValueError, match="Unknown term"):
            FeatureEngine(FeatureContext(stats=stats)).score(Feature.TERM_FREQ, "tree")

    def test_c_value_uses_inclusion(self, stats, inclusion):
        """Test C-value subtracts superterm frequency."""
        engine = FeatureEngine(FeatureContext(stats=stats, inclusion=inclusion))
        assert engine.score(Feature.C_VALUE, "network") == pytest.approx(1.0 * (6 - 4))
        assert engine.score(Feature.C_VALUE, "neural network") == pytest.approx(math.log2(3) * 4)

    def test_combo_basic_counts_relations(self, stats, inclusion):
        engine = FeatureEngine(FeatureContext(stats=stats, inclusion=inclusion))
        expected = 2 * math.log(4) + 0.1 * 1
        assert engine.score(Feature.COMBO_BASIC, "neural network") == pytest.approx(expected)

    def test_reference_missing(self, stats):
        """Test reference features are unavailable without a reference corpus."""
        engine = FeatureEngine(FeatureContext(stats=stats))
        with pytest.raises(FeatureUnavailableError) as exc_info:
            engine.score_all(Feature.WEIRDNESS, stats.terms)
        assert exc_info.value.feature == "weirdness"

    def test_reference_failure_is_per_feature(self, stats):
        """Test a failing reference load disables only reference features."""
        calls = []

        def load():
            calls.append(1)
            raise ReferenceUnavailableError("file is broken")

        engine = FeatureEngine(FeatureContext(stats=stats, reference=Lazy(load)))
        for feature in (Feature.WEIRDNESS, Feature.RELEVANCE):
            with pytest.raises(FeatureUnavailableError, match="file is broken"):
                engine.score_all(feature, stats.terms)
        assert engine.score(Feature.TERM_FREQ, "graph") == 2.0
        assert len(calls) == 1

    def test_reference_loaded_only_on_demand(self, stats):
        """Test the reference corpus is not loaded for other features."""
        reference = Lazy(lambda: FrequencyStats(tokens=1000), name="reference")
        engine = FeatureEngine(FeatureContext(stats=stats, reference=reference))
        engine.score_all(Feature.TERM_FREQ, stats.terms)
        assert not reference.computed
        scores = engine.score_all(Feature.WEIRDNESS, stats.terms)
        assert reference.computed
        assert scores["graph"] == pytest.approx((2 / 200) / (0.1 / 1000))

    def test_temporal_disabled(self, stats, inclusion):
        """Test future features are unavailable without dated documents."""
        temporal = Lazy.of(TemporalStats(365, {}, None, None))
        engine = FeatureEngine(FeatureContext(stats=stats, inclusion=inclusion, temporal=temporal))
        with pytest.raises(FeatureUnavailableError, match="dated"):
            engine.score_all(Feature.FUTURE_BASIC, stats.terms)

    def test_future_basic_uses_prediction(self, stats, inclusion):
        """Test future features replace tf with the predicted frequency."""
        temporal = Lazy.of(
            TemporalStats(365, {"graph": {0: 1, 1: 2, 2: 3}}, first_bucket=0, last_bucket=2)
        )
        engine = FeatureEngine(FeatureContext(stats=stats, inclusion=inclusion, temporal=temporal))
        assert engine.score(Feature.FUTURE_BASIC, "graph") == pytest.approx(math.log(4))

    def test_every_feature_declares_requirements(self):
        """Test the requirement table covers all features."""
        assert set(FEATURE_REQUIREMENTS) == set(Feature)
        assert FEATURE_REQUIREMENTS[Feature.WEIRDNESS] == {Requirement.REFERENCE}
