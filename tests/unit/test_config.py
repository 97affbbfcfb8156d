"""
Unit tests for settings and run configuration.
"""

import json

import pytest
from pydantic import ValidationError

from term_extraction.config import Settings
from term_extraction.models.configuration import (
    DEFAULT_FEATURES,
    Feature,
    TermExtractionConfig,
    WeightingMethod,
    load_config,
)


# ============================================================================
# Test Class: Settings
# ============================================================================


@pytest.mark.unit
class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self):
        settings = Settings()
        assert settings.spacy_model_name == "en_core_web_sm"
        assert settings.default_domain_size == 50

    def test_env_override(self, monkeypatch):
        """Test settings are read from environment variables."""
        monkeypatch.setenv("DEFAULT_NUM_THREADS", "3")
        monkeypatch.setenv("LOG_JSON", "false")
        settings = Settings()
        assert settings.default_num_threads == 3
        assert settings.log_json is False

    def test_fixture(self, mock_settings):
        assert mock_settings.scheduler_queue_size == 4


# ============================================================================
# Test Class: TermExtractionConfig
# ============================================================================


@pytest.mark.unit
class TestTermExtractionConfig:
    """Tests for TermExtractionConfig validation and aliases."""

    def test_defaults(self):
        config = TermExtractionConfig()
        assert config.max_terms == 100
        assert config.method is WeightingMethod.ONE
        assert config.features == DEFAULT_FEATURES
        assert config.base_feature is Feature.COMBO_BASIC
        assert config.threshold is None
        assert config.head_token_final is True

    def test_camel_case_keys(self):
        """Test options are read from camelCase keys."""
        config = TermExtractionConfig.model_validate(
            {"maxTerms": 7, "ngramMax": 2, "minDocFreq": 0.5, "headTokenFinal": False}
        )
        assert config.max_terms == 7
        assert config.ngram_max == 2
        assert config.min_doc_freq == 0.5
        assert config.head_token_final is False

    @pytest.mark.parametrize(
        "key,field,value",
        [
            ("maxTopics", "max_terms", 12),
            ("oneTopicPerDoc", "one_term_per_doc", True),
            ("preceedingTokens", "preceding_tokens", {"NN"}),
        ],
    )
    def test_legacy_aliases(self, key, field, value):
        """Test older option names are still accepted."""
        raw = sorted(value) if isinstance(value, set) else value
        config = TermExtractionConfig.model_validate({key: raw})
        assert getattr(config, field) == value

    def test_feature_names(self):
        """Test features are parsed from their camelCase names."""
        config = TermExtractionConfig.model_validate(
            {"method": "voting", "features": ["cValue", "postRankDC"]}
        )
        assert config.method is WeightingMethod.VOTING
        assert config.features == [Feature.C_VALUE, Feature.POST_RANK_DC]

    def test_unknown_feature(self):
        with pytest.raises(ValidationError):
            TermExtractionConfig.model_validate({"features": ["tfIdfPlus"]})

    def test_empty_features(self):
        """Test at least one feature is required."""
        with pytest.raises(ValidationError):
            TermExtractionConfig(features=[])

    def test_ngram_range(self):
        """Test ngramMin may not exceed ngramMax."""
        with pytest.raises(ValidationError, match="ngramMin"):
            TermExtractionConfig(ngram_min=3, ngram_max=2)

    def test_min_doc_freq_bounds(self):
        with pytest.raises(ValidationError):
            TermExtractionConfig(min_doc_freq=1.5)


# ============================================================================
# Test Class: load_config
# ============================================================================


@pytest.mark.unit
class TestLoadConfig:
    """Tests for load_config."""

    def test_plain_object(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"maxTerms": 3}), encoding="utf-8")
        assert load_config(path).max_terms == 3

    def test_nested_under_term_extraction(self, tmp_path):
        """Test options may sit under a termExtraction key."""
        path = tmp_path / "config.json"
        path.write_text(
            json.dumps({"termExtraction": {"maxTerms": 4}, "other": {"x": 1}}), encoding="utf-8"
        )
        assert load_config(path).max_terms == 4

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            load_config(tmp_path / "missing.json")


@pytest.mark.unit
@pytest.mark.parametrize("log_json", [True, False])
def test_setup_logging(log_json, capsys):
    """Test both renderers can be configured and used."""
    import structlog

    from term_extraction.logging_config import setup_logging

    try:
        setup_logging(log_level="DEBUG", log_json=log_json)
        renderer = "json" if log_json else "console"
        structlog.get_logger("test").info("logging_configured", renderer=renderer)
        assert "logging_configured" in capsys.readouterr().out
    finally:
        structlog.reset_defaults()
