"""
Term extraction run configuration.

Options use snake_case in Python and camelCase in configuration files
(``maxTerms``, ``ngramMin``, ...). Older aliases such as ``maxTopics`` and
``oneTopicPerDoc`` are still accepted.
"""

import json
from enum import Enum
from pathlib import Path
from typing import List, Optional, Set

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class WeightingMethod(str, Enum):
    """How feature scores are turned into a single ranking."""

    ONE = "one"  # rank by the first configured feature
    VOTING = "voting"  # reciprocal-rank fusion over all configured features


class Feature(str, Enum):
    """Scoring features for candidate terms."""

    WEIRDNESS = "weirdness"
    AVG_TERM_FREQ = "avgTermFreq"
    TERM_FREQ = "termFreq"
    RESIDUAL_IDF = "residualIdf"
    TOTAL_TF_IDF = "totalTfIdf"
    C_VALUE = "cValue"
    BASIC = "basic"
    COMBO_BASIC = "comboBasic"
    POST_RANK_DC = "postRankDC"
    RELEVANCE = "relevance"
    DOMAIN_PERTINENCE = "domainPertinence"
    NOVEL_TOPIC_MODEL = "novelTopicModel"
    FUTURE_BASIC = "futureBasic"
    FUTURE_COMBO_BASIC = "futureComboBasic"


DEFAULT_FEATURES = [
    Feature.COMBO_BASIC,
    Feature.WEIRDNESS,
    Feature.TOTAL_TF_IDF,
    Feature.C_VALUE,
    Feature.RESIDUAL_IDF,
]

# Penn Treebank tags
DEFAULT_PRECEDING_TAGS = {"NN", "NNS", "JJ", "NNP"}
DEFAULT_MIDDLE_TAGS = {"IN"}
DEFAULT_HEAD_TAGS = {"NN", "NNS", "CD"}


class TermExtractionConfig(BaseModel):
    """
    Options for one term extraction run.

    Examples:
        >>> config = TermExtractionConfig.model_validate({"maxTerms": 10, "ngramMax": 3})
        >>> config.max_terms, config.ngram_max
        (10, 3)
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=False,
    )

    threshold: Optional[float] = Field(
        None, description="Minimum final score for a term to be kept (None disables)"
    )
    max_terms: int = Field(
        100,
        ge=1,
        validation_alias=AliasChoices("maxTerms", "maxTopics", "max_terms"),
        description="Maximum number of terms to extract",
    )
    ngram_min: int = Field(1, ge=1, description="Shortest term length in tokens")
    ngram_max: int = Field(4, ge=1, description="Longest term length in tokens")
    min_term_freq: int = Field(2, ge=0, description="Minimum corpus term frequency")
    min_doc_freq: float = Field(
        0.0, ge=0.0, le=1.0, description="Minimum fraction of documents containing the term"
    )
    max_docs: Optional[int] = Field(None, ge=1, description="Process at most this many documents")
    method: WeightingMethod = Field(WeightingMethod.ONE, description="Weighting method")
    features: List[Feature] = Field(
        default_factory=lambda: list(DEFAULT_FEATURES), min_length=1, description="Features to use"
    )
    corpus: Optional[Path] = Field(
        None, description="Reference corpus statistics (FrequencyStats JSON)"
    )
    base_feature: Feature = Field(
        Feature.COMBO_BASIC, description="Feature selecting the domain terms for domain features"
    )
    num_threads: Optional[int] = Field(
        None, ge=1, description="Worker threads (default from settings)"
    )
    stop_words: Optional[Path] = Field(None, description="Stop word file, one word per line")
    preceding_tokens: Set[str] = Field(
        default_factory=lambda: set(DEFAULT_PRECEDING_TAGS),
        validation_alias=AliasChoices("precedingTokens", "preceedingTokens", "preceding_tokens"),
        description="Tags allowed in non-final position",
    )
    middle_tokens: Set[str] = Field(
        default_factory=lambda: set(DEFAULT_MIDDLE_TAGS),
        description="Tags allowed in non-final position that cannot complete a term",
    )
    head_tokens: Set[str] = Field(
        default_factory=lambda: set(DEFAULT_HEAD_TAGS), description="Tags allowed as the head"
    )
    head_token_final: bool = Field(True, description="True if the head is the last token")
    blacklist: Set[str] = Field(default_factory=set, description="Terms never generated")
    blacklist_file: Optional[Path] = Field(None, description="File of blacklisted terms")
    interval_days: int = Field(
        365, description="Temporal bucket width in days; <= 0 disables temporal prediction"
    )
    one_term_per_doc: bool = Field(
        False,
        validation_alias=AliasChoices("oneTermPerDoc", "oneTopicPerDoc", "one_term_per_doc"),
        description="Always output at least one term per document",
    )
    domain_size: Optional[int] = Field(
        None, ge=1, description="Number of domain terms for domain features (default from settings)"
    )

    @model_validator(mode="after")
    def check_ngram_range(self) -> "TermExtractionConfig":
        """Reject an empty n-gram range."""
        if self.ngram_min > self.ngram_max:
            raise ValueError(
                f"ngramMin ({self.ngram_min}) must not exceed ngramMax ({self.ngram_max})"
            )
        return self


def load_config(path: Path) -> TermExtractionConfig:
    """
    Load a term extraction configuration from a JSON file.

    The file may contain the configuration object itself or a full pipeline
    configuration with the options under a ``termExtraction`` key.

    Args:
        path: Path to the JSON configuration file

    Returns:
        Validated TermExtractionConfig

    Raises:
        OSError: If the file cannot be read
        pydantic.ValidationError: If an option has an invalid value
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if isinstance(data, dict) and "termExtraction" in data:
        data = data["termExtraction"]

    return TermExtractionConfig.model_validate(data)
