"""
Output models of term extraction.

Topics carry the corpus statistics and final score of each extracted term;
DocumentTopics link documents to the terms that occur in them.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Topic(BaseModel):
    """
    An extracted term with its statistics and final score.

    The meaning of ``score`` depends on the weighting method: a feature value
    for the single-feature method, a summed reciprocal rank for voting.
    """

    model_config = ConfigDict(frozen=True)

    term: str = Field(description="Normalized (lower-cased) term string")
    term_frequency: int = Field(description="Occurrences across the corpus", ge=0)
    document_frequency: int = Field(description="Documents containing the term", ge=0)
    score: float = Field(description="Final ranking score")
    variants: List[str] = Field(
        default_factory=list, description="Surface forms observed for the term"
    )


class DocumentTopic(BaseModel):
    """A (document, term) link with the number of occurrences in that document."""

    model_config = ConfigDict(frozen=True)

    document_id: str = Field(description="Identifier of the document")
    term: str = Field(description="Normalized term string")
    occurrences: int = Field(description="Occurrences of the term in the document", ge=1)
    tfidf: Optional[float] = Field(
        None, description="TF-IDF weight of the link (set by term enrichment)"
    )


class ExtractionResult(BaseModel):
    """
    Complete result of a term extraction run.

    ``topics`` are in ranked order. ``document_topics`` are in no particular
    order.
    """

    topics: List[Topic] = Field(default_factory=list, description="Ranked terms")
    document_topics: List[DocumentTopic] = Field(
        default_factory=list, description="Per-document term occurrence links"
    )
    failed_documents: List[str] = Field(
        default_factory=list, description="Documents skipped because processing failed"
    )
    unavailable_features: Dict[str, str] = Field(
        default_factory=dict, description="Features skipped during voting, with the reason"
    )
    extractor_version: str = Field(description="Pipeline version for reproducibility")
