"""
Global pytest fixtures and configuration for test suite.

This module provides reusable fixtures for:
- Mock settings/configuration
- Small pre-tagged corpora
- Annotators that need no linguistic model
"""

import datetime
from typing import List

import pytest

from term_extraction.annotation.simple import PreTaggedAnnotator
from term_extraction.config import Settings
from term_extraction.corpus import InMemoryCorpus
from term_extraction.models.configuration import TermExtractionConfig
from term_extraction.models.document import Document


# Pre-tagged (word/TAG[/lemma]) documents about machine learning
PRETAGGED_DOCUMENTS = {
    "doc-01": "deep/JJ neural/JJ networks/NNS/network learn/VBP feature/NN representations/NNS/representation",
    "doc-02": "a/DT neural/JJ network/NN is/VBZ a/DT graph/NN model/NN",
    "doc-03": "the/DT graph/NN model/NN of/IN knowledge/NN uses/VBZ/use neural/JJ networks/NNS/network",
    "doc-04": "feature/NN representations/NNS/representation improve/VBP graph/NN model/NN accuracy/NN",
    "doc-05": "training/NN neural/JJ network/NN models/NNS/model requires/VBZ/require feature/NN representations/NNS/representation",
    "doc-06": "knowledge/NN graph/NN embeddings/NNS/embedding and/CC neural/JJ network/NN training/NN",
    "doc-07": "support/NN vector/NN machines/NNS/machine and/CC neural/JJ networks/NNS/network",
    "doc-08": "graph/NN model/NN training/NN with/IN feature/NN representations/NNS/representation",
}


def make_documents(dated: bool = False) -> List[Document]:
    """Build the sample documents, optionally one year apart."""
    documents = []
    for index, (doc_id, contents) in enumerate(sorted(PRETAGGED_DOCUMENTS.items())):
        date = datetime.date(2015 + index, 6, 1) if dated else None
        documents.append(Document(id=doc_id, contents=contents, date=date))
    return documents


@pytest.fixture
def mock_settings() -> Settings:
    """
    Create mock settings for testing with safe defaults.

    Returns:
        Settings instance with test configuration
    """
    return Settings(
        log_level="INFO",
        log_json=False,  # Easier to read in tests
        default_num_threads=2,
        scheduler_queue_size=4,
        scheduler_timeout_seconds=30,
    )


@pytest.fixture
def documents() -> List[Document]:
    """Sample pre-tagged documents."""
    return make_documents()


@pytest.fixture
def corpus(documents) -> InMemoryCorpus:
    """Sample pre-tagged corpus."""
    return InMemoryCorpus(documents)


@pytest.fixture
def dated_corpus() -> InMemoryCorpus:
    """Sample corpus with one document per year."""
    return InMemoryCorpus(make_documents(dated=True))


@pytest.fixture
def annotator_factory():
    """Factory for the pre-tagged annotator (one per worker thread)."""
    return PreTaggedAnnotator


@pytest.fixture
def base_config() -> TermExtractionConfig:
    """Small deterministic run configuration."""
    return TermExtractionConfig(
        max_terms=5,
        min_term_freq=2,
        num_threads=2,
        features=["comboBasic"],
    )


@pytest.fixture
def make_corpus():
    """Factory for fresh copies of the sample corpus."""

    def _make(extra: List[Document] = (), dated: bool = False) -> InMemoryCorpus:
        return InMemoryCorpus(make_documents(dated=dated) + list(extra))

    return _make
